import pytest

from toolbridge.abstractions.dto.tools import Protocol
from toolbridge.infrastructure.tools.extraction import ExtractionEngine


@pytest.fixture(scope="module")
def parser():
    return ExtractionEngine(protocols=(Protocol.STRUCTURED,))


class TestStructuredBlocks:
    def test_delimited_tool_call(self, parser):
        text = 'Let me look.\n<tool_call>\n{"tool": "Bash", "command": "ls -la"}\n</tool_call>\nDone.'
        result = parser.extract(text)
        assert len(result.calls) == 1
        call = result.calls[0]
        assert call.tool_name == "Bash"
        assert call.arguments.to_dict() == {"command": "ls -la"}
        assert call.id == "call0"
        assert call.protocol is Protocol.STRUCTURED
        assert result.residue == "Let me look.\n\nDone."

    def test_fenced_json_with_language_tag_json(self, parser):
        text = (
            "Thoughts...\n"
            "```json\n"
            '{"tool":"Write","input":{"path":"demo.txt","content":"ok"}}\n'
            "```\n"
            "done."
        )
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.calls[0].tool_name == "Write"
        assert result.calls[0].arguments.to_dict() == {"path": "demo.txt", "content": "ok"}
        assert result.residue == "Thoughts...\n\ndone."

    def test_fenced_json_without_language_tag(self, parser):
        text = (
            "Here you go:\n"
            "```\n"
            '{"tool":"ReadFile","path":"demo.txt"}\n'
            "```\n"
        )
        result = parser.extract(text)
        assert [c.tool_name for c in result.calls] == ["ReadFile"]
        assert result.residue == "Here you go:"

    def test_bare_single_line_object(self, parser):
        text = 'Running it now {"tool": "Bash", "command": "pwd"} and then reporting back.'
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.calls[0].source_span == '{"tool": "Bash", "command": "pwd"}'
        assert result.residue == "Running it now  and then reporting back."

    def test_name_key_accepted_inside_delimiters(self, parser):
        text = '<tool_call>{"name": "ListDir", "path": "."}</tool_call>'
        result = parser.extract(text)
        assert result.calls[0].tool_name == "ListDir"
        assert result.calls[0].arguments.to_dict() == {"path": "."}
        assert result.residue == ""

    def test_input_object_used_verbatim(self, parser):
        text = '<tool_call>{"tool": "Edit", "type": "x", "extra": 1, "input": {"path": "a", "replace_all": true}}</tool_call>'
        call = parser.extract(text).calls[0]
        assert call.arguments.to_dict() == {"path": "a", "replace_all": True}

    def test_flat_keys_exclude_reserved(self, parser):
        text = '<tool_call>{"tool": "Bash", "name": "ignored", "type": "function", "command": "ls"}</tool_call>'
        call = parser.extract(text).calls[0]
        assert call.tool_name == "Bash"
        assert call.arguments.to_dict() == {"command": "ls"}

    def test_aliases_are_canonicalised(self, parser):
        text = '<tool_call>{"tool": "run_command", "CommandLine": "ls"}</tool_call>'
        assert parser.extract(text).calls[0].tool_name == "Bash"

    def test_unknown_tool_names_pass_through(self, parser):
        text = '<tool_call>{"tool": "get_weather", "city": "Oslo"}</tool_call>'
        assert parser.extract(text).calls[0].tool_name == "get_weather"

    def test_fenced_tool_call_inside_delimiters(self, parser):
        text = '<tool_call>\n```json\n{"tool": "Bash", "command": "ls"}\n```\n</tool_call>'
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.residue == ""

    def test_braces_inside_strings(self, parser):
        text = 'ok {"tool": "Bash", "command": "echo \'}{\' && awk \'{print $1}\' f"} end'
        result = parser.extract(text)
        assert result.calls[0].arguments.to_dict()["command"] == "echo '}{' && awk '{print $1}' f"
        assert result.residue == "ok  end"

    @pytest.mark.parametrize(
        "text",
        [
            # trailing comma inside object
            '```json\n{"tool":"Bash","command":"ls",}\n```',
            # single quotes instead of JSON double quotes
            "```json\n{'tool':'Bash','command':'ls'}\n```",
            # unterminated object
            '<tool_call>{"tool": "Bash", "command": "ls"</tool_call>',
        ],
    )
    def test_malformed_json_is_left_in_residue(self, parser, text):
        result = parser.extract(text)
        assert result.calls == []
        assert result.residue == text.strip()

    @pytest.mark.parametrize(
        "text",
        [
            '<tool_call>{"command": "ls"}</tool_call>',
            '<tool_call>{"tool": "", "command": "ls"}</tool_call>',
            '<tool_call>{"tool": 42}</tool_call>',
            '```json\n{"message":"hello","value":1}\n```',
        ],
    )
    def test_nameless_objects_are_skipped(self, parser, text):
        result = parser.extract(text)
        assert result.calls == []
        assert result.residue == text

    def test_multiple_json_blocks_only_one_matches_tool_call(self, parser):
        text = (
            "Intro...\n"
            "```json\n"
            '{"foo":"bar"}\n'
            "```\n"
            "Middle text\n"
            "```json\n"
            '{"tool":"Write","path":"demo.txt","content":"x"}\n'
            "```\n"
            "End."
        )
        result = parser.extract(text)
        assert [c.tool_name for c in result.calls] == ["Write"]
        assert '{"foo":"bar"}' in result.residue
        assert "demo.txt" not in result.residue

    def test_plain_text_no_json(self, parser):
        text = "No JSON here. Just plain text and no tool call structure at all."
        result = parser.extract(text)
        assert result.calls == []
        assert result.residue == text

    def test_nested_object_without_tool_is_not_split(self, parser):
        text = 'config: {"settings": {"tool": "Bash", "command": "ls"}}'
        assert parser.extract(text).calls == []


class TestOverlapDedupe:
    def test_fenced_block_counted_once(self, parser):
        # the same object satisfies the fenced and the bare pattern
        text = 'Before\n```json\n{"tool": "Bash", "command": "ls"}\n```\nAfter'
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.calls[0].source_span.startswith("```json")
        assert result.residue == "Before\n\nAfter"

    def test_delimited_wins_over_fence_and_bare(self, parser):
        text = '<tool_call>\n```\n{"tool": "Bash", "command": "ls"}\n```\n</tool_call>'
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.calls[0].source_span == text

    def test_unlabeled_fence_counted_once(self, parser):
        text = '```\n{"tool": "ReadFile", "path": "a.txt"}\n```'
        result = parser.extract(text)
        assert len(result.calls) == 1
        assert result.residue == ""

    def test_ids_follow_text_order(self, parser):
        text = (
            '{"tool": "Bash", "command": "first"}\n'
            '<tool_call>{"tool": "Bash", "command": "second"}</tool_call>'
        )
        calls = parser.extract(text).calls
        assert [c.id for c in calls] == ["call0", "call1"]
        assert [c.arguments.to_dict()["command"] for c in calls] == ["first", "second"]


def test_scenario_b_two_fenced_blocks(parser):
    text = (
        "First I'll list the directory.\n"
        '```\n{"tool":"Bash","command":"ls"}\n```\n'
        "Then read the file.\n"
        '```\n{"tool":"ReadFile","path":"/tmp/a.txt"}\n```\n'
    )
    result = parser.extract(text)
    assert [(c.tool_name, c.arguments.to_dict()) for c in result.calls] == [
        ("Bash", {"command": "ls"}),
        ("ReadFile", {"path": "/tmp/a.txt"}),
    ]
    assert "```" not in result.residue
    assert result.residue == "First I'll list the directory.\n\nThen read the file."


def test_inline_fences(parser):
    text = 'Do this: ``` {"tool":"Bash","command":"ls"} ``` now'
    result = parser.extract(text)
    assert len(result.calls) == 1
    assert result.residue == "Do this:  now"


def test_openai_tool_call_shape(parser):
    call = parser.extract('<tool_call>{"tool": "Bash", "command": "ls"}</tool_call>').calls[0]
    assert call.to_openai_tool_call() == {
        "id": "call0",
        "type": "function",
        "function": {"name": "Bash", "arguments": '{"command": "ls"}'},
    }
