import os

import pytest

from conftest import read_bytes
from toolbridge import Config, ToolBridge, build_tool_bridge
from toolbridge.abstractions.dto.tools import ErrorKind, Protocol


@pytest.fixture
def bridge(temp_workspace) -> ToolBridge:
    return build_tool_bridge(Config(workdir=temp_workspace, allowed_roots=(), command_timeout=5))


RESPONSE = (
    "Creating the note now.\n"
    '<write path="note.txt">first draft</write>\n'
    '<tool_call>{"tool": "Edit", "input": {"path": "note.txt", "old_string": "first", "new_string": "final"}}</tool_call>\n'
    '```json\n{"tool": "read_file", "path": "note.txt"}\n```\n'
    "<search>latest release notes</search>\n"
    "All done."
)


def test_run_turn_end_to_end(bridge, temp_workspace):
    turn = bridge.run_turn(RESPONSE)

    assert [c.id for c in turn.calls] == ["write0", "call0", "call1", "search0"]
    assert [c.tool_name for c in turn.calls] == ["Write", "Edit", "ReadFile", "WebSearch"]
    assert len(turn.outcomes) == len(turn.envelopes) == len(turn.calls)
    assert [e.call_id for e in turn.envelopes] == [c.id for c in turn.calls]

    assert [o.success for o in turn.outcomes] == [True, True, True, False]
    assert turn.outcomes[2].output == "final draft"
    assert turn.outcomes[3].error_kind is ErrorKind.UNKNOWN_TOOL
    assert turn.envelopes[3].is_error
    assert read_bytes(os.path.join(temp_workspace, "note.txt")) == b"final draft"

    assert turn.residue == "Creating the note now.\n\n\n\n\nAll done."
    assert turn.has_calls


def test_plain_response_has_no_calls(bridge):
    turn = bridge.run_turn("  Just an answer, nothing to run.  ")
    assert not turn.has_calls
    assert turn.outcomes == [] and turn.envelopes == []
    assert turn.residue == "Just an answer, nothing to run."
    assert turn.feedback_text() == ""


def test_feedback_text(bridge):
    turn = bridge.run_turn('<tool_call>{"tool": "ListDir"}</tool_call><exec>definitely-not-a-command-xyz</exec>')
    blocks = turn.feedback_text().split("\n\n<tool_result")
    assert len(blocks) == 2
    assert blocks[0].startswith('<tool_result id="call0" status="ok">\nDirectory: ')
    assert blocks[1].startswith(' id="exec0" status="error">\nError [ProcessNonZeroExit]')


def test_default_catalog_declares_builtin_operations(bridge):
    assert bridge.catalog.names() == ["Bash", "ReadFile", "Write", "ListDir", "Edit"]
    fragment = bridge.prompt_fragment()
    assert fragment.startswith("## Available tools")
    assert "### Edit" in fragment
    assert "- old_string (string) (required): Exact text to replace" in fragment


def test_caller_catalog_replaces_builtins(temp_workspace):
    bridge = build_tool_bridge(
        Config(workdir=temp_workspace, prompt_convention=Protocol.TAG),
        tools=[{"type": "function", "function": {"name": "lookup", "description": "Find a record"}}],
    )
    assert bridge.catalog.names() == ["lookup"]
    assert "Run commands: <exec>command</exec>" in bridge.system_prompt("Base.")
    assert bridge.system_prompt("Base.").startswith("Base.\n\n## Available tools")


def test_empty_catalog_adds_nothing_to_prompt(temp_workspace):
    bridge = build_tool_bridge(Config(workdir=temp_workspace), tools=[])
    assert bridge.prompt_fragment() == ""
    assert bridge.system_prompt("Base.") == "Base."


def test_protocol_selection(temp_workspace):
    bridge = build_tool_bridge(Config(workdir=temp_workspace, protocols=(Protocol.STRUCTURED,)))
    turn = bridge.run_turn("<exec>ls</exec>")
    assert turn.calls == []
    assert turn.residue == "<exec>ls</exec>"


def test_bridges_share_nothing(tmp_path):
    a_dir, b_dir = tmp_path / "a", tmp_path / "b"
    a_dir.mkdir()
    b_dir.mkdir()
    a = build_tool_bridge(Config(workdir=str(a_dir)))
    b = build_tool_bridge(Config(workdir=str(b_dir)))
    a.run_turn('<write path="x.txt">a</write>')
    assert (a_dir / "x.txt").read_text() == "a"
    assert not (b_dir / "x.txt").exists()
    assert a.executor is not b.executor
