import pytest

from toolbridge.abstractions.dto.tools import Protocol
from toolbridge.infrastructure.tools.catalog import ToolCatalog
from toolbridge.infrastructure.tools.prompt import PromptComposer


@pytest.fixture
def catalog():
    return ToolCatalog.from_declarations(
        [
            {
                "name": "get_weather",
                "description": "Current weather for a city",
                "input_schema": {
                    "type": "object",
                    "properties": {
                        "city": {"type": "string", "description": "City name"},
                        "units": {"type": "string", "enum": ["metric", "imperial"]},
                    },
                    "required": ["city"],
                },
            },
            {"type": "function", "function": {"name": "ping"}},
        ]
    )


STRUCTURED_GOLDEN = """\
## Available tools

When you need to perform an action, call a tool using exactly this format:

<tool_call>
{"tool": "TOOL_NAME", "PARAMETER_NAME": "PARAMETER_VALUE"}
</tool_call>

Tools:

### get_weather
Current weather for a city
Parameters:
- city (string) (required): City name
- units (enum: metric, imperial)

### ping
Parameters: none

Rules:
- Call one tool at a time.
- Wrap every tool call in <tool_call> tags.
- Wait for the tool result before continuing."""


TAG_GOLDEN = """\
## Available tools

When you need to perform an action, use these tags:

Write files: <write path="/path/to/file">content</write>
Run commands: <exec>command</exec>
Web search: <search>query</search>
Fetch URL: <fetch>url</fetch>

Tools:

### get_weather
Current weather for a city
Parameters:
- city (string) (required): City name
- units (enum: metric, imperial)

### ping
Parameters: none

Rules:
- Call one tool at a time.
- Wait for the tool result before continuing."""


def test_structured_golden(catalog):
    assert PromptComposer().compose(catalog) == STRUCTURED_GOLDEN


def test_tag_golden(catalog):
    assert PromptComposer(Protocol.TAG).compose(catalog) == TAG_GOLDEN


def test_convention_accepts_plain_string(catalog):
    assert PromptComposer("tag").compose(catalog) == TAG_GOLDEN


def test_output_is_deterministic(catalog):
    composer = PromptComposer()
    renders = {composer.compose(catalog) for _ in range(5)}
    renders.add(PromptComposer().compose(catalog.list_tools()))
    assert len(renders) == 1


def test_catalog_order_is_preserved():
    catalog = ToolCatalog.from_declarations([{"name": "b"}, {"name": "a"}, {"name": "c"}])
    text = PromptComposer().compose(catalog)
    assert text.index("### b") < text.index("### a") < text.index("### c")


def test_empty_catalog_renders_nothing():
    assert PromptComposer().compose(ToolCatalog()) == ""
    assert PromptComposer(Protocol.TAG).compose([]) == ""


class TestInject:
    def test_appends_after_blank_line(self, catalog):
        result = PromptComposer().inject("You are a helpful assistant.\n", catalog)
        assert result == "You are a helpful assistant.\n\n" + STRUCTURED_GOLDEN

    def test_empty_base_prompt(self, catalog):
        assert PromptComposer().inject("", catalog) == STRUCTURED_GOLDEN

    def test_empty_catalog_leaves_prompt_untouched(self):
        assert PromptComposer().inject("Base prompt.  ", []) == "Base prompt.  "
