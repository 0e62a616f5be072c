"""
Renders the tool catalog and calling convention into a system-prompt block.

Output depends only on the ordered catalog and the chosen convention, so the
same catalog always renders the same bytes.
"""

from __future__ import annotations

from typing import Iterable, List

from toolbridge.abstractions.dto.tools import ParamType, Protocol, ToolParameter, ToolSpec

_STRUCTURED_SYNTAX = [
    "When you need to perform an action, call a tool using exactly this format:",
    "",
    "<tool_call>",
    '{"tool": "TOOL_NAME", "PARAMETER_NAME": "PARAMETER_VALUE"}',
    "</tool_call>",
]

_TAG_SYNTAX = [
    "When you need to perform an action, use these tags:",
    "",
    'Write files: <write path="/path/to/file">content</write>',
    "Run commands: <exec>command</exec>",
    "Web search: <search>query</search>",
    "Fetch URL: <fetch>url</fetch>",
]


class PromptComposer:
    """
    Builds the instructional block injected into the system prompt.

    Args:
        convention: Protocol.STRUCTURED for <tool_call> JSON blocks,
            Protocol.TAG for the <write>/<exec>/<search>/<fetch> tags
    """

    def __init__(self, convention: Protocol = Protocol.STRUCTURED):
        self.convention = Protocol(convention)

    def _describe_parameter(self, param: ToolParameter) -> str:
        if param.type is ParamType.ENUM and param.enum:
            type_info = f"enum: {', '.join(param.enum)}"
        else:
            type_info = param.type.value
        line = f"- {param.name} ({type_info})"
        if param.required:
            line += " (required)"
        if param.description:
            line += f": {param.description}"
        return line

    def _describe_tool(self, spec: ToolSpec) -> List[str]:
        lines = [f"### {spec.name}"]
        if spec.description:
            lines.append(spec.description)
        if spec.parameters:
            lines.append("Parameters:")
            lines.extend(self._describe_parameter(p) for p in spec.parameters)
        else:
            lines.append("Parameters: none")
        lines.append("")
        return lines

    def compose(self, tools: Iterable[ToolSpec]) -> str:
        specs = list(tools)
        if not specs:
            return ""

        lines = ["## Available tools", ""]
        if self.convention is Protocol.TAG:
            lines.extend(_TAG_SYNTAX)
        else:
            lines.extend(_STRUCTURED_SYNTAX)
        lines.extend(["", "Tools:", ""])
        for spec in specs:
            lines.extend(self._describe_tool(spec))

        lines.append("Rules:")
        lines.append("- Call one tool at a time.")
        if self.convention is Protocol.STRUCTURED:
            lines.append("- Wrap every tool call in <tool_call> tags.")
        lines.append("- Wait for the tool result before continuing.")
        return "\n".join(lines)

    def inject(self, system_prompt: str, tools: Iterable[ToolSpec]) -> str:
        """Append the tool block to an existing system prompt."""
        block = self.compose(tools)
        if not block:
            return system_prompt
        if not system_prompt:
            return block
        return f"{system_prompt.rstrip()}\n\n{block}"


__all__ = ["PromptComposer"]
