"""
Sandbox executor: dispatches canonical tool names to sandbox operations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from toolbridge.abstractions.dto.arguments import Arguments
from toolbridge.abstractions.dto.tools import ExecutionOutcome, ParsedCall, SandboxPolicy
from .errors import SandboxError, ToolIOError, UnknownToolError
from .file_tools import EditTool, ListDirTool, ReadFileTool, WriteFileTool
from .operations import Operation
from .paths import SandboxPaths
from .shell_tool import ShellTool
from .tool_base import Tool

logger = logging.getLogger(__name__)


class SandboxExecutor:
    """
    Executes tool calls under one immutable SandboxPolicy.

    Every call produces exactly one ExecutionOutcome; operation failures are
    reported in the outcome, never raised. The executor keeps no state besides
    its policy, so independent instances (one per work directory, say) never
    interfere with each other.
    """

    def __init__(self, policy: SandboxPolicy):
        self.policy = policy
        paths = SandboxPaths(policy)
        self._tools: Dict[Operation, Tool] = {
            Operation.BASH: ShellTool(paths),
            Operation.READ_FILE: ReadFileTool(paths),
            Operation.WRITE_FILE: WriteFileTool(paths),
            Operation.LIST_DIR: ListDirTool(paths),
            Operation.EDIT: EditTool(paths),
        }
        missing = [op for op in Operation if op is not Operation.UNSUPPORTED and op not in self._tools]
        if missing:
            raise RuntimeError(f"no tool registered for {missing}")

    def tool_definitions(self) -> List[Dict[str, Any]]:
        """Anthropic-shaped declarations for every built-in operation."""
        return [tool.get_tool_definition() for tool in self._tools.values()]

    def execute(self, name: str, arguments: Mapping[str, Any], call_id: str = "") -> ExecutionOutcome:
        """
        Run one tool call.

        Args:
            name: Tool name, canonical or any known alias
            arguments: Arguments instance or a plain JSON mapping
            call_id: Id of the originating ParsedCall

        Returns:
            ExecutionOutcome; failures carry an ErrorKind and detail
        """
        args = arguments if isinstance(arguments, Arguments) else Arguments.from_json(arguments)
        op = Operation.resolve(name)
        try:
            if op is Operation.UNSUPPORTED:
                raise UnknownToolError(f"unknown tool '{name}'")
            output = self._tools[op].run(args)
        except SandboxError as e:
            logger.debug("call %s (%s) failed: %s: %s", call_id, name, e.kind.value, e.detail)
            return ExecutionOutcome(
                call_id=call_id,
                success=False,
                output=e.output,
                error_kind=e.kind,
                error_detail=e.detail,
            )
        except OSError as e:
            err = ToolIOError(str(e))
            logger.debug("call %s (%s) failed with OSError: %s", call_id, name, e)
            return ExecutionOutcome(
                call_id=call_id,
                success=False,
                error_kind=err.kind,
                error_detail=err.detail,
            )

        logger.debug("call %s (%s) succeeded", call_id, name)
        return ExecutionOutcome(call_id=call_id, success=True, output=output)

    def execute_call(self, call: ParsedCall) -> ExecutionOutcome:
        return self.execute(call.tool_name, call.arguments, call_id=call.id)

    def execute_all(self, calls: Sequence[ParsedCall]) -> List[ExecutionOutcome]:
        """Run calls one after another in the given order; a failure never stops the batch."""
        return [self.execute_call(call) for call in calls]


__all__ = ["SandboxExecutor"]
