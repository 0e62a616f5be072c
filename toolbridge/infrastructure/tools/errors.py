"""
Exceptions raised by sandbox operations.

Operations raise; SandboxExecutor.execute catches and turns each one into a
failed ExecutionOutcome, so none of these ever reach the serving process.
"""

from __future__ import annotations

from toolbridge.abstractions.dto.tools import ErrorKind


class SandboxError(Exception):
    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, detail: str, output: str = ""):
        super().__init__(detail)
        self.detail = detail
        self.output = output


class UnknownToolError(SandboxError):
    kind = ErrorKind.UNKNOWN_TOOL


class MissingParameterError(SandboxError):
    kind = ErrorKind.MISSING_PARAMETER

    def __init__(self, field: str):
        super().__init__(f"missing required parameter '{field}'")
        self.field = field


class PathResolutionError(SandboxError):
    kind = ErrorKind.PATH_RESOLUTION


class ProcessTimeoutError(SandboxError):
    kind = ErrorKind.PROCESS_TIMEOUT


class ProcessExitError(SandboxError):
    kind = ErrorKind.PROCESS_NONZERO_EXIT

    def __init__(self, returncode: int, output: str):
        super().__init__(f"command exited with status {returncode}", output=output)
        self.returncode = returncode


class ToolIOError(SandboxError):
    kind = ErrorKind.IO_ERROR


class TextNotFoundError(SandboxError):
    kind = ErrorKind.NOT_FOUND


__all__ = [
    "SandboxError",
    "UnknownToolError",
    "MissingParameterError",
    "PathResolutionError",
    "ProcessTimeoutError",
    "ProcessExitError",
    "ToolIOError",
    "TextNotFoundError",
]
