"""
Shared tool DTOs for catalogs, parsed calls, execution outcomes and results.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .arguments import Arguments


class ParamType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    ENUM = "enum"


@dataclass(frozen=True)
class ToolParameter:
    name: str
    type: ParamType = ParamType.STRING
    description: str = ""
    required: bool = False
    enum: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ToolSpec:
    """Canonical tool declaration, independent of the shape it was declared in."""
    name: str
    description: str = ""
    parameters: Tuple[ToolParameter, ...] = ()

    @property
    def required(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]


class Protocol(str, Enum):
    """Text conventions a model can use to request a tool call."""
    TAG = "tag"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class ParsedCall:
    id: str
    tool_name: str
    arguments: Arguments
    source_span: str
    start: int = 0
    end: int = 0
    protocol: Protocol = Protocol.STRUCTURED

    def to_openai_tool_call(self) -> Dict[str, Any]:
        """Render in the OpenAI chat ``tool_calls`` item shape."""
        return {
            "id": self.id,
            "type": "function",
            "function": {
                "name": self.tool_name,
                "arguments": json.dumps(self.arguments.to_dict(), ensure_ascii=False),
            },
        }


@dataclass
class ExtractionResult:
    calls: List[ParsedCall]
    residue: str


class ErrorKind(str, Enum):
    UNKNOWN_TOOL = "UnknownTool"
    MISSING_PARAMETER = "MissingParameter"
    PATH_RESOLUTION = "PathResolutionError"
    PROCESS_TIMEOUT = "ProcessTimeout"
    PROCESS_NONZERO_EXIT = "ProcessNonZeroExit"
    IO_ERROR = "IOError"
    NOT_FOUND = "NotFound"


@dataclass
class ExecutionOutcome:
    call_id: str
    success: bool
    output: str = ""
    error_kind: Optional[ErrorKind] = None
    error_detail: str = ""


@dataclass(frozen=True)
class SandboxPolicy:
    """
    Execution limits for one SandboxExecutor.

    root_directory is the working directory relative paths resolve against.
    allowed_roots lists extra directories absolute paths may point into when
    confine_paths is on.
    """
    root_directory: str
    allowed_roots: FrozenSet[str] = field(default_factory=frozenset)
    command_timeout: float = 30.0
    confine_paths: bool = True
    shell: Optional[str] = None

    def __post_init__(self) -> None:
        if self.command_timeout <= 0:
            raise ValueError("command_timeout must be positive")
        object.__setattr__(self, "root_directory", os.path.abspath(os.path.expanduser(self.root_directory)))
        object.__setattr__(
            self,
            "allowed_roots",
            frozenset(os.path.abspath(os.path.expanduser(p)) for p in self.allowed_roots),
        )


@dataclass(frozen=True)
class ResultEnvelope:
    call_id: str
    is_error: bool
    content: str

    def to_anthropic(self) -> Dict[str, Any]:
        return {
            "type": "tool_result",
            "tool_use_id": self.call_id,
            "content": self.content,
            "is_error": self.is_error,
        }

    def to_openai(self) -> Dict[str, Any]:
        return {
            "role": "tool",
            "tool_call_id": self.call_id,
            "content": self.content,
        }

    def to_text(self) -> str:
        """Plain-text feedback block for models without native tool results."""
        status = "error" if self.is_error else "ok"
        return f'<tool_result id="{self.call_id}" status="{status}">\n{self.content}\n</tool_result>'


__all__ = [
    "ParamType",
    "ToolParameter",
    "ToolSpec",
    "Protocol",
    "ParsedCall",
    "ExtractionResult",
    "ErrorKind",
    "ExecutionOutcome",
    "SandboxPolicy",
    "ResultEnvelope",
]
