"""
Data transfer objects shared by every layer.
"""

from .arguments import ArgKind, ArgValue, Arguments
from .tools import (
    ErrorKind,
    ExecutionOutcome,
    ExtractionResult,
    ParamType,
    ParsedCall,
    Protocol,
    ResultEnvelope,
    SandboxPolicy,
    ToolParameter,
    ToolSpec,
)

__all__ = [
    "ArgKind",
    "ArgValue",
    "Arguments",
    "ErrorKind",
    "ExecutionOutcome",
    "ExtractionResult",
    "ParamType",
    "ParsedCall",
    "Protocol",
    "ResultEnvelope",
    "SandboxPolicy",
    "ToolParameter",
    "ToolSpec",
]
