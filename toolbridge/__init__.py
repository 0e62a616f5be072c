"""
toolbridge: text-protocol tool calling for models without native function calls.

Extracts tool calls from raw model output, runs them in a sandbox and returns
result envelopes keyed by call id.
"""

from toolbridge.abstractions.dto import (
    Arguments,
    ErrorKind,
    ExecutionOutcome,
    ExtractionResult,
    ParsedCall,
    Protocol,
    ResultEnvelope,
    SandboxPolicy,
    ToolSpec,
)
from toolbridge.api.di.composition import ToolBridge, TurnResult, build_tool_bridge
from toolbridge.infrastructure.tools.catalog import ToolCatalog
from toolbridge.infrastructure.tools.config import Config
from toolbridge.infrastructure.tools.extraction import ExtractionEngine
from toolbridge.infrastructure.tools.formatter import ResultFormatter
from toolbridge.infrastructure.tools.prompt import PromptComposer
from toolbridge.infrastructure.tools.sandbox import SandboxExecutor

__version__ = "0.1.0"

__all__ = [
    "Arguments",
    "Config",
    "ErrorKind",
    "ExecutionOutcome",
    "ExtractionEngine",
    "ExtractionResult",
    "ParsedCall",
    "PromptComposer",
    "Protocol",
    "ResultEnvelope",
    "ResultFormatter",
    "SandboxExecutor",
    "SandboxPolicy",
    "ToolBridge",
    "ToolCatalog",
    "ToolSpec",
    "TurnResult",
    "build_tool_bridge",
]
