"""
Tool catalog, extraction and execution ports.
"""
from __future__ import annotations
from typing import Protocol, List, Optional, Mapping, Any, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from toolbridge.abstractions.dto.tools import (
        ExecutionOutcome,
        ExtractionResult,
        ParsedCall,
        ToolSpec,
    )


class IToolCatalog(Protocol):
    def list_tools(self) -> List["ToolSpec"]:
        ...
    def get_tool(self, name: str) -> Optional["ToolSpec"]:
        ...


class ICallExtractor(Protocol):
    def extract(self, text: str) -> "ExtractionResult":
        ...


class IToolExecutor(Protocol):
    def execute(self, name: str, arguments: Mapping[str, Any], call_id: str = "") -> "ExecutionOutcome":
        ...
    def execute_all(self, calls: Sequence["ParsedCall"]) -> List["ExecutionOutcome"]:
        ...

__all__ = ["IToolCatalog", "ICallExtractor", "IToolExecutor"]
