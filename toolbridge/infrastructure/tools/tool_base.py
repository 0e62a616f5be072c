# toolbridge/infrastructure/tools/tool_base.py
"""
Base class for sandbox operations.

Each operation declares itself the same way a tool is declared to a model
(name, description, JSONSchema input_schema) so the built-in operations can be
fed straight back into a ToolCatalog.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple

from toolbridge.abstractions.dto.arguments import Arguments
from .errors import MissingParameterError
from .paths import SandboxPaths


class Tool(ABC):
    """
    Abstract base class for sandbox operations.

    Subclasses implement ``run`` and raise SandboxError subclasses on failure;
    they never format errors themselves.
    """

    def __init__(self, paths: SandboxPaths):
        self.paths = paths

    @property
    @abstractmethod
    def name(self) -> str:
        """Canonical tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    @abstractmethod
    def input_schema(self) -> Dict[str, Any]:
        """
        JSONSchema object defining accepted input.
        Must include:
        - type: "object"
        - properties: Parameter definitions
        - required: List of required parameter names
        """
        pass

    @abstractmethod
    def run(self, arguments: Arguments) -> str:
        """Execute the operation and return its textual output."""
        pass

    def get_tool_definition(self) -> Dict[str, Any]:
        """Get the tool definition in Anthropic's format."""
        schema = self.input_schema
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": {
                "type": "object",
                "properties": schema.get("properties", {}) or {},
                "required": schema.get("required", []) or [],
            },
        }

    @staticmethod
    def require_text(arguments: Arguments, names: Tuple[str, ...], allow_empty: bool = False) -> str:
        """Return the first alias present as text, or raise MissingParameterError."""
        value = arguments.text(*names)
        if value is None or (not value and not allow_empty):
            raise MissingParameterError(names[0])
        return value

    @staticmethod
    def optional_text(arguments: Arguments, names: Tuple[str, ...]) -> Optional[str]:
        value = arguments.text(*names)
        return value or None
