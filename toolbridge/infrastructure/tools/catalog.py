"""
Tool catalog: normalises caller-supplied tool declarations into ToolSpecs.

Accepted declaration shapes:
- Anthropic:  {"name", "description", "input_schema": {...}}
- OpenAI:     {"type": "function", "function": {"name", "description", "parameters"}}
- Legacy:     {"name", "description", "parameters"}

Anthropic fields win; OpenAI fields are only consulted when the Anthropic
field is missing or empty.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from toolbridge.abstractions.dto.tools import ParamType, ToolParameter, ToolSpec

logger = logging.getLogger(__name__)

_NUMBER_TYPES = {"number", "integer"}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _param_type(details: Mapping[str, Any]) -> ParamType:
    if isinstance(details.get("enum"), list) and details["enum"]:
        return ParamType.ENUM
    raw = details.get("type")
    # JSON schema allows a list of types, e.g. ["string", "null"]
    if isinstance(raw, list):
        raw = next((t for t in raw if t != "null"), None)
    if raw == "boolean":
        return ParamType.BOOLEAN
    if raw in _NUMBER_TYPES:
        return ParamType.NUMBER
    return ParamType.STRING


def _parameters(schema: Mapping[str, Any]) -> Tuple[ToolParameter, ...]:
    props = _mapping(schema.get("properties"))
    required = {r for r in (schema.get("required") or []) if isinstance(r, str)}
    params: List[ToolParameter] = []
    for name, raw in props.items():
        details = _mapping(raw)
        ptype = _param_type(details)
        params.append(
            ToolParameter(
                name=str(name),
                type=ptype,
                description=_text(details.get("description")),
                required=name in required,
                enum=tuple(str(v) for v in details["enum"]) if ptype is ParamType.ENUM else (),
            )
        )
    return tuple(params)


def normalize_declaration(decl: Any) -> Optional[ToolSpec]:
    """Convert one declaration into a ToolSpec, or None when it has no name."""
    if not isinstance(decl, Mapping):
        return None
    fn = _mapping(decl.get("function"))

    name = _text(decl.get("name")) or _text(fn.get("name"))
    if not name:
        return None
    description = _text(decl.get("description")) or _text(fn.get("description"))

    schema = _mapping(decl.get("input_schema")) or _mapping(fn.get("parameters"))
    if not schema and "input_schema" not in decl and "parameters" not in fn:
        schema = _mapping(decl.get("parameters"))

    return ToolSpec(name=name, description=description, parameters=_parameters(schema))


class ToolCatalog:
    """
    Ordered, duplicate-free collection of ToolSpecs.

    Built once per turn. Declarations without a usable name are dropped, as are
    later declarations reusing a name already in the catalog.
    """

    def __init__(self, tools: Iterable[ToolSpec] = ()):
        self._tools: Dict[str, ToolSpec] = {}
        for spec in tools:
            if spec.name in self._tools:
                logger.warning("Dropping duplicate tool declaration '%s'", spec.name)
                continue
            self._tools[spec.name] = spec

    @classmethod
    def from_declarations(cls, declarations: Optional[Iterable[Any]]) -> "ToolCatalog":
        specs: List[ToolSpec] = []
        for index, decl in enumerate(declarations or []):
            spec = normalize_declaration(decl)
            if spec is None:
                logger.warning("Dropping tool declaration #%d without a name", index)
                continue
            specs.append(spec)
        return cls(specs)

    def list_tools(self) -> List[ToolSpec]:
        return list(self._tools.values())

    def get_tool(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


__all__ = ["ToolCatalog", "normalize_declaration"]
