"""
Extraction of tool calls from free-form model output.

Two conventions are recognised:

Tag protocol:
    <write path="P">BODY</write>   -> Write {file_path, content}
    <exec>CMD</exec>               -> Bash {command}
    <search>Q</search>             -> WebSearch {query}
    <fetch>URL</fetch>             -> WebFetch {url}

Structured-block protocol, in priority order:
    1. <tool_call>{...}</tool_call>
    2. ```json fenced block holding {"tool": ...}
    3. ``` unlabeled fenced block holding {"tool": ...}
    4. bare {"tool": ...} object

Within a protocol, every accepted call claims the byte range it was matched
from and a later candidate overlapping a claimed range is ignored. Across the
two protocols the outermost match wins: a tag inside a JSON string belongs to
the structured call, JSON inside a <write> body belongs to the tag. Rejected
candidates (bad JSON, no tool name) are left in the narrative residue untouched.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from toolbridge.abstractions.dto.arguments import Arguments
from toolbridge.abstractions.dto.tools import ExtractionResult, ParsedCall, Protocol
from .operations import BASH, WEB_FETCH, WEB_SEARCH, WRITE, canonical_tool_name

logger = logging.getLogger(__name__)

# (id prefix, canonical tool, pattern)
_TAG_PATTERNS = (
    ("write", WRITE, re.compile(r'<write\s+path="([^"]+)">(.*?)</write>', re.DOTALL)),
    ("exec", BASH, re.compile(r"<exec>(.*?)</exec>", re.DOTALL)),
    ("search", WEB_SEARCH, re.compile(r"<search>(.*?)</search>", re.DOTALL)),
    ("fetch", WEB_FETCH, re.compile(r"<fetch>(.*?)</fetch>", re.DOTALL)),
)
_TAG_FIELDS = {BASH: "command", WEB_SEARCH: "query", WEB_FETCH: "url"}

_DELIMITED = re.compile(r"<tool_call>(.*?)</tool_call>", re.DOTALL)
_FENCE = re.compile(r"```[ \t]*([A-Za-z0-9_.+-]*)[ \t]*\r?\n?(.*?)```", re.DOTALL)

_STRUCTURED_ID_PREFIX = "call"
_RESERVED_KEYS = ("tool", "name", "type")

# raw_decode recurses per nesting level; adversarial text can exhaust the stack
_DECODE_ERRORS = (ValueError, RecursionError)

_decoder = json.JSONDecoder()


class _Match(NamedTuple):
    start: int
    end: int
    protocol: Protocol
    prefix: str
    tool_name: str
    arguments: Arguments


class _Claims:
    """Byte ranges already turned into calls."""

    def __init__(self) -> None:
        self._ranges: List[Tuple[int, int]] = []

    def overlaps(self, start: int, end: int) -> bool:
        return any(s < end and start < e for s, e in self._ranges)

    def covering(self, pos: int) -> Optional[int]:
        """End of the claimed range containing pos, if any."""
        for s, e in self._ranges:
            if s <= pos < e:
                return e
        return None

    def claim(self, start: int, end: int) -> None:
        self._ranges.append((start, end))


def _decode_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse text that must be exactly one JSON object (surrounding whitespace allowed)."""
    body = text.strip()
    if not body.startswith("{"):
        return None
    try:
        obj, end = _decoder.raw_decode(body)
    except _DECODE_ERRORS:
        return None
    if body[end:].strip():
        return None
    return obj if isinstance(obj, dict) else None


def _unfence(text: str) -> str:
    """Strip one surrounding ``` fence, as models often wrap <tool_call> bodies."""
    body = text.strip()
    if body.startswith("```") and body.endswith("```") and len(body) >= 6:
        first_newline = body.find("\n")
        if first_newline != -1:
            return body[first_newline + 1:-3]
    return body


def _tool_name(obj: Dict[str, Any]) -> Optional[str]:
    for key in ("tool", "name"):
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _call_arguments(obj: Dict[str, Any]) -> Optional[Arguments]:
    raw = obj["input"] if isinstance(obj.get("input"), dict) else {
        k: v for k, v in obj.items() if k not in _RESERVED_KEYS
    }
    try:
        return Arguments.from_json(raw)
    except RecursionError:
        return None


def _remove_spans(text: str, spans: Iterable[Tuple[int, int]]) -> str:
    pieces: List[str] = []
    cursor = 0
    for start, end in sorted(spans):
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def _outermost(matches: Iterable[_Match]) -> List[_Match]:
    """Drop matches overlapping an earlier-starting (or same-start, longer) match."""
    claims = _Claims()
    kept: List[_Match] = []
    for m in sorted(matches, key=lambda m: (m.start, m.start - m.end)):
        if claims.overlaps(m.start, m.end):
            continue
        claims.claim(m.start, m.end)
        kept.append(m)
    return kept


class ExtractionEngine:
    """
    Pulls ParsedCalls out of raw model output.

    Args:
        protocols: Conventions to recognise; both by default
    """

    def __init__(self, protocols: Sequence[Protocol] = (Protocol.TAG, Protocol.STRUCTURED)):
        self.protocols = tuple(Protocol(p) for p in protocols)

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract every call from text.

        Returns:
            ExtractionResult with calls ordered by where they start in the text
            and the residue: text minus every matched span, whitespace-trimmed
        """
        text = text or ""
        matches: List[_Match] = []
        if Protocol.TAG in self.protocols:
            matches.extend(self._tag_matches(text))
        if Protocol.STRUCTURED in self.protocols:
            matches.extend(self._structured_matches(text))

        calls: List[ParsedCall] = []
        seq: Dict[str, int] = {}
        for m in _outermost(matches):
            n = seq.get(m.prefix, 0)
            seq[m.prefix] = n + 1
            calls.append(
                ParsedCall(
                    id=f"{m.prefix}{n}",
                    tool_name=m.tool_name,
                    arguments=m.arguments,
                    source_span=text[m.start:m.end],
                    start=m.start,
                    end=m.end,
                    protocol=m.protocol,
                )
            )

        residue = _remove_spans(text, ((c.start, c.end) for c in calls)).strip()
        if calls:
            logger.debug("extracted %d call(s): %s", len(calls), ", ".join(c.id for c in calls))
        return ExtractionResult(calls=calls, residue=residue)

    def has_calls(self, text: str) -> bool:
        """
        True when extract would return at least one call.

        Stops at the first tag match or named structured candidate instead of
        building the full result.
        """
        text = text or ""
        if Protocol.TAG in self.protocols:
            if any(pattern.search(text) for _, _, pattern in _TAG_PATTERNS):
                return True
        if Protocol.STRUCTURED in self.protocols:
            for _, _, obj in self._structured_candidates(text, _Claims()):
                if _tool_name(obj) is not None and _call_arguments(obj) is not None:
                    return True
        return False

    # -- tag protocol -------------------------------------------------------

    def _tag_matches(self, text: str) -> List[_Match]:
        claims = _Claims()
        matches: List[_Match] = []
        for prefix, tool, pattern in _TAG_PATTERNS:
            for m in pattern.finditer(text):
                start, end = m.span()
                if claims.overlaps(start, end):
                    continue
                if tool == WRITE:
                    raw = {"file_path": m.group(1), "content": m.group(2)}
                else:
                    raw = {_TAG_FIELDS[tool]: m.group(1).strip()}
                claims.claim(start, end)
                matches.append(_Match(start, end, Protocol.TAG, prefix, tool, Arguments.from_json(raw)))
        return matches

    # -- structured-block protocol ------------------------------------------

    def _structured_matches(self, text: str) -> List[_Match]:
        claims = _Claims()
        matches: List[_Match] = []
        for start, end, obj in self._structured_candidates(text, claims):
            name = _tool_name(obj)
            if name is None:
                continue
            arguments = _call_arguments(obj)
            if arguments is None:
                continue
            claims.claim(start, end)
            matches.append(
                _Match(start, end, Protocol.STRUCTURED, _STRUCTURED_ID_PREFIX, canonical_tool_name(name), arguments)
            )
        return matches

    def _structured_candidates(self, text: str, claims: _Claims) -> Iterator[Tuple[int, int, Dict[str, Any]]]:
        """
        Yield (start, end, object) candidates in priority order.

        Generator: each candidate is claimed by the caller before the next one
        is produced, so later patterns see earlier claims.
        """
        for m in _DELIMITED.finditer(text):
            obj = _decode_object(_unfence(m.group(1)))
            if obj is not None and not claims.overlaps(*m.span()):
                yield m.start(), m.end(), obj

        for wanted_label in ("json", ""):
            for m in _FENCE.finditer(text):
                if m.group(1).strip().lower() != wanted_label:
                    continue
                obj = _decode_object(m.group(2))
                if obj is not None and "tool" in obj and not claims.overlaps(*m.span()):
                    yield m.start(), m.end(), obj

        yield from self._bare_objects(text, claims)

    def _bare_objects(self, text: str, claims: _Claims) -> Iterator[Tuple[int, int, Dict[str, Any]]]:
        pos = text.find("{")
        while pos != -1:
            claimed_end = claims.covering(pos)
            if claimed_end is not None:
                pos = text.find("{", claimed_end)
                continue
            try:
                obj, end = _decoder.raw_decode(text, pos)
            except _DECODE_ERRORS:
                pos = text.find("{", pos + 1)
                continue
            if isinstance(obj, dict) and "tool" in obj and not claims.overlaps(pos, end):
                yield pos, end, obj
            # nested objects belong to this one; resume after it
            pos = text.find("{", end)


__all__ = ["ExtractionEngine"]
