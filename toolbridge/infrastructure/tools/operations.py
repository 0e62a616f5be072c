"""
Canonical tool names and the closed set of sandbox operations.

Different prompting conventions name the same action differently
(``bash`` vs ``run_command``, ``write_file`` vs ``Write``). Everything is
normalised to one canonical name here, and the executor only ever dispatches
on the Operation enum.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Operation(Enum):
    BASH = "Bash"
    READ_FILE = "ReadFile"
    WRITE_FILE = "Write"
    LIST_DIR = "ListDir"
    EDIT = "Edit"
    UNSUPPORTED = ""

    @classmethod
    def resolve(cls, tool_name: str) -> "Operation":
        canonical = canonical_tool_name(tool_name)
        for op in cls:
            if op is not cls.UNSUPPORTED and op.value == canonical:
                return op
        return cls.UNSUPPORTED


WRITE = "Write"
BASH = "Bash"
WEB_SEARCH = "WebSearch"
WEB_FETCH = "WebFetch"
READ_FILE = "ReadFile"
LIST_DIR = "ListDir"
EDIT = "Edit"

CANONICAL_NAMES = (WRITE, BASH, WEB_SEARCH, WEB_FETCH, READ_FILE, LIST_DIR, EDIT)

_ALIASES: Dict[str, str] = {
    "bash": BASH,
    "run_command": BASH,
    "read_file": READ_FILE,
    "WriteFile": WRITE,
    "write_file": WRITE,
    "write_to_file": WRITE,
    "list_dir": LIST_DIR,
    "list_directory": LIST_DIR,
    "edit": EDIT,
    "str_replace_editor": EDIT,
    "web_search": WEB_SEARCH,
    "web_fetch": WEB_FETCH,
}


def canonical_tool_name(name: str) -> str:
    """Map a known alias to its canonical name; unknown names pass through."""
    return _ALIASES.get(name, name)


__all__ = ["Operation", "CANONICAL_NAMES", "canonical_tool_name"]
