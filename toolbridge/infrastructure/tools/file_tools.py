# toolbridge/infrastructure/tools/file_tools.py

import logging
import os
from typing import Dict, Any

from toolbridge.abstractions.dto.arguments import Arguments
from .errors import MissingParameterError, TextNotFoundError, ToolIOError
from .operations import EDIT, LIST_DIR, READ_FILE, WRITE
from .tool_base import Tool

logger = logging.getLogger(__name__)

READ_PATH_FIELDS = ("path", "file_path")
WRITE_PATH_FIELDS = ("path", "file_path", "TargetFile")
CONTENT_FIELDS = ("content", "CodeContent")
LIST_PATH_FIELDS = ("path", "DirectoryPath")
EDIT_PATH_FIELDS = ("path", "file_path")


def _read_text(filepath: str, errors: str = "replace") -> str:
    """
    Read a file as UTF-8 without newline translation.

    ``errors="surrogateescape"`` keeps undecodable bytes so a later
    ``_write_text(..., errors="surrogateescape")`` writes them back unchanged.
    """
    if not os.path.isfile(filepath):
        raise ToolIOError(f"file '{filepath}' not found")
    try:
        with open(filepath, "r", encoding="utf-8", errors=errors, newline="") as f:
            return f.read()
    except OSError as e:
        raise ToolIOError(f"failed to read '{filepath}': {e.strerror or e}") from e


def _write_text(filepath: str, content: str, errors: str = "strict") -> int:
    try:
        data = content.encode("utf-8", errors)
    except UnicodeEncodeError as e:
        raise ToolIOError(f"cannot encode content for '{filepath}': {e.reason}") from e
    try:
        with open(filepath, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ToolIOError(f"failed to write '{filepath}': {e.strerror or e}") from e
    return len(data)


class ReadFileTool(Tool):

    @property
    def name(self) -> str:
        return READ_FILE

    @property
    def description(self) -> str:
        return "Reads the full contents of a text file."

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "File path, relative to the working directory or absolute"
                }
            },
            "required": ["path"]
        }

    def run(self, arguments: Arguments) -> str:
        filepath = self.paths.resolve(self.require_text(arguments, READ_PATH_FIELDS))
        return _read_text(filepath)


class WriteFileTool(Tool):
    """Creates or overwrites a file, creating parent directories as needed."""

    @property
    def name(self) -> str:
        return WRITE

    @property
    def description(self) -> str:
        return "Creates or overwrites a file with the given content."

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "File path, relative to the working directory or absolute"
                },
                "content": {
                    "type": "string",
                    "description": "Content to write"
                }
            },
            "required": ["path", "content"]
        }

    def run(self, arguments: Arguments) -> str:
        filepath = self.paths.resolve(self.require_text(arguments, WRITE_PATH_FIELDS))
        content = self.require_text(arguments, CONTENT_FIELDS, allow_empty=True)

        parent = os.path.dirname(filepath)
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise ToolIOError(f"failed to create directory '{parent}': {e.strerror or e}") from e

        written = _write_text(filepath, content)
        logger.debug("write: %s (%d bytes)", filepath, written)
        return f"Wrote {written} bytes to '{filepath}'"


class ListDirTool(Tool):

    @property
    def name(self) -> str:
        return LIST_DIR

    @property
    def description(self) -> str:
        return "Lists the immediate entries of a directory with file sizes."

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Directory path; defaults to the working directory"
                }
            },
            "required": []
        }

    def run(self, arguments: Arguments) -> str:
        raw = self.optional_text(arguments, LIST_PATH_FIELDS)
        dirpath = self.paths.resolve(raw) if raw else self.paths.root
        if not os.path.isdir(dirpath):
            raise ToolIOError(f"'{dirpath}' is not a directory or does not exist")

        try:
            with os.scandir(dirpath) as it:
                entries = sorted(it, key=lambda e: e.name)
                lines = [f"Directory: {dirpath}", ""]
                for entry in entries:
                    if entry.is_dir():
                        lines.append(f"[DIR] {entry.name}/")
                    else:
                        try:
                            size = entry.stat().st_size
                        except OSError:
                            size = 0
                        lines.append(f"[FILE] {entry.name} ({size} bytes)")
        except OSError as e:
            raise ToolIOError(f"failed to list '{dirpath}': {e.strerror or e}") from e
        return "\n".join(lines)


class EditTool(Tool):
    """
    Literal find-and-replace inside one file.

    The file is only rewritten once old_string is known to be present, so a
    failed edit leaves it byte-for-byte unchanged.
    """

    @property
    def name(self) -> str:
        return EDIT

    @property
    def description(self) -> str:
        return (
            "Replaces an exact string in a file. Replaces the first occurrence, or every "
            "occurrence when replace_all is true."
        )

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "File to edit"
                },
                "old_string": {
                    "type": "string",
                    "description": "Exact text to replace"
                },
                "new_string": {
                    "type": "string",
                    "description": "Replacement text"
                },
                "replace_all": {
                    "type": "boolean",
                    "description": "Replace every occurrence instead of the first"
                }
            },
            "required": ["path", "old_string", "new_string"]
        }

    def run(self, arguments: Arguments) -> str:
        filepath = self.paths.resolve(self.require_text(arguments, EDIT_PATH_FIELDS))
        old = self.require_text(arguments, ("old_string",))
        new = arguments.text("new_string")
        if new is None:
            raise MissingParameterError("new_string")
        replace_all = arguments.flag("replace_all")

        original = _read_text(filepath, errors="surrogateescape")
        count = original.count(old)
        if count == 0:
            raise TextNotFoundError(f"old_string not found in '{filepath}'")

        if replace_all:
            modified = original.replace(old, new)
        else:
            modified = original.replace(old, new, 1)
            count = 1
        _write_text(filepath, modified, errors="surrogateescape")
        return f"Edited '{filepath}' ({count} replacement{'s' if count != 1 else ''})"
