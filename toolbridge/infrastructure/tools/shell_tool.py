# toolbridge/infrastructure/tools/shell_tool.py

import logging
import os
import signal
import subprocess
from typing import Dict, Any

from toolbridge.abstractions.dto.arguments import Arguments
from .errors import PathResolutionError, ProcessExitError, ProcessTimeoutError, ToolIOError
from .operations import BASH
from .tool_base import Tool

logger = logging.getLogger(__name__)

COMMAND_FIELDS = ("command", "CommandLine")
CWD_FIELDS = ("cwd", "Cwd")

_POSIX = os.name == "posix"


def join_output(stdout: str, stderr: str) -> str:
    """stdout then stderr, newline-separated only when both are non-empty."""
    if stdout and stderr:
        return f"{stdout}\n{stderr}"
    return stdout or stderr


class ShellTool(Tool):
    """
    Runs a command through the shell under the policy's wall-clock timeout.

    The child is started in its own session so a timeout can kill the whole
    process group, including anything the shell spawned.
    """

    @property
    def name(self) -> str:
        return BASH

    @property
    def description(self) -> str:
        return (
            "Executes a shell command in the sandbox working directory. Returns stdout "
            "followed by stderr. Commands exceeding the timeout are killed."
        )

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "description": "The shell command to execute"
                },
                "cwd": {
                    "type": "string",
                    "description": "Working directory for command execution"
                }
            },
            "required": ["command"]
        }

    def run(self, arguments: Arguments) -> str:
        command = self.require_text(arguments, COMMAND_FIELDS)
        cwd_arg = self.optional_text(arguments, CWD_FIELDS)
        cwd = self.paths.resolve(cwd_arg) if cwd_arg else self.paths.root
        if not os.path.isdir(cwd):
            raise PathResolutionError(f"working directory '{cwd}' does not exist")

        timeout = self.paths.policy.command_timeout
        logger.debug("bash: %r (cwd=%s, timeout=%ss)", command, cwd, timeout)

        try:
            proc = subprocess.Popen(
                command,
                shell=True,
                executable=self.paths.policy.shell,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=_POSIX,
            )
        except OSError as e:
            raise ToolIOError(f"failed to start command: {e}") from e

        with proc:
            try:
                stdout, stderr = proc.communicate(timeout=timeout)
            except subprocess.TimeoutExpired:
                self._kill(proc)
                proc.wait()
                logger.debug("bash: killed after %ss: %r", timeout, command)
                raise ProcessTimeoutError(f"command timed out after {timeout:g} seconds")

        output = join_output(stdout or "", stderr or "")
        if proc.returncode != 0:
            raise ProcessExitError(proc.returncode, output)
        return output

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        if _POSIX:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
                return
            except ProcessLookupError:
                return
            except PermissionError:
                pass
        proc.kill()
