"""
Configuration module for loading environment variables and settings.

This module handles:
1. Loading sandbox settings from the environment and an optional .env file
2. Setting default configurations
3. Validating numeric and enum settings
"""

import os
import tempfile
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from toolbridge.abstractions.dto.tools import Protocol, SandboxPolicy

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


def _parse_protocols(key: str, raw: str) -> Tuple[Protocol, ...]:
    names = [p.strip().lower() for p in raw.split(",") if p.strip()]
    try:
        protocols = tuple(Protocol(n) for n in names)
    except ValueError:
        raise ValueError(f"{key} must list protocols from 'tag,structured', got {raw!r}") from None
    if not protocols:
        raise ValueError(f"{key} must name at least one protocol")
    return protocols


@dataclass
class Config:
    """Configuration for the extraction and sandbox layers."""

    workdir: str = field(default_factory=os.getcwd)
    allowed_roots: Tuple[str, ...] = field(default_factory=lambda: (tempfile.gettempdir(),))
    command_timeout: float = 30.0
    confine_paths: bool = True
    shell: Optional[str] = None
    protocols: Tuple[Protocol, ...] = (Protocol.TAG, Protocol.STRUCTURED)
    prompt_convention: Protocol = Protocol.STRUCTURED

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Config":
        """
        Build a Config from environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            dotenv: Whether to load a .env file into os.environ first

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if dotenv and environ is None:
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("TOOLBRIDGE_WORKDIR"):
            config.workdir = env["TOOLBRIDGE_WORKDIR"]
        if env.get("TOOLBRIDGE_ALLOWED_ROOTS") is not None:
            config.allowed_roots = tuple(
                p for p in env["TOOLBRIDGE_ALLOWED_ROOTS"].split(os.pathsep) if p.strip()
            )
        if env.get("TOOLBRIDGE_COMMAND_TIMEOUT"):
            raw = env["TOOLBRIDGE_COMMAND_TIMEOUT"]
            try:
                config.command_timeout = float(raw)
            except ValueError:
                raise ValueError(f"TOOLBRIDGE_COMMAND_TIMEOUT must be a number, got {raw!r}") from None
            if config.command_timeout <= 0:
                raise ValueError("TOOLBRIDGE_COMMAND_TIMEOUT must be positive")
        if env.get("TOOLBRIDGE_CONFINE_PATHS"):
            config.confine_paths = _parse_bool("TOOLBRIDGE_CONFINE_PATHS", env["TOOLBRIDGE_CONFINE_PATHS"])
        if env.get("TOOLBRIDGE_SHELL"):
            config.shell = env["TOOLBRIDGE_SHELL"]
        if env.get("TOOLBRIDGE_PROTOCOLS"):
            config.protocols = _parse_protocols("TOOLBRIDGE_PROTOCOLS", env["TOOLBRIDGE_PROTOCOLS"])
        if env.get("TOOLBRIDGE_PROMPT_CONVENTION"):
            raw = env["TOOLBRIDGE_PROMPT_CONVENTION"]
            try:
                config.prompt_convention = Protocol(raw.strip().lower())
            except ValueError:
                raise ValueError(f"TOOLBRIDGE_PROMPT_CONVENTION must be 'tag' or 'structured', got {raw!r}") from None
        return config

    def to_policy(self) -> SandboxPolicy:
        return SandboxPolicy(
            root_directory=self.workdir,
            allowed_roots=frozenset(self.allowed_roots),
            command_timeout=self.command_timeout,
            confine_paths=self.confine_paths,
            shell=self.shell,
        )


__all__ = ["Config"]
