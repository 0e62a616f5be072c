"""
Console utilities for CLI.
"""

from typing import Optional
from rich.console import Console
from rich.theme import Theme
import os
import sys


def _build_theme() -> Theme:
    return Theme(
        {
            "primary": "white",
            "accent": "cyan",
            "warning": "yellow",
            "error": "bold red",
            "success": "green",
            "muted": "grey70",
            "box_title": "bold cyan",
        }
    )


def _should_enable_color(enable: Optional[bool]) -> bool:
    """
    Compute effective color enablement.

    Rules:
    - Respect NO_COLOR unless TOOLBRIDGE_FORCE_COLOR is set
    - When enable is None: auto-detect via isatty
    """
    force_color = (os.getenv("TOOLBRIDGE_FORCE_COLOR") or "").lower() in ("1", "true", "yes", "on")
    if force_color:
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if enable is None:
        return bool(getattr(sys.stdout, "isatty", lambda: False)())
    return bool(enable)


def make_console(use_color: Optional[bool] = None, stderr: bool = False) -> Console:
    """Create a Rich console with the CLI theme and color policy."""
    desired = _should_enable_color(use_color)
    return Console(
        theme=_build_theme(),
        no_color=not desired,
        color_system="auto" if desired else None,
        stderr=stderr,
        markup=True,
        highlight=False,
    )
