"""
Command line interface for toolbridge.

Commands:
  prompt   Print the tool prompt fragment for a catalog
  tools    List the tools in a catalog
  extract  Parse tool calls out of model output without running them
  run      Parse tool calls, execute them in the sandbox, print the results

Run:
  toolbridge run response.txt --workdir ./sandbox
  or
  python -m toolbridge.ui.cli.app extract -
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from rich.logging import RichHandler
from rich.markup import escape

from toolbridge.abstractions.dto.tools import Protocol
from toolbridge.api.di.composition import ToolBridge, build_tool_bridge
from toolbridge.infrastructure.tools.config import Config
from .console import make_console
from .handlers import calls_as_json, list_tools, show_calls, show_envelopes, show_residue, turn_as_json

logger = logging.getLogger("toolbridge")


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _load_tools(path: Optional[str]) -> Optional[List[Any]]:
    """Load raw tool declarations from a JSON file: a list, or an object with a "tools" list."""
    if not path:
        return None
    data = json.loads(_read_input(path))
    if isinstance(data, dict):
        data = data.get("tools", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of tool declarations")
    return data


def _parse_protocols(raw: str) -> List[Protocol]:
    return [Protocol(p.strip()) for p in raw.split(",") if p.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolbridge",
        description="Extract and execute text-protocol tool calls from model output.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    sub = parser.add_subparsers(dest="command", required=True)

    p_prompt = sub.add_parser("prompt", help="print the tool prompt fragment")
    p_prompt.add_argument("--tools", help="JSON file with tool declarations (default: built-in tools)")
    p_prompt.add_argument("--convention", choices=[p.value for p in Protocol], help="call syntax to teach")
    p_prompt.add_argument("--system", default="", help="base system prompt to append the fragment to")

    p_tools = sub.add_parser("tools", help="list tools in the catalog")
    p_tools.add_argument("--tools", help="JSON file with tool declarations (default: built-in tools)")

    p_extract = sub.add_parser("extract", help="parse tool calls without executing them")
    p_extract.add_argument("input", help="file with raw model output, or - for stdin")
    p_extract.add_argument("--protocols", help="comma-separated: tag,structured")
    p_extract.add_argument("--json", action="store_true", help="print JSON instead of tables")

    p_run = sub.add_parser("run", help="parse and execute tool calls")
    p_run.add_argument("input", help="file with raw model output, or - for stdin")
    p_run.add_argument("--workdir", help="sandbox working directory")
    p_run.add_argument("--timeout", type=float, help="command timeout in seconds")
    p_run.add_argument("--no-confine", action="store_true", help="let absolute paths leave the sandbox roots")
    p_run.add_argument("--protocols", help="comma-separated: tag,structured")
    p_run.add_argument("--json", action="store_true", help="print JSON instead of panels")

    return parser


def _configure(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if getattr(args, "convention", None):
        config.prompt_convention = Protocol(args.convention)
    if getattr(args, "protocols", None):
        config.protocols = tuple(_parse_protocols(args.protocols))
    if getattr(args, "workdir", None):
        config.workdir = args.workdir
    if getattr(args, "timeout", None) is not None:
        config.command_timeout = args.timeout
    if getattr(args, "no_confine", False):
        config.confine_paths = False
    return config


def _setup_logging(verbose: bool, use_color: Optional[bool]) -> None:
    handler = RichHandler(console=make_console(use_color, stderr=True), show_path=False)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    use_color = False if args.no_color else None
    _setup_logging(args.verbose, use_color)
    console = make_console(use_color)

    try:
        config = _configure(args)
        tools = _load_tools(getattr(args, "tools", None))
        bridge: ToolBridge = build_tool_bridge(config, tools)
    except (ValueError, OSError) as e:
        make_console(use_color, stderr=True).print(f"[error]Error:[/error] {escape(str(e))}")
        return 2

    if args.command == "prompt":
        sys.stdout.write(bridge.system_prompt(args.system) + "\n")
        return 0

    if args.command == "tools":
        list_tools(console, bridge.catalog)
        return 0

    try:
        raw = _read_input(args.input)
    except OSError as e:
        make_console(use_color, stderr=True).print(f"[error]Error:[/error] {escape(str(e))}")
        return 2

    if args.command == "extract":
        result = bridge.engine.extract(raw)
        if args.json:
            sys.stdout.write(calls_as_json(result.calls, result.residue) + "\n")
        else:
            show_calls(console, result.calls)
            show_residue(console, result.residue)
        return 0

    turn = bridge.run_turn(raw)
    if args.json:
        sys.stdout.write(turn_as_json(turn) + "\n")
    else:
        show_calls(console, turn.calls)
        show_envelopes(console, turn.envelopes)
        show_residue(console, turn.residue)
    return 1 if any(e.is_error for e in turn.envelopes) else 0


if __name__ == "__main__":
    sys.exit(main())
