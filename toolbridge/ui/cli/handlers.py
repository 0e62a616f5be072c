"""
Rendering helpers for CLI commands.
"""
from __future__ import annotations

import json
from typing import Iterable, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.box import ROUNDED

from toolbridge.abstractions.dto.tools import ParsedCall, ResultEnvelope
from toolbridge.api.di.composition import TurnResult
from toolbridge.interfaces.services.tools import IToolCatalog


def list_tools(console: Console, catalog: IToolCatalog) -> None:
    """Render a table of catalog tools."""
    table = Table(title="Tools", box=ROUNDED)
    table.add_column("Name", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required Params")

    for spec in catalog.list_tools():
        req = ", ".join(spec.required)
        table.add_row(escape(spec.name), escape(spec.description), escape(req) or "-")

    console.print(table)


def show_calls(console: Console, calls: Iterable[ParsedCall]) -> None:
    table = Table(title="Parsed Calls", box=ROUNDED)
    table.add_column("Id", no_wrap=True)
    table.add_column("Tool", no_wrap=True)
    table.add_column("Arguments")

    for call in calls:
        args = json.dumps(call.arguments.to_dict(), ensure_ascii=False)
        table.add_row(call.id, escape(call.tool_name), escape(args))

    console.print(table)


def show_residue(console: Console, residue: str) -> None:
    if residue:
        console.print(Panel(escape(residue), title="[box_title]Narrative[/box_title]", box=ROUNDED))
    else:
        console.print("[muted](no narrative text)[/muted]")


def show_envelopes(console: Console, envelopes: Iterable[ResultEnvelope]) -> None:
    for env in envelopes:
        style = "error" if env.is_error else "success"
        title = f"[{style}]{env.call_id}[/{style}]"
        console.print(Panel(escape(env.content) or "[muted](no output)[/muted]", title=title, box=ROUNDED))


def turn_as_json(turn: TurnResult) -> str:
    payload = {
        "calls": [c.to_openai_tool_call() for c in turn.calls],
        "results": [e.to_anthropic() for e in turn.envelopes],
        "residue": turn.residue,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def calls_as_json(calls: List[ParsedCall], residue: str) -> str:
    payload = {
        "calls": [c.to_openai_tool_call() for c in calls],
        "residue": residue,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)
