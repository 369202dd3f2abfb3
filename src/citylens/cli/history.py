"""citylens history: print the stored conversation."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.markdown import Markdown

from citylens.cli.ask import chart_table
from citylens.cli.common import load_config_or_exit, report_backend
from citylens.cli.errors import err_backend_exhausted
from citylens.config import CitylensConfig
from citylens.db.models import Message, Role
from citylens.store import BackendExhaustedError, open_gateway

console = Console()


def history_cmd(
    last: Annotated[
        int | None,
        typer.Option("--last", "-n", min=1, help="Only show the last N messages."),
    ] = None,
) -> None:
    """Show the conversation transcript."""
    cfg = load_config_or_exit(console)
    try:
        messages = asyncio.run(_history(cfg))
    except BackendExhaustedError as exc:
        console.print(err_backend_exhausted(exc, cfg.local.db_path))
        raise typer.Exit(1)

    if not messages:
        console.print('[dim]No messages yet.[/]\n  Run:  citylens ask "..."')
        return

    if last is not None:
        messages = messages[-last:]
    for message in messages:
        _print_message(message)


async def _history(cfg: CitylensConfig) -> list[Message]:
    gateway = open_gateway(cfg)
    try:
        messages = await gateway.list_messages()
        report_backend(console, gateway, cfg)
    finally:
        await gateway.aclose()
    return messages


def _print_message(message: Message) -> None:
    when = datetime.fromtimestamp(message.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
    who = "[bold cyan]Você[/]" if message.role is Role.USER else "[bold green]Gonçalinho[/]"
    console.print(f"\n{who} [dim]{when}[/]")
    console.print(Markdown(message.text))
    if message.chart is not None:
        console.print(chart_table(message.chart))
