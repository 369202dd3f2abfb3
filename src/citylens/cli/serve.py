"""citylens serve: run the remote catalog API with uvicorn."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import uvicorn
from rich.console import Console

from citylens.cli.common import load_config_or_exit
from citylens.server.app import create_app

console = Console()


def serve_cmd(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="JSON document holding files and messages."),
    ] = None,
) -> None:
    """Serve the catalog API (files + messages) over HTTP."""
    cfg = load_config_or_exit(console)
    host = host or cfg.server.host
    port = port or cfg.server.port
    data_file = data_file or Path(cfg.server.data_file)

    logger = logging.getLogger("citylens")
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)

    console.print(f"Catalog API on [bold]http://{host}:{port}[/]  |  Data: {data_file}")
    uvicorn.run(create_app(data_file), host=host, port=port)
