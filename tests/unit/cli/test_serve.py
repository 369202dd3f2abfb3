"""Tests for citylens serve."""

from __future__ import annotations

from unittest.mock import patch

from fastapi import FastAPI
from typer.testing import CliRunner

from citylens.cli.main import app

runner = CliRunner()


def test_serve_uses_config_defaults(isolated_config):
    with patch("citylens.cli.serve.uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0, result.output
    args, kwargs = mock_run.call_args
    assert isinstance(args[0], FastAPI)
    assert kwargs == {"host": "127.0.0.1", "port": 3001}
    assert (isolated_config / "data" / "db.json").exists()


def test_serve_flags_override_config(isolated_config):
    data_file = isolated_config / "custom" / "catalog.json"
    with patch("citylens.cli.serve.uvicorn.run") as mock_run:
        result = runner.invoke(
            app, ["serve", "--host", "0.0.0.0", "--port", "8080", "--data-file", str(data_file)]
        )

    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs == {"host": "0.0.0.0", "port": 8080}
    assert data_file.exists()


def test_serve_reads_server_section(isolated_config):
    (isolated_config / "citylens.yaml").write_text("server:\n  port: 4000\n", encoding="utf-8")
    with patch("citylens.cli.serve.uvicorn.run") as mock_run:
        runner.invoke(app, ["serve"])
    assert mock_run.call_args.kwargs["port"] == 4000
