"""Tests for the citylens CLI entry point."""

from __future__ import annotations

from typer.testing import CliRunner

from citylens.cli.main import app

runner = CliRunner()


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("citylens ")


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "citylens" in result.output


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"], env={"COLUMNS": "200"})
    assert result.exit_code == 0
    for command in ("ingest", "files", "remove", "ask", "history", "serve"):
        assert command in result.output


def test_invalid_config_exits_1(isolated_config):
    (isolated_config / "citylens.yaml").write_text("remote:\n  api_url: ftp://x\n", encoding="utf-8")
    result = runner.invoke(app, ["files"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
