"""Tests for citylens remove."""

from __future__ import annotations

import asyncio

from typer.testing import CliRunner

from citylens.cli.main import app
from citylens.store.local import LocalStore

runner = CliRunner(env={"COLUMNS": "200"})


def _seed(root, file) -> LocalStore:
    store = LocalStore(root / ".citylens.db")
    asyncio.run(store.add_file(file))
    return store


def test_remove_unknown_id_exits_0(offline_remote):
    result = runner.invoke(app, ["remove", "missing", "--yes"])
    assert result.exit_code == 0
    assert "not in the catalog" in result.output


def test_remove_with_yes(offline_remote, make_file):
    store = _seed(offline_remote, make_file("id-1", name="dengue.csv"))

    result = runner.invoke(app, ["remove", "id-1", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Removed: id-1" in result.output
    assert asyncio.run(store.list_files()) == []


def test_remove_cancelled_at_prompt(offline_remote, make_file):
    store = _seed(offline_remote, make_file("id-1"))

    result = runner.invoke(app, ["remove", "id-1"], input="n\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert len(asyncio.run(store.list_files())) == 1


def test_remove_confirmed_at_prompt(offline_remote, make_file):
    store = _seed(offline_remote, make_file("id-1"))

    result = runner.invoke(app, ["remove", "id-1"], input="y\n")

    assert result.exit_code == 0
    assert asyncio.run(store.list_files()) == []
