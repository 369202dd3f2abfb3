"""Shared pytest fixtures."""

from __future__ import annotations

import httpx
import pytest

import citylens.config as config_module
from citylens.db.connection import Database
from citylens.db.models import Category, ContentKind, FileMetadata, UploadedFile
from citylens.db.schema import initialize
from citylens.server.app import create_app
from citylens.store.gateway import open_gateway


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".citylens.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in tmp_path with no global config and no CITYLENS_* overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        config_module, "_GLOBAL_CONFIG_PATH", tmp_path / "no-global" / "config.yaml"
    )
    for var in ("CITYLENS_API_URL", "CITYLENS_DB_PATH", "CITYLENS_GENERATION_MODEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def make_file():
    """Factory for UploadedFile records with sensible defaults."""

    def _make(
        file_id: str = "f-1",
        name: str = "casos.csv",
        content: str = "municipio,casos\nSão Gonçalo,3",
        timestamp: int = 1_700_000_000_000,
        kind: ContentKind = ContentKind.CSV,
        **meta,
    ) -> UploadedFile:
        meta.setdefault("category", Category.SAUDE)
        return UploadedFile(
            id=file_id,
            name=name,
            kind=kind,
            content=content,
            timestamp=timestamp,
            metadata=FileMetadata(**meta),
        )

    return _make


_CLI_MODULES = ("ingest", "files", "remove", "ask", "history")


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _patch_cli_gateways(monkeypatch, transport_factory) -> None:
    def _open(cfg):
        return open_gateway(cfg, transport=transport_factory())

    for module in _CLI_MODULES:
        monkeypatch.setattr(f"citylens.cli.{module}.open_gateway", _open)


@pytest.fixture
def offline_remote(isolated_config, monkeypatch):
    """CLI commands see an unreachable server and fall back to ./.citylens.db."""
    _patch_cli_gateways(monkeypatch, lambda: httpx.MockTransport(_refuse))
    return isolated_config


@pytest.fixture
def served_remote(isolated_config, monkeypatch):
    """CLI commands talk to an in-process catalog server; returns its data file."""
    data_file = isolated_config / "server" / "db.json"
    app = create_app(data_file)
    _patch_cli_gateways(monkeypatch, lambda: httpx.ASGITransport(app=app))
    return data_file
