"""Remote catalog server: FastAPI app over a single JSON document.

The document has the shape ``{"files": [...], "messages": [...]}`` and is
created on first use. Records are stored as received (camelCase wire format)
and listed in insertion order.

Routes::

    GET    /files          → list of files
    POST   /files          → 201 echo   (400 if the body has no id)
    DELETE /files/{id}     → {"success": true}   (404 if unknown)
    GET    /messages       → list of messages
    POST   /messages       → 201 echo   (400 if the body has no id)
    GET    /api/health     → {"status": "online", "storage": "persistent_db"}
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logger = logging.getLogger("citylens.server")

_EMPTY_DOCUMENT: dict[str, list[Any]] = {"files": [], "messages": []}


class JsonDocumentStore:
    """Read-modify-write access to the JSON document, serialised by a lock."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def ensure(self) -> None:
        """Create the data directory and an empty document if missing."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Initialising catalog document at %s", self.path)
            self._write(dict(_EMPTY_DOCUMENT))

    def read(self) -> dict[str, list[Any]]:
        with self._lock:
            return self._read()

    def append(self, collection: str, record: dict[str, Any]) -> None:
        with self._lock:
            doc = self._read()
            doc[collection].append(record)
            self._write(doc)

    def remove_file(self, file_id: str) -> bool:
        """Remove the file record with *file_id*. Returns False if absent."""
        with self._lock:
            doc = self._read()
            kept = [f for f in doc["files"] if f.get("id") != file_id]
            if len(kept) == len(doc["files"]):
                return False
            doc["files"] = kept
            self._write(doc)
            return True

    def _read(self) -> dict[str, list[Any]]:
        if not self.path.exists():
            return {"files": [], "messages": []}
        doc = json.loads(self.path.read_text(encoding="utf-8"))
        doc.setdefault("files", [])
        doc.setdefault("messages", [])
        return doc

    def _write(self, doc: dict[str, list[Any]]) -> None:
        self.path.write_text(
            json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8"
        )


def create_app(data_file: Path | str = Path("data") / "db.json") -> FastAPI:
    """Build the catalog API backed by the JSON document at *data_file*."""
    store = JsonDocumentStore(data_file)
    store.ensure()

    app = FastAPI(title="citylens catalog API")
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health_check():
        return {"status": "online", "storage": "persistent_db"}

    @app.get("/files")
    def list_files():
        return store.read()["files"]

    @app.post("/files")
    async def add_file(request: Request):
        record = await _json_body(request)
        if not record or not record.get("id"):
            return JSONResponse(status_code=400, content={"error": "Invalid file data"})
        store.append("files", record)
        logger.info("File added: %s", record.get("name"))
        return JSONResponse(status_code=201, content=record)

    @app.delete("/files/{file_id}")
    def delete_file(file_id: str):
        if not store.remove_file(file_id):
            return JSONResponse(status_code=404, content={"error": "File not found"})
        logger.info("File deleted: %s", file_id)
        return {"success": True}

    @app.get("/messages")
    def list_messages():
        return store.read()["messages"]

    @app.post("/messages")
    async def add_message(request: Request):
        record = await _json_body(request)
        if not record or not record.get("id"):
            return JSONResponse(status_code=400, content={"error": "Invalid message data"})
        store.append("messages", record)
        logger.debug("Message added: %s", record.get("id"))
        return JSONResponse(status_code=201, content=record)

    return app


async def _json_body(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
