"""Embedded local store: SQLite via citylens.db.Repository.

Each operation opens its own connection inside a worker thread
(``asyncio.to_thread``), so no connection is shared across threads.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from citylens.db.connection import Database
from citylens.db.models import Message, UploadedFile
from citylens.db.repository import Repository
from citylens.db.schema import initialize

logger = logging.getLogger("citylens.store.local")

T = TypeVar("T")


class LocalStore:
    """Local fallback backend keyed by id, listed by creation timestamp."""

    def __init__(self, db_path: Path | str) -> None:
        self._db = Database(db_path)
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def db_path(self) -> Path:
        return self._db.db_path

    async def list_files(self) -> list[UploadedFile]:
        return await self._run(lambda repo: repo.list_files())

    async def add_file(self, file: UploadedFile) -> UploadedFile:
        await self._run(lambda repo: repo.add_file(file))
        return file

    async def delete_file(self, file_id: str) -> None:
        removed = await self._run(lambda repo: repo.delete_file(file_id))
        if not removed:
            logger.debug("Local delete of unknown file id %s", file_id)

    async def list_messages(self) -> list[Message]:
        return await self._run(lambda repo: repo.list_messages())

    async def add_message(self, message: Message) -> Message:
        await self._run(lambda repo: repo.add_message(message))
        return message

    async def _run(self, op: Callable[[Repository], T]) -> T:
        return await asyncio.to_thread(self._run_sync, op)

    def _run_sync(self, op: Callable[[Repository], T]) -> T:
        conn = self._db.connect()
        try:
            if not self._initialized:
                with self._init_lock:
                    if not self._initialized:
                        initialize(conn)
                        self._initialized = True
            return op(Repository(conn))
        finally:
            conn.close()
