"""Persistence gateway: remote-first storage with sticky local failover.

Every catalog/transcript operation is tried against the remote store first.
The first remote failure flips ``prefer_local`` for the rest of the process
lifetime; from then on the remote store is never contacted again and all
operations go straight to the local store. A new process re-attempts remote.

If the local store fails too, BackendExhaustedError propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from citylens.config import CitylensConfig
from citylens.db.models import Message, UploadedFile
from citylens.store.base import (
    Backend,
    BackendExhaustedError,
    BackendUnavailableError,
    CatalogStore,
)
from citylens.store.local import LocalStore
from citylens.store.remote import RemoteStore

logger = logging.getLogger("citylens.store")

T = TypeVar("T")


class PersistenceGateway:
    """Route reads and writes through the preferred backend.

    Args:
        remote: Remote backend (normally a RemoteStore).
        local:  Local fallback backend (normally a LocalStore).
    """

    def __init__(self, remote: CatalogStore, local: CatalogStore) -> None:
        self.remote = remote
        self.local = local
        self.prefer_local = False
        self._scheduled: set[asyncio.Task[None]] = set()
        self._last_scheduled: asyncio.Task[None] | None = None

    def current_backend(self) -> Backend:
        """Backend that will service the next operation."""
        return Backend.LOCAL if self.prefer_local else Backend.REMOTE

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def list_files(self) -> list[UploadedFile]:
        return await self._route(
            "list_files", self.remote.list_files, self.local.list_files
        )

    async def add_file(self, file: UploadedFile) -> UploadedFile:
        return await self._route(
            "add_file",
            lambda: self.remote.add_file(file),
            lambda: self.local.add_file(file),
        )

    async def delete_file(self, file_id: str) -> None:
        await self._route(
            "delete_file",
            lambda: self.remote.delete_file(file_id),
            lambda: self.local.delete_file(file_id),
        )

    # ------------------------------------------------------------------
    # Transcript
    # ------------------------------------------------------------------

    async def list_messages(self) -> list[Message]:
        """Return the transcript.

        The local store orders by timestamp; remote order (insertion order)
        is returned as is.
        """
        return await self._route(
            "list_messages", self.remote.list_messages, self.local.list_messages
        )

    async def add_message(self, message: Message) -> Message:
        """Persist *message* after any previously scheduled writes.

        Raises:
            ValueError: If the message is still a pending placeholder.
            BackendExhaustedError: If both backends fail.
        """
        _reject_pending(message)
        await self.drain()
        return await self._write_message(message)

    def schedule_message(self, message: Message) -> asyncio.Task[None]:
        """Persist *message* in the background without blocking the caller.

        Scheduled writes run in issue order. A failed write is logged and
        never raised into the caller; ``drain()`` waits for outstanding ones.
        Must be called from a running event loop.
        """
        _reject_pending(message)
        previous = self._last_scheduled
        task = asyncio.create_task(self._write_after(previous, message))
        self._last_scheduled = task
        self._scheduled.add(task)
        task.add_done_callback(self._on_scheduled_done)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled write to finish (successfully or not)."""
        if self._scheduled:
            await asyncio.wait(set(self._scheduled))

    async def aclose(self) -> None:
        """Flush scheduled writes and close the remote client, if it has one."""
        await self.drain()
        close = getattr(self.remote, "aclose", None)
        if close is not None:
            await close()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def _route(
        self,
        operation: str,
        remote_call: Callable[[], Awaitable[T]],
        local_call: Callable[[], Awaitable[T]],
    ) -> T:
        if not self.prefer_local:
            try:
                return await remote_call()
            except BackendUnavailableError as exc:
                self.prefer_local = True
                logger.warning(
                    "Remote store unavailable during %s (%s); using local store from now on",
                    operation,
                    exc,
                )

        try:
            return await local_call()
        except Exception as exc:
            raise BackendExhaustedError(
                f"{operation} failed on the local store: {exc}"
            ) from exc

    async def _write_message(self, message: Message) -> Message:
        return await self._route(
            "add_message",
            lambda: self.remote.add_message(message),
            lambda: self.local.add_message(message),
        )

    async def _write_after(self, previous: asyncio.Task[None] | None, message: Message) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        await self._write_message(message)

    def _on_scheduled_done(self, task: asyncio.Task[None]) -> None:
        self._scheduled.discard(task)
        if task is self._last_scheduled:
            self._last_scheduled = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background message write failed: %s", exc)


def _reject_pending(message: Message) -> None:
    if message.pending:
        raise ValueError(f"Message {message.id} is a pending placeholder and cannot be persisted")


def open_gateway(
    cfg: CitylensConfig, *, transport: httpx.AsyncBaseTransport | None = None
) -> PersistenceGateway:
    """Build a gateway from config: RemoteStore at remote.api_url, LocalStore at local.db_path."""
    remote = RemoteStore(cfg.remote.api_url, timeout=cfg.remote.timeout, transport=transport)
    return PersistenceGateway(remote, LocalStore(cfg.local.db_path))
