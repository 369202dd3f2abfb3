"""Storage interface shared by the remote and local backends."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from citylens.db.models import Message, UploadedFile


class Backend(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


class BackendUnavailableError(RuntimeError):
    """The remote store failed (network error, non-2xx status, timeout, bad payload)."""


class BackendExhaustedError(RuntimeError):
    """Neither backend could service the operation; its outcome is unknown."""


class CatalogStore(Protocol):
    """The five catalog/transcript operations every backend implements."""

    async def list_files(self) -> list[UploadedFile]: ...

    async def add_file(self, file: UploadedFile) -> UploadedFile: ...

    async def delete_file(self, file_id: str) -> None: ...

    async def list_messages(self) -> list[Message]: ...

    async def add_message(self, message: Message) -> Message: ...
