"""Remote store: REST client for the catalog server.

Contract::

    GET    /files          → [UploadedFile]
    POST   /files          → 201 UploadedFile   (400 without id)
    DELETE /files/{id}     → 200 {"success": true}   (404 if unknown)
    GET    /messages       → [Message]  (insertion order)
    POST   /messages       → 201 Message        (400 without id)

Any transport error, timeout, non-2xx status or unreadable body
is raised as BackendUnavailableError.
"""

from __future__ import annotations

from typing import Any

import httpx

from citylens.db.models import Message, UploadedFile
from citylens.store.base import BackendUnavailableError

_DEFAULT_TIMEOUT = 10.0


class RemoteStore:
    """Async httpx client for the catalog server's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def list_files(self) -> list[UploadedFile]:
        payload = await self._request("GET", "/files")
        return self._parse_list(payload, UploadedFile.from_dict)

    async def add_file(self, file: UploadedFile) -> UploadedFile:
        payload = await self._request("POST", "/files", json=file.to_dict())
        return self._parse_one(payload, UploadedFile.from_dict)

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", f"/files/{file_id}")

    async def list_messages(self) -> list[Message]:
        payload = await self._request("GET", "/messages")
        return self._parse_list(payload, Message.from_dict)

    async def add_message(self, message: Message) -> Message:
        payload = await self._request("POST", "/messages", json=message.to_dict())
        return self._parse_one(payload, Message.from_dict)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise BackendUnavailableError(
                f"{method} {path} returned status {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise BackendUnavailableError(f"{method} {path} returned invalid JSON") from exc

    @staticmethod
    def _parse_list(payload: Any, factory) -> list:
        if not isinstance(payload, list):
            raise BackendUnavailableError("Expected a JSON array from the catalog server")
        return [RemoteStore._parse_one(item, factory) for item in payload]

    @staticmethod
    def _parse_one(payload: Any, factory):
        if not isinstance(payload, dict):
            raise BackendUnavailableError("Expected a JSON object from the catalog server")
        try:
            return factory(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise BackendUnavailableError(f"Malformed record from the catalog server: {exc}") from exc
