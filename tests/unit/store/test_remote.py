"""Tests for RemoteStore against httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from citylens.db.models import Message, Role
from citylens.store.base import BackendUnavailableError
from citylens.store.remote import RemoteStore


def _store(handler) -> RemoteStore:
    return RemoteStore("http://catalog.test/", transport=httpx.MockTransport(handler))


def _run(store: RemoteStore, coro_factory):
    async def scenario():
        try:
            return await coro_factory(store)
        finally:
            await store.aclose()

    return asyncio.run(scenario())


def test_list_files_parses_wire_format(make_file):
    wire = make_file(case_name="Dengue").to_dict()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/files"
        return httpx.Response(200, json=[wire])

    files = _run(_store(handler), lambda s: s.list_files())
    assert files == [make_file(case_name="Dengue")]


def test_add_file_posts_camel_case_body(make_file):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=seen["body"])

    original = make_file(case_name="Dengue")
    returned = _run(_store(handler), lambda s: s.add_file(original))
    assert seen["body"]["caseName"] == "Dengue"
    assert returned == original


def test_delete_file_hits_id_path():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"], seen["path"] = request.method, request.url.path
        return httpx.Response(200, json={"success": True})

    _run(_store(handler), lambda s: s.delete_file("abc-123"))
    assert seen == {"method": "DELETE", "path": "/files/abc-123"}


def test_add_message_and_list_messages():
    stored: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            stored.append(json.loads(request.content))
            return httpx.Response(201, json=stored[-1])
        return httpx.Response(200, json=stored)

    msg = Message(id="m-1", role=Role.ASSISTANT, text="Olá", timestamp=7)

    async def scenario(s: RemoteStore):
        await s.add_message(msg)
        return await s.list_messages()

    assert _run(_store(handler), scenario) == [msg]


@pytest.mark.parametrize("status", [400, 404, 500, 503])
def test_non_success_status_is_unavailable(status):
    store = _store(lambda request: httpx.Response(status, json={"error": "x"}))
    with pytest.raises(BackendUnavailableError, match=str(status)):
        _run(store, lambda s: s.list_files())


def test_transport_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUnavailableError) as exc_info:
        _run(_store(handler), lambda s: s.list_messages())
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_timeout_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(BackendUnavailableError):
        _run(_store(handler), lambda s: s.list_files())


def test_invalid_json_is_unavailable():
    store = _store(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(BackendUnavailableError, match="invalid JSON"):
        _run(store, lambda s: s.list_files())


def test_wrong_payload_shape_is_unavailable():
    store = _store(lambda request: httpx.Response(200, json={"files": []}))
    with pytest.raises(BackendUnavailableError):
        _run(store, lambda s: s.list_files())


def test_record_without_id_is_unavailable():
    store = _store(lambda request: httpx.Response(200, json=[{"name": "x"}]))
    with pytest.raises(BackendUnavailableError, match="Malformed"):
        _run(store, lambda s: s.list_files())


def test_array_of_non_objects_is_unavailable():
    store = _store(lambda request: httpx.Response(200, json=[1, 2]))
    with pytest.raises(BackendUnavailableError, match="JSON object"):
        _run(store, lambda s: s.list_files())


def test_list_messages_with_non_object_items_is_unavailable():
    store = _store(lambda request: httpx.Response(200, json=["oi", None]))
    with pytest.raises(BackendUnavailableError, match="JSON object"):
        _run(store, lambda s: s.list_messages())
