"""Remote catalog server (FastAPI)."""

from citylens.server.app import JsonDocumentStore, create_app

__all__ = ["JsonDocumentStore", "create_app"]
