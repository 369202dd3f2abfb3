"""Persistence: remote REST store, local SQLite store, and the failover gateway."""

from citylens.store.base import (
    Backend,
    BackendExhaustedError,
    BackendUnavailableError,
    CatalogStore,
)
from citylens.store.gateway import PersistenceGateway, open_gateway
from citylens.store.local import LocalStore
from citylens.store.remote import RemoteStore

__all__ = [
    "Backend",
    "BackendExhaustedError",
    "BackendUnavailableError",
    "CatalogStore",
    "LocalStore",
    "PersistenceGateway",
    "RemoteStore",
    "open_gateway",
]
