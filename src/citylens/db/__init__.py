"""Local SQLite store: models, connection, schema, and repository."""

from citylens.db.connection import Database
from citylens.db.migrations import MIGRATIONS, run_migrations
from citylens.db.repository import Repository
from citylens.db.schema import initialize

__all__ = [
    "Database",
    "MIGRATIONS",
    "Repository",
    "initialize",
    "run_migrations",
]
