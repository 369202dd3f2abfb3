"""Repository pattern for the local catalog and transcript tables.

Single interface for: uploaded files (the catalog) and conversation messages
(the transcript). Records are keyed by id; listing uses the timestamp indexes.
"""

from __future__ import annotations

import json
import sqlite3

from citylens.db.models import (
    ChartData,
    ContentKind,
    FileMetadata,
    Message,
    Role,
    UploadedFile,
    parse_category,
)


class Repository:
    """Data access layer for the local store.

    Wraps an open sqlite3.Connection and provides typed methods for files and
    messages. The connection is owned by the caller and must be closed after
    use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see citylens.db.schema.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def add_file(self, file: UploadedFile) -> None:
        """Insert a new file record.

        Raises:
            sqlite3.IntegrityError: If a file with the same id already exists.
        """
        meta = file.metadata
        self._conn.execute(
            """
            INSERT INTO files (id, name, kind, content, timestamp,
                               description, source, period, case_name, category)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                file.id,
                file.name,
                file.kind.value,
                file.content,
                file.timestamp,
                meta.description,
                meta.source,
                meta.period,
                meta.case_name,
                meta.category.value,
            ),
        )
        self._conn.commit()

    def get_file(self, file_id: str) -> UploadedFile | None:
        """Return a file by ID, or None if not found."""
        row = self._conn.execute(
            f"SELECT {_FILE_COLUMNS} FROM files WHERE id = ?", (file_id,)
        ).fetchone()
        return _row_to_file(row) if row else None

    def list_files(self, category: str | None = None) -> list[UploadedFile]:
        """Return all files ordered by creation time (oldest first).

        Args:
            category: Optional category value to filter on.
        """
        if category is None:
            rows = self._conn.execute(
                f"SELECT {_FILE_COLUMNS} FROM files ORDER BY timestamp, rowid"
            ).fetchall()
        else:
            rows = self._conn.execute(
                f"SELECT {_FILE_COLUMNS} FROM files WHERE category = ? ORDER BY timestamp, rowid",
                (category,),
            ).fetchall()
        return [_row_to_file(r) for r in rows]

    def delete_file(self, file_id: str) -> bool:
        """Delete a file by ID. Returns True if a row was removed."""
        cur = self._conn.execute("DELETE FROM files WHERE id = ?", (file_id,))
        self._conn.commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def add_message(self, message: Message) -> None:
        """Insert a message. The transient pending flag is not stored."""
        chart = json.dumps(message.chart.to_dict(), ensure_ascii=False) if message.chart else None
        self._conn.execute(
            """
            INSERT INTO messages (id, role, text, timestamp, chart)
            VALUES (?, ?, ?, ?, ?)
            """,
            (message.id, message.role.value, message.text, message.timestamp, chart),
        )
        self._conn.commit()

    def list_messages(self) -> list[Message]:
        """Return the transcript ordered by timestamp ascending."""
        rows = self._conn.execute(
            "SELECT id, role, text, timestamp, chart FROM messages ORDER BY timestamp, rowid"
        ).fetchall()
        return [_row_to_message(r) for r in rows]

    def count_messages(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM messages").fetchone()[0]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

_FILE_COLUMNS = (
    "id, name, kind, content, timestamp, description, source, period, case_name, category"
)


def _row_to_file(row: sqlite3.Row) -> UploadedFile:
    return UploadedFile(
        id=row["id"],
        name=row["name"],
        kind=ContentKind(row["kind"]),
        content=row["content"],
        timestamp=row["timestamp"],
        metadata=FileMetadata(
            description=row["description"],
            source=row["source"],
            period=row["period"],
            case_name=row["case_name"],
            category=parse_category(row["category"]),
        ),
    )


def _row_to_message(row: sqlite3.Row) -> Message:
    chart = json.loads(row["chart"]) if row["chart"] else None
    return Message(
        id=row["id"],
        role=Role(row["role"]),
        text=row["text"],
        timestamp=row["timestamp"],
        chart=ChartData.from_dict(chart) if chart else None,
    )
