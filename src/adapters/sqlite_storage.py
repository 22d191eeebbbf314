"""SQLite storage adapter.

Implements the core DedupStorePort using a simple SQLite database. Every
sqlite3 failure surfaces as StoreUnavailable so the pipeline never mistakes
an unreachable store for a missing record.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from dataclasses import asdict
from typing import Optional

from core.errors import StoreUnavailable
from core.models import DedupRecord

_COLUMNS = (
    "key",
    "kind",
    "entry_key",
    "identity",
    "title",
    "published_at",
    "link",
    "content_type",
    "content_body",
    "recorded_at",
)


class SQLiteDedupStore:
    """Thin SQLite wrapper that satisfies the DedupStorePort contract."""

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - release_notes: one row per announced entry, never updated
        """

        try:
            with closing(self._connect()) as conn, conn:
                # Fields:
                # - key: "{kind}/{entry_key}" (PRIMARY KEY, the dedup signal)
                # - kind: record namespace, e.g. CloudRunReleaseNote
                # - entry_key: date fragment of the upstream entry id
                # - identity..content_body: copy of the entry as first seen
                # - recorded_at: UTC timestamp of the first observation
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS release_notes (
                        key TEXT PRIMARY KEY,
                        kind TEXT NOT NULL,
                        entry_key TEXT NOT NULL,
                        identity TEXT NOT NULL,
                        title TEXT,
                        published_at TEXT,
                        link TEXT,
                        content_type TEXT,
                        content_body TEXT,
                        recorded_at TIMESTAMP NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Unable to initialize {self._db_path}: {exc}") from exc

    def exists(self, key: str) -> bool:
        """Check if a record has already been written for key."""

        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute(
                    "SELECT 1 FROM release_notes WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Unable to read {key}: {exc}") from exc
        return row is not None

    def put(self, key: str, record: DedupRecord) -> bool:
        """Insert the record if absent; return True if this call created it."""

        values = asdict(record)
        values["key"] = key
        placeholders = ", ".join("?" for _ in _COLUMNS)
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.execute(
                    f"INSERT OR IGNORE INTO release_notes ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    tuple(values[column] for column in _COLUMNS),
                )
                return cur.rowcount == 1
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Unable to write {key}: {exc}") from exc

    def get(self, key: str) -> Optional[DedupRecord]:
        """Return the stored record for key, if any."""

        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute(
                    f"SELECT {', '.join(_COLUMNS)} FROM release_notes WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Unable to read {key}: {exc}") from exc
        if row is None:
            return None
        return DedupRecord(**{column: row[column] for column in _COLUMNS})
