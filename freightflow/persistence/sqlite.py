"""SQLite implementation of the key/value backend."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any, Optional

from .base import KeyValueBackend, StorageError, StorageQuotaExceeded


class SQLiteBackend(KeyValueBackend):
    """Persist snapshots in a single SQLite table."""

    name = "sqlite"

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS drafts (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> None:
        try:
            cur = self._conn.cursor()
            cur.execute(query, params)
            self._conn.commit()
        except sqlite3.OperationalError as e:
            if "full" in str(e).lower():
                raise StorageQuotaExceeded(str(e)) from e
            raise StorageError(str(e)) from e
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        try:
            cur = self._conn.cursor()
            cur.execute(query, params)
            return cur.fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    # ------------------------------------------------------------------
    # Backend API
    async def get(self, key: str) -> Optional[str]:
        row = await asyncio.to_thread(
            self._fetchone, "SELECT value FROM drafts WHERE key = ?", key
        )
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(
            self._execute,
            "INSERT OR REPLACE INTO drafts (key, value) VALUES (?, ?)",
            key,
            value,
        )

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._execute, "DELETE FROM drafts WHERE key = ?", key)

    async def close(self) -> None:
        await asyncio.to_thread(self._conn.close)
