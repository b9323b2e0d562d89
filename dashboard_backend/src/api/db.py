from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

from .errors import StorageError
from .storage import KeyValueStorage


@dataclass(frozen=True)
class _Cols:
    table: str = "kv_store"
    key: str = "key"
    value: str = "value"


_COLS = _Cols()


class SQLiteKeyValueStorage(KeyValueStorage):
    """
    Lightweight SQLite key-value store implementing the KeyValueStorage interface.

    Every sqlite3 failure is re-raised as StorageError so callers see one
    exception type regardless of backend.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open storage at {self._db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.key} TEXT PRIMARY KEY,
                    {_COLS.value} TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT {_COLS.value} FROM {_COLS.table} WHERE {_COLS.key} = ?", (key,)
            ).fetchone()
            return str(row[_COLS.value]) if row else None

    def set(self, key: str, value: str) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.key}, {_COLS.value}) VALUES (?, ?)
                ON CONFLICT({_COLS.key}) DO UPDATE SET {_COLS.value} = excluded.{_COLS.value}
                """,
                (key, value),
            )

    def delete(self, key: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.key} = ?", (key,))
            return cur.rowcount > 0
