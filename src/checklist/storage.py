from __future__ import annotations

import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from threading import RLock
from typing import Dict, Generator, Optional

import structlog

from .errors import PersistenceError
from .settings import Settings, get_settings

logger = structlog.get_logger(__name__)


# PUBLIC_INTERFACE
class KeyValueStore(ABC):
    """
    String-keyed, string-valued durable store: the only thing the list
    store needs from its persistence backend.

    Implementations raise PersistenceError for any backend failure.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""


class InMemoryKeyValueStore(KeyValueStore):
    """
    Thread-safe in-memory store suitable for testing and default runtime.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = RLock()
        self._data: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self.writes += 1


class SQLiteKeyValueStore(KeyValueStore):
    """
    Lightweight SQLite store keeping one row per key.
    """

    table = "kv"

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open {self._db_path}: {e}") from e
        try:
            yield conn
            conn.commit()
        except (sqlite3.Error, ValueError) as e:
            # ValueError covers text sqlite cannot encode, e.g. lone surrogates
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT value FROM {self.table} WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {self.table} (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )


# PUBLIC_INTERFACE
def get_key_value_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Factory to return the configured key-value store based on settings.
    - memory: InMemoryKeyValueStore
    - sqlite: SQLiteKeyValueStore at settings.sqlite_db_path
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        try:
            return SQLiteKeyValueStore(settings.sqlite_db_path)
        except (PersistenceError, OSError) as e:
            # Fallback to memory if the database cannot be opened
            logger.warning("sqlite_unavailable", path=settings.sqlite_db_path, error=str(e))
            return InMemoryKeyValueStore()
    return InMemoryKeyValueStore()
