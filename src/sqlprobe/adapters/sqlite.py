"""SQLite adapter: local dry runs of a scenario and the test-suite."""

from __future__ import annotations

import sqlite3
from typing import Any

from sqlprobe.errors import ConnectionError
from sqlprobe.logging import get_logger

from .base import DatabaseAdapter
from .types import ConnectionConfig, DatabaseType

logger = get_logger(__name__)


class SQLiteAdapter(DatabaseAdapter):
    """
    Adapter over the stdlib ``sqlite3`` module.

    The connection is opened with ``isolation_level=None`` so every statement
    commits on its own, matching the server adapters. ``file:`` paths are
    opened as URIs. There is no prepare threshold to tune.
    """

    driver_errors = (sqlite3.Error,)

    def __init__(self, path: str = ":memory:", *, timeout: float = 5.0, **kwargs: Any):
        super().__init__(ConnectionConfig(db_type=DatabaseType.SQLITE, path=path, options=kwargs))
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        if self._conn is not None:
            return
        path = self._config.endpoint
        try:
            conn = sqlite3.connect(
                path,
                timeout=self._timeout,
                isolation_level=None,
                uri=path.startswith("file:"),
            )
        except sqlite3.Error as e:
            raise ConnectionError(f"Failed to connect to SQLite: {e}", cause=e).with_context(
                endpoint=path
            ) from e
        self._conn = conn
        self._connected = True

    def disconnect(self) -> None:
        conn, self._conn = self._conn, None
        self._connected = False
        if conn is None:
            return
        try:
            conn.close()
        except sqlite3.Error as e:
            logger.warning("disconnect_failed", error=str(e))

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        return self._conn

    @property
    def autocommit(self) -> bool:
        return self.get_connection().isolation_level is None

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        if self._conn is not None:
            self._conn.isolation_level = None if value else "DEFERRED"

    def _begin(self, conn: sqlite3.Connection) -> None:
        # sqlite3 only opens a transaction implicitly before DML; the locking
        # read has to run inside it too.
        if not conn.in_transaction:
            conn.execute("BEGIN")


__all__ = [
    "SQLiteAdapter",
]
