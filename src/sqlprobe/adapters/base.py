"""Database adapter base class.

Manifesto:
    The harness drives every database through one small interface:
    connect, execute, transaction, disconnect. Vendor-specific knobs (such
    as the number of executions before a statement is server-prepared) are
    optional capabilities an adapter either implements or reports as
    unsupported, so the harness never casts to a driver type.

Features:
    - Abstract ``connect()``, ``disconnect()``, ``get_connection()``
    - ``autocommit`` property, restored by ``transaction()`` on every path
    - Optional prepared-statement tuning capability
    - Context-manager protocol for connection lifecycle

Tags:
    sqlprobe, database, abstract-base, adapter-pattern

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlprobe.dialect import Dialect, get_dialect
from sqlprobe.logging import get_logger

from .types import ConnectionConfig, DatabaseType

logger = get_logger(__name__)


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    One adapter owns at most one open connection. The connection starts in
    auto-commit mode; :meth:`transaction` switches auto-commit off for its
    body and restores the previous value afterwards.
    """

    #: Exception types raised by the underlying driver.
    driver_errors: tuple[type[BaseException], ...] = ()

    #: Whether :meth:`set_prepare_threshold` has an effect.
    supports_prepared_statement_tuning: bool = False

    def __init__(self, config: ConnectionConfig):
        self._config = config
        self._connected = False
        self._dialect: Dialect = get_dialect(config.db_type.value)

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this adapter's database type."""
        return self._dialect

    @property
    def db_type(self) -> DatabaseType:
        """Database type."""
        return self._config.db_type

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        """Whether adapter is connected."""
        return self._connected

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to database."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to database. Never raises."""
        ...

    @abstractmethod
    def get_connection(self) -> Any:
        """Get the open connection, connecting first if needed."""
        ...

    @property
    @abstractmethod
    def autocommit(self) -> bool:
        """Whether each statement commits on its own."""
        ...

    @autocommit.setter
    @abstractmethod
    def autocommit(self, value: bool) -> None: ...

    # -- Prepared statement tuning (optional capability) --------------------

    def set_prepare_threshold(self, threshold: int | None) -> None:  # noqa: ARG002
        """Set executions before the driver server-prepares a statement.

        No-op for drivers without the capability.
        """
        return None

    def uses_server_prepare(self, executions: int) -> bool:  # noqa: ARG002
        """Whether the next execution of a statement already run
        ``executions`` times is expected to use a server-side prepare."""
        return False

    # -- Execution -----------------------------------------------------------

    def execute(self, sql: str, params: tuple | None = None) -> Any:
        """Execute one statement and return the driver cursor."""
        conn = self.get_connection()
        if params is None:
            return conn.execute(sql)
        return conn.execute(sql, params)

    def _begin(self, conn: Any) -> None:  # noqa: ARG002
        """Open a transaction explicitly, for drivers that need it."""
        return None

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Run the body in one transaction with auto-commit switched off.

        Commits on success, rolls back on any exception, and always
        restores the previous auto-commit setting.
        """
        conn = self.get_connection()
        previous = self.autocommit
        self.autocommit = False
        try:
            self._begin(conn)
            yield conn
            conn.commit()
        except Exception:
            try:
                conn.rollback()
            except self.driver_errors as rollback_error:
                logger.warning("rollback_failed", error=str(rollback_error))
            raise
        finally:
            self.autocommit = previous

    def __enter__(self) -> DatabaseAdapter:
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "DatabaseAdapter",
]
