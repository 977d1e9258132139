"""PostgreSQL database adapter."""

from __future__ import annotations

from typing import Any

from sqlprobe.errors import ConfigError, ConnectionError
from sqlprobe.logging import get_logger

from .base import DatabaseAdapter
from .types import ConnectionConfig, DatabaseType

logger = get_logger(__name__)


class PostgreSQLAdapter(DatabaseAdapter):
    """
    PostgreSQL database adapter.

    Holds a single psycopg 3 connection in auto-commit mode. psycopg
    prepares a statement on the server once the same query text has been
    executed ``prepare_threshold`` times on the connection, which is the
    knob the insert and union probes exercise.
    """

    supports_prepared_statement_tuning = True

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        connect_timeout: int = 10,
        **kwargs: Any,
    ):
        config = ConnectionConfig(
            db_type=DatabaseType.POSTGRESQL,
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
            connect_timeout=connect_timeout,
            options=kwargs,
        )
        super().__init__(config)
        self._conn: Any = None

    @property
    def driver_errors(self) -> tuple[type[BaseException], ...]:  # type: ignore[override]
        import psycopg

        return (psycopg.Error,)

    def connect(self) -> None:
        """Connect to PostgreSQL database."""
        if self._conn is not None:
            return

        try:
            import psycopg
        except ImportError:
            raise ConfigError(
                "psycopg is required for PostgreSQL. Install with: pip install 'psycopg[binary]'"
            ) from None

        try:
            self._conn = psycopg.connect(
                host=self._config.host,
                port=self._config.port,
                dbname=self._config.database,
                user=self._config.username,
                password=self._config.password,
                connect_timeout=self._config.connect_timeout,
                autocommit=True,
                **self._config.options,
            )
            self._connected = True
        except psycopg.Error as e:
            raise ConnectionError(
                f"Failed to connect to PostgreSQL: {e}",
                cause=e,
            ).with_context(endpoint=self._config.endpoint) from e

    def disconnect(self) -> None:
        """Close the PostgreSQL connection."""
        if self._conn is None:
            return
        try:
            self._conn.close()
        except self.driver_errors as e:
            logger.warning("disconnect_failed", error=str(e))
        finally:
            self._conn = None
            self._connected = False

    def get_connection(self) -> Any:
        """Get the open psycopg connection."""
        if self._conn is None:
            self.connect()
        return self._conn

    @property
    def autocommit(self) -> bool:
        return bool(self.get_connection().autocommit)

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        conn = self._conn
        if conn is None or conn.closed or conn.broken:
            return
        conn.autocommit = value

    def set_prepare_threshold(self, threshold: int | None) -> None:
        """Set ``prepare_threshold`` on the connection.

        ``0`` prepares every statement on first execution, ``None``
        disables server-side prepared statements.
        """
        self.get_connection().prepare_threshold = threshold

    def uses_server_prepare(self, executions: int) -> bool:
        threshold = self.get_connection().prepare_threshold
        if threshold is None:
            return False
        return executions >= threshold


__all__ = [
    "PostgreSQLAdapter",
]
