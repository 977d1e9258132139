"""
Probe harness: one connection, two fixture tables, hand-picked statements.

``ProbeHarness`` opens a single connection through a driver adapter, builds
the fixture tables A and B, and issues one statement shape per operation
(sequential scan, index scan, range scan, updates, delete, locking read,
union, aggregate, repeated inserts). Every operation prints the statement
and what came back so an operator can confirm by eye that the server under
test executed it correctly.

Manifesto:
    - **Thin wrapper:** parsing, planning and execution all happen in the server
    - **Fail loudly:** no retries; driver errors surface as typed ProbeErrors
    - **Always release:** the context manager closes the connection on every path
    - **Restore state:** auto-commit is switched back on after every transaction

Architecture:
    ::

        ProbeHarness ──▶ DatabaseAdapter ──▶ driver (psycopg / sqlite3)
             │                 │
             │                 └── Dialect.render(queries.*)
             └── Transcript (stdout)     structlog events (stderr)

Examples:
    >>> from sqlprobe.adapters import SQLiteAdapter
    >>> with ProbeHarness(SQLiteAdapter()) as harness:
    ...     harness.initialize()
    ...     harness.index_scan(1)
    [(1, 'hello_1')]

Tags:
    harness, integration-test, database, sqlprobe

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import functools
from collections import Counter
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlprobe import queries
from sqlprobe.adapters import DatabaseAdapter, adapter_from_settings
from sqlprobe.errors import ConfigError, ProbeError, QueryError, SchemaError, WriteError
from sqlprobe.logging import ensure_logging, get_logger
from sqlprobe.settings import ProbeSettings
from sqlprobe.transcript import Transcript

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

Row = tuple[Any, ...]


def probe(func: F) -> F:
    """Mark a harness method as a runnable operation and log its lifecycle."""

    @functools.wraps(func)
    def wrapper(self: ProbeHarness, *args: Any, **kwargs: Any) -> Any:
        logger.info("operation_started", operation=func.__name__, args=list(args))
        try:
            result = func(self, *args, **kwargs)
        except ProbeError as e:
            logger.error("operation_failed", operation=func.__name__, **e.to_dict())
            raise
        logger.info("operation_completed", operation=func.__name__)
        return result

    wrapper.is_probe = True  # type: ignore[attr-defined]
    return wrapper  # type: ignore[return-value]


class ProbeHarness:
    """Runs the probe operations against one database connection."""

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        transcript: Transcript | None = None,
        statement_cache_threshold: int | None = 1,
    ):
        ensure_logging()
        self._adapter = adapter
        self._transcript = transcript or Transcript()
        self._threshold = statement_cache_threshold
        self._executions: Counter[str] = Counter()

    @classmethod
    def from_settings(
        cls, settings: ProbeSettings, *, transcript: Transcript | None = None
    ) -> ProbeHarness:
        return cls(
            adapter_from_settings(settings),
            transcript=transcript,
            statement_cache_threshold=settings.statement_cache_threshold,
        )

    @property
    def adapter(self) -> DatabaseAdapter:
        return self._adapter

    # -- Lifecycle -------------------------------------------------------------

    def open(self) -> None:
        """Open the connection. Raises ``ConnectionError`` if unreachable."""
        self._adapter.connect()
        logger.info(
            "connection_opened",
            dsn=self._adapter.config.dsn(),
        )

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        was_connected = self._adapter.is_connected
        self._adapter.disconnect()
        self._executions.clear()
        if was_connected:
            logger.info("connection_closed")

    def __enter__(self) -> ProbeHarness:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -- Helpers -----------------------------------------------------------------

    @contextmanager
    def _errors(
        self, error_cls: type[ProbeError], operation: str, sql: str | None = None
    ) -> Iterator[None]:
        """Translate driver exceptions raised in the body into ``error_cls``."""
        try:
            yield
        except self._adapter.driver_errors as e:
            raise error_cls(f"{operation} failed: {e}", cause=e).with_context(
                operation=operation, sql=sql, driver=self._adapter.db_type.value
            ) from e

    def _render(self, template: str) -> str:
        return self._adapter.dialect.render(template)

    def _execute(self, sql: str, params: tuple | None = None) -> Any:
        self._executions[sql] += 1
        return self._adapter.execute(sql, params)

    def _expects_server_prepare(self, sql: str) -> bool:
        return self._adapter.uses_server_prepare(self._executions[sql])

    def _tune_prepare(self) -> None:
        if self._threshold is None:
            return
        if not self._adapter.supports_prepared_statement_tuning:
            logger.debug("prepare_tuning_unsupported", driver=self._adapter.db_type.value)
            return
        self._adapter.set_prepare_threshold(self._threshold)

    @staticmethod
    def _table(target: str) -> str:
        table = str(target).upper()
        if table not in queries.TABLES:
            raise ConfigError(f"Unknown target table: {target!r} (expected A or B)")
        return table

    def _scan(self, label: str, operation: str, template: str, params: tuple | None = None) -> list[Row]:
        sql = self._render(template)
        suffix = f" ? = {', '.join(str(p) for p in params)}" if params else ""
        self._transcript.heading(f"{label} Test:{suffix}")
        self._transcript.query(sql)

        rows: list[Row] = []
        with self._errors(QueryError, operation, sql):
            for row in self._execute(sql, params):
                rows.append(tuple(row))
                self._transcript.row(label, row)
        return rows

    def _write(self, operation: str, template: str, params: tuple) -> int:
        sql = self._render(template)
        self._transcript.query(sql)
        with self._errors(WriteError, operation, sql):
            cursor = self._execute(sql, params)
        return cursor.rowcount

    # -- Schema ------------------------------------------------------------------

    @probe
    def initialize(self) -> None:
        """Drop and recreate A and B, then load the seed rows."""
        for sql in queries.DROP_IF_EXISTS + queries.CREATE:
            with self._errors(SchemaError, "initialize", sql):
                self._execute(sql)
        for sql in queries.SEED:
            with self._errors(WriteError, "initialize", sql):
                self._execute(sql)
        with self._errors(QueryError, "initialize", queries.SEQ_SCAN):
            self._execute(queries.SEQ_SCAN).fetchall()
        self._transcript.line("Test db created.")

    # -- Inserts -----------------------------------------------------------------

    @probe
    def insert_single_table(self, count: int, target: str = queries.TABLE_A, start: int = 0) -> int:
        """Insert ``count`` rows into one table with a single reused statement.

        Ids run from ``start`` to ``start + count - 1``; every execution
        commits on its own. Returns the number of rows inserted.
        """
        table = self._table(target)
        sql = self._render(queries.INSERT_INTO[table])
        self._tune_prepare()
        self._transcript.heading(f"Insert Test: {count} rows into {table}")
        self._transcript.query(sql)

        inserted = 0
        for row_id in range(start, start + count):
            server_prepare = self._expects_server_prepare(sql)
            with self._errors(WriteError, "insert_single_table", sql):
                cursor = self._execute(sql, (row_id, queries.row_data(table, row_id)))
            inserted += cursor.rowcount
            self._transcript.line(
                f"Used server side prepare {server_prepare}, Inserted: {cursor.rowcount}"
            )
        return inserted

    @probe
    def insert_dual_table(self, count: int, start: int = 0) -> int:
        """Insert one row into A and one into B per id, all in one transaction.

        Nothing is committed if any insert fails. Returns the number of
        row pairs inserted.
        """
        sql_a = self._render(queries.INSERT_A)
        sql_b = self._render(queries.INSERT_B)
        self._tune_prepare()
        self._transcript.heading(f"Dual Insert Test: {count} rows into A and B")
        self._transcript.query(sql_a)
        self._transcript.query(sql_b)

        with self._errors(WriteError, "insert_dual_table"):
            with self._adapter.transaction():
                for row_id in range(start, start + count):
                    self._execute(sql_a, (row_id, queries.row_data(queries.TABLE_A, row_id)))
                    self._execute(sql_b, (row_id, queries.row_data(queries.TABLE_B, row_id)))
        self._transcript.line(f"Committed: {count} rows into A and B")
        return count

    # -- Scans -------------------------------------------------------------------

    @probe
    def seq_scan(self) -> list[Row]:
        """Unqualified select over A."""
        return self._scan("SeqScan", "seq_scan", queries.SEQ_SCAN)

    @probe
    def index_scan(self, row_id: int) -> list[Row]:
        """Select from A with an equality qualifier on ``id``."""
        return self._scan("IndexScan", "index_scan", queries.INDEX_SCAN, (row_id,))

    @probe
    def bitmap_scan(self, low: int, high: int) -> list[Row]:
        """Select from A with the strict range ``low < id < high``."""
        return self._scan("BitmapScan", "bitmap_scan", queries.BITMAP_SCAN, (low, high))

    @probe
    def count_rows(self, row_id: int | None = None) -> int:
        """``COUNT(*)`` over A, optionally qualified by ``id``."""
        if row_id is None:
            template, params = queries.AGG_COUNT, None
        else:
            template, params = queries.AGG_COUNT_BY_ID, (row_id,)
        sql = self._render(template)
        suffix = f" ? = {row_id}" if row_id is not None else ""
        self._transcript.heading(f"Count Test:{suffix}")
        self._transcript.query(sql)

        with self._errors(QueryError, "count_rows", sql):
            count = self._execute(sql, params).fetchone()[0]
        self._transcript.line(f"Count: {count}")
        return count

    # -- Updates and deletes -------------------------------------------------------

    @probe
    def update_by_index(self, row_id: int) -> int:
        """Set ``data`` to ``Updated`` for one id. Returns rows affected."""
        self._transcript.heading(f"Update Test: ? = {row_id}")
        updated = self._write(
            "update_by_index", queries.UPDATE_BY_INDEX_SCAN, (queries.UPDATED_DATA, row_id)
        )
        self._transcript.line(f"Updated: id: {row_id}, data: {queries.UPDATED_DATA}")
        return updated

    @probe
    def update_by_seq_scan(self) -> int:
        """Set ``data`` to ``Updated`` for every row of A. Returns rows affected."""
        self._transcript.heading("Update Test:")
        updated = self._write(
            "update_by_seq_scan", queries.UPDATE_BY_SEQ_SCAN, (queries.UPDATED_DATA,)
        )
        self._transcript.line(f"Updated: {updated} rows, data: {queries.UPDATED_DATA}")
        return updated

    @probe
    def delete_by_index_scan(self, data: str = queries.UPDATED_DATA) -> int:
        """Delete the rows of A whose ``data`` matches. Returns rows affected."""
        self._transcript.heading(f"Delete Test: ? = {data}")
        deleted = self._write("delete_by_index_scan", queries.DELETE_BY_INDEX_SCAN, (data,))
        self._transcript.line(f"Deleted: {deleted} rows with data = {data}")
        return deleted

    # -- Locking and set operations -----------------------------------------------

    @probe
    def read_modify_write(self, row_id: int) -> list[Row]:
        """Lock one row with a locking read, then update that same row.

        Both statements run in one transaction so the row lock is held
        until the update commits. Returns the rows read.
        """
        select_sql = self._render(queries.SELECT_FOR_UPDATE)
        update_sql = self._render(queries.UPDATE_BY_INDEX_SCAN)
        self._transcript.heading(f"ReadModifyWrite Test: ? = {row_id}")
        self._transcript.query(select_sql)

        rows: list[Row] = []
        with self._errors(WriteError, "read_modify_write"):
            with self._adapter.transaction():
                with self._errors(QueryError, "read_modify_write", select_sql):
                    for row in self._execute(select_sql, (row_id,)):
                        rows.append(tuple(row))
                        self._transcript.row("ReadModifyWrite", row)
                self._transcript.query(update_sql)
                with self._errors(WriteError, "read_modify_write", update_sql):
                    self._execute(update_sql, (queries.UPDATED_DATA, row_id))
        self._transcript.line(f"Updated: id: {row_id}, data: {queries.UPDATED_DATA}")
        return rows

    @probe
    def union(self, row_id: int) -> Any:
        """UNION of A and B filtered by the same id; returns the first column
        of the first row, or ``None`` when nothing matched."""
        sql = self._render(queries.UNION)
        self._tune_prepare()
        self._transcript.heading(f"Union Test: ? = {row_id}")
        self._transcript.query(sql)

        with self._errors(QueryError, "union", sql):
            rows = self._execute(sql, (row_id, row_id)).fetchall()
        value = rows[0][0] if rows else None
        self._transcript.line(str(value))
        return value

    # -- Diagnostics ---------------------------------------------------------------

    def ping(self) -> bool:
        """Round-trip ``SELECT 1``."""
        with self._errors(QueryError, "ping", queries.PING):
            row = self._execute(queries.PING).fetchone()
        return bool(row) and row[0] == 1


def probe_operations() -> dict[str, Callable[..., Any]]:
    """Name → unbound method for every runnable harness operation."""
    return {
        name: member
        for name, member in vars(ProbeHarness).items()
        if callable(member) and getattr(member, "is_probe", False)
    }


__all__ = [
    "ProbeHarness",
    "Row",
    "probe",
    "probe_operations",
]
