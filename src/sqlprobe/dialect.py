"""SQL dialect abstraction for the probe statements.

The probe statements are written once in :mod:`sqlprobe.queries` with
``{ph}`` placeholder markers and a ``{for_update}`` lock marker. A
``Dialect`` renders them for one driver: the parameter style it binds and
whether it understands an explicit row-lock hint.

Architecture::

    queries.INDEX_SCAN = "SELECT id, data FROM A WHERE id = {ph}"
                              │
                 dialect.render(template)
                              ▼
    ┌──────────────────────────┐   ┌──────────────────────────┐
    │ SQLiteDialect            │   │ PostgreSQLDialect        │
    │ ... WHERE id = ?         │   │ ... WHERE id = %s        │
    │ FOR UPDATE → (omitted)   │   │ FOR UPDATE → FOR UPDATE  │
    └──────────────────────────┘   └──────────────────────────┘

Examples:
    >>> from sqlprobe.dialect import get_dialect
    >>> get_dialect("sqlite").render("SELECT * FROM A WHERE id = {ph}")
    'SELECT * FROM A WHERE id = ?'

Tags:
    dialect, sql, portability, sqlprobe

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlprobe.errors import ConfigError


@runtime_checkable
class Dialect(Protocol):
    """Rendering rules for one database driver."""

    @property
    def name(self) -> str:
        """Canonical dialect name."""
        ...

    def for_update(self) -> str:
        """Row-lock clause appended to a locking read (may be empty)."""
        ...

    def render(self, template: str) -> str:
        """Substitute ``{ph}`` and ``{for_update}`` markers."""
        ...


class _BaseDialect:
    marker = "?"

    def for_update(self) -> str:
        return ""

    def render(self, template: str) -> str:
        lock = self.for_update()
        sql = template.replace("{ph}", self.marker)
        sql = sql.replace("{for_update}", f" {lock}" if lock else "")
        return sql


class SQLiteDialect(_BaseDialect):
    """SQLite dialect: ``?`` placeholders, no row-level lock clause.

    SQLite locks the whole database for writers, so a locking read is a
    plain read inside the enclosing transaction.
    """

    marker = "?"

    @property
    def name(self) -> str:
        return "sqlite"


class PostgreSQLDialect(_BaseDialect):
    """PostgreSQL dialect: ``%s`` placeholders (psycopg), ``FOR UPDATE``."""

    marker = "%s"

    @property
    def name(self) -> str:
        return "postgresql"

    def for_update(self) -> str:
        return "FOR UPDATE"


_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ConfigError: If ``db_type`` is not recognised.
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ConfigError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        )
    return _DIALECTS[key]


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
]
