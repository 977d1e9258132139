"""Database adapters for sqlprobe.

Each adapter wraps one client driver behind :class:`DatabaseAdapter`:

- :class:`PostgreSQLAdapter` — psycopg 3, supports prepare-threshold tuning
- :class:`SQLiteAdapter` — stdlib sqlite3, for dry runs and tests

Usage::

    from sqlprobe.adapters import get_adapter

    with get_adapter("sqlite") as adapter:
        adapter.execute("SELECT 1")
"""

from .base import DatabaseAdapter
from .postgresql import PostgreSQLAdapter
from .registry import AdapterRegistry, adapter_from_settings, adapter_registry, get_adapter
from .sqlite import SQLiteAdapter
from .types import ConnectionConfig, DatabaseType

__all__ = [
    "DatabaseAdapter",
    "ConnectionConfig",
    "DatabaseType",
    "PostgreSQLAdapter",
    "SQLiteAdapter",
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
    "adapter_from_settings",
]
