"""
sqlprobe - manual integration-test harness for SQL databases.

Connects to a database, builds two fixture tables, and issues one
statement per query shape (scans, updates, delete, locking read, union,
repeated inserts) so an operator can confirm the server handles each.
"""

__version__ = "0.1.0"

from sqlprobe.errors import (
    ConfigError,
    ConnectionError,
    ProbeError,
    QueryError,
    SchemaError,
    WriteError,
)
from sqlprobe.harness import ProbeHarness
from sqlprobe.settings import ProbeSettings, get_settings

__all__ = [
    "ProbeHarness",
    "ProbeSettings",
    "get_settings",
    "ProbeError",
    "ConnectionError",
    "SchemaError",
    "WriteError",
    "QueryError",
    "ConfigError",
]
