"""Driver name → adapter class, and adapter construction from settings.

``adapter_from_settings()`` is the only place that knows which settings
fields each driver consumes; the harness and the CLI never name an adapter
class.

Examples:
    >>> get_adapter("sqlite", path=":memory:").db_type
    <DatabaseType.SQLITE: 'sqlite'>
    >>> adapter_registry.names()
    ['postgres', 'postgresql', 'sqlite']

Tags:
    sqlprobe, database, registry, factory

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlprobe.errors import ConfigError

from .base import DatabaseAdapter
from .postgresql import PostgreSQLAdapter
from .sqlite import SQLiteAdapter
from .types import DatabaseType

if TYPE_CHECKING:
    from sqlprobe.settings import ProbeSettings


class AdapterRegistry:
    """Case-insensitive mapping of driver names to adapter classes.

    ``postgres`` is accepted as an alias of ``postgresql``.
    """

    def __init__(self):
        self._adapters: dict[str, type[DatabaseAdapter]] = {
            DatabaseType.SQLITE.value: SQLiteAdapter,
            DatabaseType.POSTGRESQL.value: PostgreSQLAdapter,
            "postgres": PostgreSQLAdapter,
        }

    def register(self, name: str, adapter_class: type[DatabaseAdapter]) -> None:
        self._adapters[name.lower()] = adapter_class

    def create(self, name: str, **kwargs: Any) -> DatabaseAdapter:
        """Instantiate the adapter registered under ``name`` (not connected)."""
        try:
            adapter_class = self._adapters[name.lower()]
        except KeyError:
            raise ConfigError(
                f"Unknown database adapter: {name}. Available: {', '.join(self.names())}"
            ) from None
        return adapter_class(**kwargs)

    def names(self) -> list[str]:
        return sorted(self._adapters)


adapter_registry = AdapterRegistry()


def get_adapter(db_type: DatabaseType | str, **kwargs: Any) -> DatabaseAdapter:
    """Build an adapter from a driver name or ``DatabaseType``."""
    name = db_type.value if isinstance(db_type, DatabaseType) else db_type
    return adapter_registry.create(name, **kwargs)


def adapter_from_settings(settings: ProbeSettings) -> DatabaseAdapter:
    """Build the adapter described by ``settings`` (not connected yet)."""
    if settings.driver == DatabaseType.SQLITE.value:
        return get_adapter(settings.driver, path=settings.sqlite_path)
    return get_adapter(
        settings.driver,
        host=settings.host,
        port=settings.port,
        database=settings.database,
        username=settings.user,
        password=settings.password.get_secret_value(),
        connect_timeout=settings.connect_timeout,
    )


__all__ = [
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
    "adapter_from_settings",
]
