"""Driver names and the connection parameters an adapter is built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    """Drivers the harness can talk to."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Where and how an adapter connects.

    SQLite only reads ``path``; PostgreSQL reads the endpoint, credentials
    and ``connect_timeout``. ``options`` are passed to the driver untouched.
    """

    db_type: DatabaseType
    path: str | None = None
    host: str = "localhost"
    port: int = 5432
    database: str = ""
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    connect_timeout: int = 10
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def endpoint(self) -> str:
        if self.db_type is DatabaseType.SQLITE:
            return self.path or ":memory:"
        return f"{self.host}:{self.port}"

    def dsn(self, *, redact: bool = True) -> str:
        """URL form of the connection, with the password masked by default."""
        if self.db_type is DatabaseType.SQLITE:
            return f"sqlite:///{self.endpoint}"
        userinfo = self.username or ""
        if self.password:
            userinfo += ":" + ("***" if redact else self.password)
        return f"postgresql://{userinfo}@{self.endpoint}/{self.database}"


__all__ = [
    "ConnectionConfig",
    "DatabaseType",
]
