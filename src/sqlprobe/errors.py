"""
Structured error types for sqlprobe.

Every failure the harness can surface is one of a small set of typed errors.
Each carries a category for the console and log output, optional context
(operation name, statement text, driver name) and the chained driver
exception that caused it.

Manifesto:
    - **Typed Error Hierarchy:** One error per failure kind (connect, DDL, DML, query)
    - **Fail Loudly:** Nothing is retried; every error reaches the caller
    - **Rich Context:** Errors carry the operation and statement that failed
    - **Error Chaining:** The driver exception is kept as ``cause``

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                        ProbeError                          │
        │             (category, context, cause)                     │
        ├───────────────────────────────────────────────────────────┤
        │  ConnectionError   SchemaError   WriteError   QueryError   │
        │  (CONNECTION)      (SCHEMA)      (WRITE)      (QUERY)      │
        │                                                            │
        │  ConfigError                                               │
        │  (CONFIG)                                                  │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> error = WriteError("duplicate key value")
    >>> error.category
    <ErrorCategory.WRITE: 'WRITE'>
    >>> error.with_context(operation="insert_single_table").context["operation"]
    'insert_single_table'

Guardrails:
    ❌ DON'T: Let raw driver exceptions escape the harness
    ✅ DO: Translate them into the matching ProbeError subclass with cause=

Tags:
    error-handling, exception-hierarchy, error-context, sqlprobe

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories shown on the console and in structured logs."""

    CONNECTION = "CONNECTION"
    SCHEMA = "SCHEMA"
    WRITE = "WRITE"
    QUERY = "QUERY"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class ProbeError(Exception):
    """
    Base exception for all sqlprobe errors.

    Subclasses set ``default_category``. Instances carry:

    - **message:** human-readable description
    - **category:** ErrorCategory for routing and display
    - **context:** free-form metadata (operation, sql, driver, ...)
    - **cause:** the underlying driver exception, also set as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ProbeError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("bad query").with_context(operation="seq_scan")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ConnectionError(ProbeError):
    """Cannot reach the database endpoint or the credentials were rejected."""

    default_category = ErrorCategory.CONNECTION


class SchemaError(ProbeError):
    """DDL statement rejected (e.g. insufficient privileges)."""

    default_category = ErrorCategory.SCHEMA


class WriteError(ProbeError):
    """DML statement rejected (constraint violation, type mismatch, lost connection)."""

    default_category = ErrorCategory.WRITE


class QueryError(ProbeError):
    """Malformed or rejected query."""

    default_category = ErrorCategory.QUERY


class ConfigError(ProbeError):
    """
    Configuration error.

    Raised for unknown drivers, scenarios or operations before any
    statement is sent.
    """

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ProbeError",
    "ConnectionError",
    "SchemaError",
    "WriteError",
    "QueryError",
    "ConfigError",
]
