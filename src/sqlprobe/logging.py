"""
Structured logging for sqlprobe.

The console transcript (query text, returned rows) is written to stdout for
the operator to read. Structured log events (connection opened, operation
started, error raised) go through structlog to stderr so the two never
interleave in a captured transcript.

Processor chain::

    merge_contextvars → add_log_level → logger name → StackInfoRenderer → set_exc_info
        → service name → [TimeStamper] → ECS field names (JSON only)
        → JSONRenderer | ConsoleRenderer

Examples:
    >>> from sqlprobe.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> log = get_logger(__name__)
    >>> log.info("operation_started", operation="seq_scan")

Tags:
    logging, structlog, sqlprobe

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# structlog key → Elastic Common Schema key
_ECS_RENAMES = {
    "timestamp": "@timestamp",
    "level": "log.level",
}


def _service_name(service: str) -> Processor:
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", service)
        return event_dict

    return add_service


def _logger_field(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    if "logger_name" in event_dict:
        event_dict["logger"] = event_dict.pop("logger_name")
    return event_dict


def _ecs_field_names(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key, ecs_key in _ECS_RENAMES.items():
        if key in event_dict:
            event_dict[ecs_key] = event_dict.pop(key)
    return event_dict


def configure_logging(
    level: str = "WARNING",
    json_format: bool | None = None,
    service: str = "sqlprobe",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog (and the stdlib root logger) to write to stderr.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines when True, coloured console when False,
            JSON unless stderr is a terminal when None
        service: Value of the ``service.name`` field
        add_timestamp: Add an ISO timestamp to every event
    """
    numeric_level = getattr(logging, level.upper())
    stream = sys.stderr
    if json_format is None:
        json_format = not stream.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        _logger_field,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _service_name(service),
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors += [_ecs_field_names, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)


def ensure_logging() -> None:
    """Apply the stderr/WARNING defaults unless logging is already configured."""
    if not structlog.is_configured():
        configure_logging()


def get_logger(name: str | None = None) -> Any:
    """Structured logger, usually ``get_logger(__name__)``.

    PrintLogger has no name of its own, so the name travels as an initial
    ``logger_name`` value on the lazy proxy (``logger`` is taken by
    ``wrap_logger``) and is renamed to ``logger`` by the processor chain.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


def bind_context(**kwargs: Any) -> None:
    """Attach ``kwargs`` to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Bind context for the duration of a ``with`` block.

    Example:
        with LogContext(step=2):
            log.info("step_started", spec="index_scan:1")
    """

    def __init__(self, **kwargs: Any):
        self._keys = tuple(kwargs)
        self._values = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._values)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self._keys)


__all__ = [
    "configure_logging",
    "ensure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "LogContext",
]
