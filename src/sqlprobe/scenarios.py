"""Named scenarios: which probe operations to run, in which order.

A scenario is an ordered list of :class:`Step`. A step names a harness
operation and the literal arguments to call it with. Steps are written as
strings so they can come from the command line or ``SQLPROBE_STEPS``::

    initialize
    index_scan:1
    bitmap_scan:1,3
    insert_single_table:5,B,10

Arguments are converted by the annotation of the parameter they bind to:
``str`` parameters keep the token as written, integer parameters get an int.
Every step is checked against the operation's signature before a connection is opened.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, get_type_hints

from sqlprobe.errors import ConfigError
from sqlprobe.harness import probe_operations
from sqlprobe.logging import LogContext, get_logger

if TYPE_CHECKING:
    from sqlprobe.harness import ProbeHarness

logger = get_logger(__name__)


@dataclass(frozen=True)
class Step:
    """One operation call."""

    operation: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        if not self.args:
            return self.operation
        return f"{self.operation}:{','.join(str(a) for a in self.args)}"


SCENARIOS: dict[str, tuple[str, ...]] = {
    "default": ("initialize",),
    "scans": (
        "initialize",
        "seq_scan",
        "index_scan:1",
        "bitmap_scan:1,3",
        "count_rows",
    ),
    "writes": (
        "initialize",
        "update_by_index:3",
        "seq_scan",
        "delete_by_index_scan:Updated",
        "seq_scan",
        "update_by_seq_scan",
        "seq_scan",
    ),
    "prepared": (
        "initialize",
        "insert_single_table:5,A,10",
        "insert_single_table:5,B,10",
        "seq_scan",
    ),
    "dual": (
        "initialize",
        "insert_dual_table:20,10",
        "count_rows",
        "seq_scan",
    ),
    "locking": (
        "initialize",
        "read_modify_write:3",
        "index_scan:3",
    ),
    "union": (
        "initialize",
        "union:1",
    ),
}
SCENARIOS["all"] = (
    "initialize",
    "seq_scan",
    "index_scan:1",
    "bitmap_scan:1,3",
    "count_rows",
    "count_rows:1",
    "insert_single_table:5,A,10",
    "insert_dual_table:5,20",
    "union:1",
    "read_modify_write:3",
    "delete_by_index_scan:Updated",
    "update_by_seq_scan",
    "seq_scan",
)


def _convert_args(spec: str, name: str, operation: Any, tokens: list[str]) -> tuple[Any, ...]:
    hints = get_type_hints(operation)
    params = list(inspect.signature(operation).parameters.values())[1:]  # skip self
    args: list[Any] = []
    for index, token in enumerate(t.strip() for t in tokens):
        hint = hints.get(params[index].name) if index < len(params) else None
        if hint is str:
            args.append(token)
            continue
        try:
            args.append(int(token))
        except ValueError:
            if hint is not None:
                raise ConfigError(
                    f"Invalid arguments for {name!r}: {params[index].name} must be an integer, got {token!r}"
                ).with_context(step=spec) from None
            args.append(token)
    return tuple(args)


def parse_step(spec: str) -> Step:
    """Parse ``op``, ``op:arg`` or ``op:arg1,arg2`` into a validated Step."""
    name, _, raw_args = spec.strip().partition(":")
    name = name.strip()

    operations = probe_operations()
    if name not in operations:
        raise ConfigError(
            f"Unknown operation {name!r}. Available: {', '.join(sorted(operations))}"
        ).with_context(step=spec)

    tokens = raw_args.split(",") if raw_args else []
    args = _convert_args(spec, name, operations[name], tokens)

    try:
        inspect.signature(operations[name]).bind(None, *args)
    except TypeError as e:
        raise ConfigError(f"Invalid arguments for {name!r}: {e}", cause=e).with_context(
            step=spec
        ) from e
    return Step(name, args)


def parse_steps(specs: Sequence[str]) -> list[Step]:
    return [parse_step(spec) for spec in specs]


def resolve_steps(scenario: str | None = None, steps: Sequence[str] | None = None) -> list[Step]:
    """Explicit ``steps`` win; otherwise expand the named ``scenario``."""
    if steps:
        return parse_steps(steps)
    name = scenario or "default"
    if name not in SCENARIOS:
        raise ConfigError(
            f"Unknown scenario {name!r}. Available: {', '.join(sorted(SCENARIOS))}"
        )
    return parse_steps(SCENARIOS[name])


def run_steps(harness: ProbeHarness, steps: Sequence[Step]) -> list[Any]:
    """Run ``steps`` in order, stopping at the first failure.

    Returns each operation's result.
    """
    results = []
    for index, step in enumerate(steps, start=1):
        with LogContext(step=index):
            logger.debug("step_started", spec=str(step))
            results.append(getattr(harness, step.operation)(*step.args))
    return results


__all__ = [
    "SCENARIOS",
    "Step",
    "parse_step",
    "parse_steps",
    "resolve_steps",
    "run_steps",
]
