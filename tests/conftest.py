"""
Shared pytest fixtures and configuration for sqlprobe tests.

This module provides:
- Settings/env isolation so a developer's SQLPROBE_* variables never leak in
- structlog reset between tests
- A captured Transcript and an in-memory SQLite harness

Usage:
    def test_something(seeded_harness):
        assert seeded_harness.index_scan(1) == [(1, "hello_1")]
"""

import io
import os
import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog
from rich.console import Console

# Ensure sqlprobe package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlprobe.adapters import SQLiteAdapter
from sqlprobe.harness import ProbeHarness
from sqlprobe.settings import reset_settings
from sqlprobe.transcript import Transcript


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop SQLPROBE_* variables and the cached settings object."""
    for key in list(os.environ):
        if key.startswith("SQLPROBE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo any configure_logging() a test performed."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Harness Fixtures
# =============================================================================


@pytest.fixture
def transcript_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def transcript(transcript_buffer: io.StringIO) -> Transcript:
    """Transcript writing to an in-memory buffer instead of stdout."""
    return Transcript(Console(file=transcript_buffer, width=200, color_system=None, highlight=False))


@pytest.fixture
def sqlite_adapter() -> Generator[SQLiteAdapter, None, None]:
    adapter = SQLiteAdapter(":memory:")
    yield adapter
    adapter.disconnect()


@pytest.fixture
def harness(sqlite_adapter: SQLiteAdapter, transcript: Transcript) -> Generator[ProbeHarness, None, None]:
    """Open harness on an empty in-memory SQLite database."""
    with ProbeHarness(sqlite_adapter, transcript=transcript) as h:
        yield h


@pytest.fixture
def seeded_harness(harness: ProbeHarness) -> ProbeHarness:
    """Harness after initialize(): A = {1, 2, 3}, B = {1}."""
    harness.initialize()
    return harness


def _table_rows(harness: ProbeHarness, table: str) -> list[tuple]:
    return [tuple(r) for r in harness.adapter.execute(f"SELECT id, data FROM {table} ORDER BY id")]


@pytest.fixture
def table_rows():
    """Read all rows of a table ordered by id, bypassing the harness."""
    return _table_rows


@pytest.fixture
def table_ids():
    """Read the ids of a table in ascending order, bypassing the harness."""
    return lambda harness, table: [row[0] for row in _table_rows(harness, table)]
