"""
Tests for the sqlprobe CLI.

Runs the Typer app with CliRunner against SQLite files and a mocked
psycopg connection.
"""

from __future__ import annotations

from unittest.mock import patch

import psycopg
import pytest
from typer.testing import CliRunner

from sqlprobe.cli import app

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "probe.db")


class TestRun:
    def test_scans_scenario(self, db_path):
        result = runner.invoke(app, ["run", "--driver", "sqlite", "--sqlite-path", db_path, "-s", "scans"])
        assert result.exit_code == 0, result.output
        assert "Test db created." in result.output
        assert "IndexScan got tuple: id: 1, data: hello_1" in result.output
        assert "BitmapScan got tuple: id: 2, data: hello_2" in result.output
        assert "Count: 3" in result.output

    def test_explicit_steps(self, db_path):
        result = runner.invoke(
            app,
            [
                "run", "--driver", "sqlite", "--sqlite-path", db_path,
                "--step", "initialize", "--step", "union:1",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Union Test: ? = 1" in result.output

    def test_settings_from_env(self, db_path, monkeypatch):
        monkeypatch.setenv("SQLPROBE_DRIVER", "sqlite")
        monkeypatch.setenv("SQLPROBE_SQLITE_PATH", db_path)
        monkeypatch.setenv("SQLPROBE_SCENARIO", "locking")
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0, result.output
        assert "IndexScan got tuple: id: 3, data: Updated" in result.output

    def test_write_failure_exits_nonzero(self, db_path):
        result = runner.invoke(
            app,
            [
                "run", "--driver", "sqlite", "--sqlite-path", db_path,
                "--step", "initialize", "--step", "insert_dual_table:3",
            ],
        )
        assert result.exit_code == 1
        assert "Error (WRITE)" in result.output

    def test_unknown_step(self, db_path):
        result = runner.invoke(app, ["run", "--driver", "sqlite", "--sqlite-path", db_path, "--step", "vacuum"])
        assert result.exit_code == 1
        assert "Error (CONFIG)" in result.output

    def test_unknown_scenario(self, db_path):
        result = runner.invoke(app, ["run", "--driver", "sqlite", "--sqlite-path", db_path, "-s", "nope"])
        assert result.exit_code == 1
        assert "Error (CONFIG)" in result.output

    def test_unknown_driver(self):
        result = runner.invoke(app, ["run", "--driver", "oracle"])
        assert result.exit_code == 1
        assert "Error (CONFIG)" in result.output

    def test_invalid_port(self):
        result = runner.invoke(app, ["run", "--port", "70000"])
        assert result.exit_code == 1
        assert "Error (CONFIG)" in result.output

    def test_connection_failure(self):
        with patch("psycopg.connect", side_effect=psycopg.OperationalError("connection refused")):
            result = runner.invoke(app, ["run", "--host", "nowhere", "-s", "scans"])
        assert result.exit_code == 1
        assert "Error (CONNECTION)" in result.output


class TestPing:
    def test_ping_sqlite(self, db_path):
        result = runner.invoke(app, ["ping", "--driver", "sqlite", "--sqlite-path", db_path])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "sqlite:///" in result.output

    def test_ping_connection_failure(self):
        with patch("psycopg.connect", side_effect=psycopg.OperationalError("connection refused")):
            result = runner.invoke(app, ["ping", "--host", "nowhere"])
        assert result.exit_code == 1
        assert "Error (CONNECTION)" in result.output


class TestInfoCommands:
    def test_scenarios(self):
        result = runner.invoke(app, ["scenarios"])
        assert result.exit_code == 0
        for name in ("default", "scans", "writes", "prepared", "dual", "locking", "union", "all"):
            assert name in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "sqlprobe" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "run" in result.output
