"""
CLI layer for sqlprobe.

Provides a Typer application that builds settings, opens the harness and
runs the selected scenario. All database work lives in
:mod:`sqlprobe.harness`; this package handles argument parsing and
terminal output only.

Entry point::

    sqlprobe --help
"""

from sqlprobe.cli.app import app

__all__ = ["app"]
