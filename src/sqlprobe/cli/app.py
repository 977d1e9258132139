"""
Root Typer application for the sqlprobe CLI.

Connection options given on the command line override ``SQLPROBE_*``
environment variables and ``.env``. The password is only read from the
environment (``SQLPROBE_PASSWORD``).
"""

from __future__ import annotations

from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlprobe.errors import ProbeError
from sqlprobe.harness import ProbeHarness
from sqlprobe.logging import configure_logging, get_logger
from sqlprobe.scenarios import SCENARIOS, resolve_steps, run_steps
from sqlprobe.settings import ProbeSettings
from sqlprobe.transcript import Transcript

app = typer.Typer(
    name="sqlprobe",
    help="sqlprobe — run hand-picked statements against a live SQL database.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console(highlight=False)
err_console = Console(stderr=True)

logger = get_logger(__name__)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("sqlprobe")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"sqlprobe {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sqlprobe CLI — exercise scans, writes, locking reads and unions."""


# ── Helpers ──────────────────────────────────────────────────────────────


def _build_settings(**overrides: Any) -> ProbeSettings:
    """Settings from env/.env with non-None command-line overrides applied."""
    try:
        return ProbeSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValueError as e:
        err_console.print(f"[bold red]Error[/bold red] (CONFIG): {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _setup_logging(settings: ProbeSettings) -> None:
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


def _fail(error: ProbeError) -> NoReturn:
    logger.error("command_failed", **error.to_dict())
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {escape(error.message)}")
    raise typer.Exit(code=1)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def run(
    scenario: str | None = typer.Option(None, "--scenario", "-s", help="Named scenario to run"),
    step: list[str] | None = typer.Option(  # noqa: UP007
        None, "--step", help="Explicit step, e.g. index_scan:1 (repeatable, overrides --scenario)"
    ),
    driver: str | None = typer.Option(None, "--driver", help="postgresql or sqlite"),
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port", "-p"),
    database: str | None = typer.Option(None, "--database", "-d"),
    user: str | None = typer.Option(None, "--user", "-U"),
    sqlite_path: str | None = typer.Option(None, "--sqlite-path", help="Database file for --driver sqlite"),
    threshold: int | None = typer.Option(
        None, "--threshold", help="Executions before a statement is server-prepared"
    ),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Run a scenario and print the transcript."""
    settings = _build_settings(
        scenario=scenario,
        steps=step or None,
        driver=driver,
        host=host,
        port=port,
        database=database,
        user=user,
        sqlite_path=sqlite_path,
        statement_cache_threshold=threshold,
        log_level=log_level.upper() if log_level else None,
    )
    _setup_logging(settings)

    try:
        steps = resolve_steps(settings.scenario, settings.steps)
        with ProbeHarness.from_settings(settings, transcript=Transcript(console)) as harness:
            run_steps(harness, steps)
    except ProbeError as e:
        _fail(e)


@app.command()
def scenarios() -> None:
    """List the built-in scenarios and their steps."""
    table = Table(title="Scenarios", show_lines=False, pad_edge=False)
    table.add_column("name", style="cyan")
    table.add_column("steps", overflow="fold")
    for name, steps in SCENARIOS.items():
        table.add_row(name, " → ".join(steps))
    console.print(table)


@app.command()
def ping(
    driver: str | None = typer.Option(None, "--driver", help="postgresql or sqlite"),
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port", "-p"),
    database: str | None = typer.Option(None, "--database", "-d"),
    user: str | None = typer.Option(None, "--user", "-U"),
    sqlite_path: str | None = typer.Option(None, "--sqlite-path"),
) -> None:
    """Check that the database endpoint accepts a connection."""
    settings = _build_settings(
        driver=driver,
        host=host,
        port=port,
        database=database,
        user=user,
        sqlite_path=sqlite_path,
    )
    _setup_logging(settings)

    try:
        with ProbeHarness.from_settings(settings, transcript=Transcript(console)) as harness:
            ok = harness.ping()
    except ProbeError as e:
        _fail(e)

    dsn = harness.adapter.config.dsn()
    if not ok:
        err_console.print(f"[bold red]Error[/bold red] (QUERY): unexpected ping result from {dsn}")
        raise typer.Exit(code=1)
    console.print(f"[green]OK[/green] {dsn}")
