"""Kuroryuu CLI — recent-projects registry commands."""

import json
import logging
import os
from datetime import datetime, timezone

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from kuroryuu import __version__
from kuroryuu.config import ConfigError, load_settings
from kuroryuu.projects.exceptions import StoreError

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/]")
    raise SystemExit(1)


def _ago(stamp: datetime) -> str:
    seconds = int((datetime.now(timezone.utc) - stamp).total_seconds())
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit} ago"
    return "just now"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Kuroryuu — terminal coding agent."""
    try:
        settings = load_settings()
    except ConfigError as e:
        _fail(str(e))
    _setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


# ── Projects ─────────────────────────────────────────────────────────


@main.group()
def projects():
    """Manage the recent-projects registry."""


@projects.command()
@click.argument("path", default=".", type=click.Path(file_okay=False))
@click.option("--data-dir", "-d", default=None, help="Project data directory (default: discovered)")
@click.pass_obj
def register(settings, path: str, data_dir: str | None):
    """Record PATH as a recently opened project.

    Without --data-dir the nearest existing data directory in PATH or one of
    its parents is used, falling back to a new one inside PATH.
    """
    from kuroryuu.projects.paths import default_data_dir
    from kuroryuu.projects.store import ProjectStore

    project = os.path.abspath(path)
    if data_dir:
        resolved = os.path.abspath(data_dir)
    else:
        resolved = str(default_data_dir(project, settings.data_dir_name))

    try:
        record = ProjectStore().register(project, resolved)
    except StoreError as e:
        _fail(str(e))

    console.print(f"  Registered: [cyan]{record.path}[/]")
    console.print(f"  Data dir:   {record.data_dir}")


@projects.command(name="list")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None, help="Maximum rows")
@click.option("--all", "show_all", is_flag=True, help="Show every project")
@click.option("--json", "as_json", is_flag=True, help="Print the raw records as JSON")
@click.pass_obj
def list_entries(settings, limit: int | None, show_all: bool, as_json: bool):
    """List recent projects, most recent first."""
    from kuroryuu.projects.store import ProjectStore

    try:
        records = ProjectStore().list()
    except StoreError as e:
        _fail(str(e))

    if not show_all:
        records = records[: limit or settings.recent_limit]

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        console.print("[yellow]No recent projects.[/]")
        return

    table = Table(title=f"Recent projects ({len(records)})")
    table.add_column("Path", style="cyan")
    table.add_column("Data dir")
    table.add_column("Last accessed", justify="right", style="green")
    table.add_column("Exists", justify="center")

    for record in records:
        exists = "[green]Y[/]" if record.exists else "[red]N[/]"
        table.add_row(record.path, record.data_dir, _ago(record.last_accessed), exists)

    console.print(table)


@projects.command(name="path")
def show_path():
    """Print the location of the registry file."""
    from kuroryuu.projects.store import store_path

    click.echo(str(store_path()))


if __name__ == "__main__":
    main()
