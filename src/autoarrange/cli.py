"""CLI interface for autoarrange."""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler
from rich.markup import escape

from autoarrange import __version__
from autoarrange.config import CONFIG_ENV_VAR, export_policy, load_policy
from autoarrange.display import (
    console,
    format_size,
    show_categories,
    show_file_table,
    show_result,
    show_scan_stats,
    show_scanning_progress,
)
from autoarrange.errors import ConfigurationInvalid, ScanCancelled
from autoarrange.models import ClassificationPolicy, ScanParameters, SearchCriteria
from autoarrange.scanner import run_scan, search_files

app = typer.Typer(
    name="autoarrange",
    help="Inventory and classify recently created or modified files",
    add_completion=False,
    no_args_is_help=True,
)

EXIT_CANCELLED = 130


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def split_paths(paths: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated path list."""
    if not paths:
        return None
    return [p.strip() for p in paths.split(",") if p.strip()] or None


def _load_policy_or_exit(config: Optional[Path]) -> ClassificationPolicy:
    try:
        return load_policy(config)
    except ConfigurationInvalid as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"autoarrange version {__version__}")
        raise typer.Exit()


ConfigOption = typer.Option(
    None,
    "--config",
    envvar=CONFIG_ENV_VAR,
    help="Classification policy JSON file (default: built-in policy)",
)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """autoarrange - classify recent files and summarise them."""


@app.command()
def scan(
    days: int = typer.Option(7, "--days", "-d", min=0, help="Scan files from the last N days"),
    paths: Optional[str] = typer.Option(
        None, "--paths", "-p", help="Comma-separated roots (default: policy scan paths)"
    ),
    include_hidden: bool = typer.Option(False, "--include-hidden", help="Include hidden files"),
    max_depth: int = typer.Option(10, "--max-depth", min=0, help="Maximum recursion depth"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Roots scanned concurrently"),
    content_hints: bool = typer.Option(
        False, "--content-hints", help="Classify by type hints instead of the extension table"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result as JSON"),
    config: Optional[Path] = ConfigOption,
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Scan recent files, classify them and show statistics."""
    configure_logging(verbose)
    policy = _load_policy_or_exit(config)
    params = ScanParameters(
        days=days,
        paths=split_paths(paths),
        include_hidden=include_hidden,
        max_depth=max_depth,
        max_workers=workers,
        content_hints=content_hints,
    )

    console.print(f"[bold blue]Scanning files from the last {days} day(s)...[/bold blue]\n")

    cancel_event = threading.Event()
    try:
        with show_scanning_progress() as progress:
            progress.add_task("Scanning...", total=None)
            result = run_scan(params, policy, cancel_event=cancel_event)
    except (KeyboardInterrupt, ScanCancelled):
        cancel_event.set()
        console.print("[yellow]Scan cancelled[/yellow]")
        raise typer.Exit(EXIT_CANCELLED)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.to_json(), encoding="utf-8")

    show_result(result)

    if output:
        console.print(f"[green]Result written to {escape(str(output))}[/green]")


@app.command()
def search(
    paths: Optional[str] = typer.Option(None, "--paths", "-p", help="Comma-separated roots"),
    ext: Optional[list[str]] = typer.Option(None, "--ext", "-e", help="Extension to match (repeatable)"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Name substring (case-insensitive)"),
    min_size: int = typer.Option(0, "--min-size", min=0, help="Minimum size in bytes"),
    max_size: Optional[int] = typer.Option(None, "--max-size", min=0, help="Maximum size in bytes"),
    after: Optional[datetime] = typer.Option(None, "--after", help="Modified on or after"),
    before: Optional[datetime] = typer.Option(None, "--before", help="Modified on or before"),
    include_hidden: bool = typer.Option(False, "--include-hidden", help="Include hidden files"),
    config: Optional[Path] = ConfigOption,
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Search files by extension, name, size and modification time."""
    configure_logging(verbose)
    policy = _load_policy_or_exit(config)
    criteria = SearchCriteria(
        paths=split_paths(paths),
        extensions=ext or [],
        name_pattern=name,
        size_min=min_size,
        size_max=max_size,
        modified_after=after,
        modified_before=before,
        include_hidden=include_hidden,
    )

    cancel_event = threading.Event()
    try:
        matches, stats = search_files(criteria, policy, cancel_event=cancel_event)
    except (KeyboardInterrupt, ScanCancelled):
        cancel_event.set()
        console.print("[yellow]Search cancelled[/yellow]")
        raise typer.Exit(EXIT_CANCELLED)

    if not matches:
        console.print("[yellow]No matching files.[/yellow]")
    else:
        show_file_table(matches, f"Matches ({len(matches)})")
        console.print(f"[dim]Total: {format_size(sum(r.size for r in matches))}[/dim]")
    show_scan_stats(stats)


@app.command()
def rules(
    config: Optional[Path] = ConfigOption,
) -> None:
    """Print the active classification policy as JSON."""
    policy = _load_policy_or_exit(config)
    console.print_json(export_policy(policy))


@app.command()
def categories(
    config: Optional[Path] = ConfigOption,
) -> None:
    """List categories in rule order."""
    policy = _load_policy_or_exit(config)
    show_categories(policy)
    info = policy.describe()
    console.print(
        f"[dim]{info['totalCategories']} categories, "
        f"size buckets: {', '.join(info['sizeCategories'])}[/dim]"
    )


if __name__ == "__main__":
    app()
