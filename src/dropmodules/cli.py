"""CLI interface for dropmodules."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler
from rich.markup import escape

from dropmodules import __version__
from dropmodules.config import ConfigError, load_settings
from dropmodules.display import (
    confirm_action,
    console,
    err_console,
    select_directories,
    show_cancelled,
    show_deletion_start,
    show_discovery,
    show_error,
    show_nothing_found,
    show_nothing_selected,
    show_outcome,
    show_scan_start,
    show_summary,
)
from dropmodules.models import DirectoryEntry, DiscoveryResult, RunStatus
from dropmodules.runner import resolve_root, run_cleanup

# Create Typer app
app = typer.Typer(
    name="dropmodules",
    help="Find node_modules directories, pick the ones to drop, and delete them in parallel",
    add_completion=False,
)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dropmodules version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    root: Optional[Path] = typer.Argument(
        None, help="Directory to search (default: current directory)"
    ),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="Directory name to look for [default: node_modules]"
    ),
    jobs: Optional[int] = typer.Option(
        None, "--jobs", "-j", help="Deletions to run at once [default: 3]"
    ),
    size_workers: Optional[int] = typer.Option(
        None, "--size-workers", help="Threads used to measure found directories [default: 8]"
    ),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", help="Rows per page in the selection list [default: 50]"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    verbose: int = typer.Option(
        0, "--verbose", count=True, help="Increase log output (--verbose info, twice for debug)"
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find directories by name, choose which to delete, and delete them."""
    _setup_logging(verbose)

    try:
        settings = load_settings().with_overrides(
            target_name=target,
            max_concurrent_deletions=jobs,
            max_size_workers=size_workers,
            page_size=page_size,
        )
    except ConfigError as e:
        show_error(str(e))
        raise typer.Exit(1)

    root_str = resolve_root(root)
    show_scan_start(root_str, settings.target_name)

    status = console.status("Scanning...")
    status.start()

    def update_status(entry: DirectoryEntry) -> None:
        status.update(f"Scanning... measured {escape(entry.path)}")

    # The spinner must be gone before any prompt is shown
    def scan_finished(result: DiscoveryResult) -> None:
        status.stop()
        show_discovery(result)

    def start_deleting(entries: list[DirectoryEntry]) -> None:
        show_deletion_start(len(entries), sum(e.size_bytes for e in entries), dry_run=dry_run)

    try:
        report = run_cleanup(
            root_str,
            select=select_directories,
            confirm=confirm_action,
            settings=settings,
            on_found=update_status,
            on_discovered=scan_finished,
            on_delete_start=start_deleting,
            on_outcome=show_outcome,
            assume_yes=yes,
            dry_run=dry_run,
        )
    finally:
        status.stop()

    if report.status == RunStatus.FAILED:
        show_error(report.error or "unknown error")
        raise typer.Exit(1)

    if report.status == RunStatus.NOTHING_FOUND:
        show_nothing_found(report.root, settings.target_name)
    elif report.status == RunStatus.NOTHING_SELECTED:
        show_nothing_selected()
    elif report.status == RunStatus.CANCELLED:
        show_cancelled()
    else:
        show_summary(report)
        if report.failure_count:
            raise typer.Exit(1)


if __name__ == "__main__":
    app()
