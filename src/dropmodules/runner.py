"""Discover, select, confirm and delete: one cleanup run end to end."""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from dropmodules.cleaner import delete_directories
from dropmodules.config import Settings
from dropmodules.display import format_option, format_size
from dropmodules.models import (
    DeletionOutcome,
    DirectoryEntry,
    DiscoveryResult,
    RunReport,
    RunStatus,
    validate_selection,
)
from dropmodules.recursive_scanner import ScanError, find_directories

log = logging.getLogger(__name__)

SelectFn = Callable[[str, list[str], int], list[int]]
ConfirmFn = Callable[[str], bool]


def resolve_root(root: Optional[Path | str] = None) -> str:
    """Return ``root`` as an absolute path, or the working directory if not given."""
    if root is None:
        return os.getcwd()
    return os.path.abspath(os.path.expanduser(os.fspath(root)))


def selection_message(count: int, target_name: str) -> str:
    return f"Found {count} {target_name} directories. Select directories to DELETE:"


def confirmation_message(count: int, total_bytes: int) -> str:
    return (
        f"Are you sure you want to DELETE {count} directories "
        f"(total size: {format_size(total_bytes)})? This cannot be undone!"
    )


def run_cleanup(
    root: Optional[Path | str],
    select: SelectFn,
    confirm: ConfirmFn,
    settings: Optional[Settings] = None,
    on_found: Callable[[DirectoryEntry], None] | None = None,
    on_discovered: Callable[[DiscoveryResult], None] | None = None,
    on_delete_start: Callable[[list[DirectoryEntry]], None] | None = None,
    on_outcome: Callable[[DeletionOutcome], None] | None = None,
    assume_yes: bool = False,
    dry_run: bool = False,
) -> RunReport:
    """
    Run a full cleanup.

    Args:
        root: Directory to search (default: current working directory)
        select: callback(message, options, page_size) returning chosen indices
        confirm: callback(message) returning True to go ahead
        settings: Settings to use (default: built-in defaults)
        on_found: Optional callback(entry) for each measured directory
        on_discovered: Optional callback(result) once the scan has finished
        on_delete_start: Optional callback(entries) just before deleting
        on_outcome: Optional callback(outcome) as each deletion finishes
        assume_yes: If True, skip the confirmation callback
        dry_run: If True, don't actually delete

    Returns:
        RunReport describing how far the run got
    """
    settings = settings or Settings()
    root_str = resolve_root(root)

    try:
        discovery = find_directories(
            root_str,
            target_name=settings.target_name,
            max_workers=settings.max_size_workers,
            on_found=on_found,
        )
    except ScanError as e:
        return RunReport(status=RunStatus.FAILED, root=root_str, error=str(e))

    if on_discovered:
        on_discovered(discovery)

    report = RunReport(
        status=RunStatus.NOTHING_FOUND,
        root=root_str,
        discovered=discovery.entries,
        skipped=discovery.skipped,
        dry_run=dry_run,
    )
    if not discovery.entries:
        return report

    entries = discovery.entries
    options = [format_option(entry) for entry in entries]
    try:
        indices = select(
            selection_message(len(entries), settings.target_name),
            options,
            settings.page_size,
        )
        validate_selection(indices, len(entries))
    except (EOFError, KeyboardInterrupt) as e:
        report.status = RunStatus.FAILED
        report.error = f"selection aborted ({type(e).__name__})"
        return report
    except ValueError as e:
        report.status = RunStatus.FAILED
        report.error = f"invalid selection: {e}"
        return report

    if not indices:
        report.status = RunStatus.NOTHING_SELECTED
        return report

    report.selected = [entries[i] for i in indices]

    if not assume_yes:
        try:
            confirmed = confirm(confirmation_message(len(report.selected), report.selected_bytes))
        except (EOFError, KeyboardInterrupt) as e:
            report.status = RunStatus.FAILED
            report.error = f"confirmation aborted ({type(e).__name__})"
            return report
        if not confirmed:
            report.status = RunStatus.CANCELLED
            return report

    if on_delete_start:
        on_delete_start(report.selected)

    log.info("Deleting %d directories (%d bytes)", len(report.selected), report.selected_bytes)
    report.outcomes = delete_directories(
        report.selected,
        max_concurrent=settings.max_concurrent_deletions,
        dry_run=dry_run,
        on_result=on_outcome,
    )
    report.status = RunStatus.COMPLETED
    return report
