"""Deletion of selected directories with bounded parallelism."""

import logging
import os
import shutil
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from dropmodules.models import DeletionOutcome, DirectoryEntry

log = logging.getLogger(__name__)

# Maximum simultaneous deletions
DEFAULT_MAX_CONCURRENT = 3

# Upper bound on threads waiting for a deletion permit
MAX_THREADS = 32


def is_path_safe(path: Path | str) -> bool:
    """
    Check if a path is safe to delete.

    Refuses the filesystem root and the home directory.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    path_str = os.path.abspath(os.fspath(path))

    if path_str == os.path.abspath(os.sep):
        return False

    home = os.path.abspath(str(Path.home()))
    if path_str == home:
        return False

    return True


def _remove_tree(path: str, attempts: int = 2) -> str | None:
    """Remove ``path`` and return an error message, or None once it is gone."""
    last_error: OSError | None = None
    for attempt in range(1, attempts + 1):
        try:
            shutil.rmtree(path)
            return None
        except FileNotFoundError as e:
            # rmtree also raises this when something inside the tree vanishes
            # mid-walk, leaving the rest behind
            if not os.path.lexists(path):
                log.debug("%s was already gone", path)
                return None
            log.debug("%s changed while deleting (attempt %d): %s", path, attempt, e)
            last_error = e
        except OSError as e:
            return f"failed to delete {path}: {e}"
    return f"failed to delete {path}: {last_error}"


def delete_directory(entry: DirectoryEntry, dry_run: bool = False) -> DeletionOutcome:
    """
    Delete one directory tree and time it.

    A directory that is already gone counts as deleted.

    Args:
        entry: Directory to delete
        dry_run: If True, don't actually delete

    Returns:
        DeletionOutcome with elapsed time, and the error if it failed
    """
    start = time.perf_counter()
    error = None

    if not is_path_safe(entry.path):
        error = f"refusing to delete protected path {entry.path}"
    elif not dry_run:
        error = _remove_tree(entry.path)

    elapsed = time.perf_counter() - start

    if error:
        log.debug("Deletion failed: %s", error)
    else:
        log.info("Deleted %s in %.3fs", entry.path, elapsed)

    return DeletionOutcome(
        entry=entry,
        success=error is None,
        error=error,
        elapsed_seconds=elapsed,
        dry_run=dry_run,
    )


def delete_directories(
    entries: list[DirectoryEntry],
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    dry_run: bool = False,
    on_result: Callable[[DeletionOutcome], None] | None = None,
) -> list[DeletionOutcome]:
    """
    Delete directories concurrently, at most ``max_concurrent`` at a time.

    Every entry is attempted; one failure never stops the others. The call
    blocks until all entries have been attempted.

    Args:
        entries: Directories to delete
        max_concurrent: Maximum number of deletions in progress at once
        dry_run: If True, don't actually delete
        on_result: Optional callback(outcome) fired as each deletion finishes

    Returns:
        One DeletionOutcome per entry, in the same order as ``entries``
    """
    if max_concurrent < 1:
        raise ValueError("max_concurrent must be at least 1")
    if not entries:
        return []

    permits = threading.BoundedSemaphore(max_concurrent)

    def _delete(entry: DirectoryEntry) -> DeletionOutcome:
        with permits:
            outcome = delete_directory(entry, dry_run=dry_run)
        if on_result:
            on_result(outcome)
        return outcome

    workers = min(len(entries), MAX_THREADS)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="delete") as executor:
        futures = [executor.submit(_delete, entry) for entry in entries]
        return [future.result() for future in futures]
