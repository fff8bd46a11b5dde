"""Recursive discovery of target directories.

The walk runs in the calling thread and hands every match to a thread pool
for sizing, so a slow size calculation never holds up the walk. Results come
back through futures owned by the caller; no shared list is appended to from
worker threads.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Generator, Iterator

from dropmodules.models import DirectoryEntry, DiscoveryResult, SkippedPath
from dropmodules.scanner import get_directory_size

log = logging.getLogger(__name__)

DEFAULT_TARGET = "node_modules"
DEFAULT_SIZE_WORKERS = 8


class ScanError(Exception):
    """The root of a scan could not be walked at all."""

    def __init__(self, root: str, reason: str):
        super().__init__(f"cannot scan {root}: {reason}")
        self.root = root
        self.reason = reason


def find_matching_directories(
    root: Path | str,
    pattern: str,
    on_error: Callable[[str, OSError], None] | None = None,
) -> Generator[str, None, None]:
    """
    Find directories named ``pattern`` below ``root``.

    A match is yielded and never descended into, so a ``node_modules`` inside
    another ``node_modules`` is not reported on its own. Symlinks are not
    followed.

    Args:
        root: Directory to start from
        pattern: Exact directory name to match (e.g. 'node_modules')
        on_error: Optional callback(path, error) for branches that could not be listed

    Yields:
        Paths to matching directories

    Raises:
        ScanError: If the root itself cannot be listed
    """
    root_str = os.fspath(root)

    if os.path.basename(root_str.rstrip(os.sep)) == pattern and os.path.isdir(root_str):
        yield root_str
        return

    try:
        root_iter = os.scandir(root_str)
    except OSError as e:
        raise ScanError(root_str, e.strerror or str(e)) from e

    stack: list[tuple[str, Iterator[os.DirEntry]]] = [(root_str, root_iter)]
    try:
        while stack:
            current, entries = stack[-1]
            try:
                entry = next(entries)
            except StopIteration:
                entries.close()
                stack.pop()
                continue
            except OSError as e:
                # Listing failed partway through; drop the rest of this branch
                entries.close()
                stack.pop()
                if on_error:
                    on_error(current, e)
                continue

            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError as e:
                if on_error:
                    on_error(entry.path, e)
                continue

            if entry.name == pattern:
                yield entry.path
                continue

            try:
                stack.append((entry.path, os.scandir(entry.path)))
            except OSError as e:
                if on_error:
                    on_error(entry.path, e)
    finally:
        for _, entries in stack:
            entries.close()


def find_directories(
    root: Path | str,
    target_name: str = DEFAULT_TARGET,
    max_workers: int = DEFAULT_SIZE_WORKERS,
    on_found: Callable[[DirectoryEntry], None] | None = None,
) -> DiscoveryResult:
    """
    Find every target directory below ``root`` and measure it.

    Sizing runs concurrently with the walk on at most ``max_workers`` threads.
    The call returns only after the walk and every size calculation are done.
    Branches that cannot be listed, and matches that cannot be measured, are
    left out of ``entries`` and recorded in ``skipped``.

    Args:
        root: Directory to search
        target_name: Directory name to look for
        max_workers: Upper bound on concurrent size calculations
        on_found: Optional callback(entry), called in this thread as each size completes

    Returns:
        DiscoveryResult with entries in discovery order

    Raises:
        ScanError: If the root cannot be walked
        ValueError: If max_workers is less than 1
    """
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    root_str = os.fspath(root)
    skipped: list[SkippedPath] = []

    def record_walk_error(path: str, error: OSError) -> None:
        log.debug("Skipping %s: %s", path, error)
        skipped.append(SkippedPath(path=path, reason=str(error), stage="walk"))

    order: list[str] = []
    sizes: dict[str, int] = {}

    def collect(path: str, future: Future[int]) -> None:
        try:
            size = future.result()
        except OSError as e:
            log.debug("Could not size %s: %s", path, e)
            skipped.append(SkippedPath(path=path, reason=str(e), stage="size"))
            return
        sizes[path] = size
        if on_found:
            on_found(DirectoryEntry(path=path, size_bytes=size))

    pending: dict[Future[int], str] = {}
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="size") as executor:
        for found in find_matching_directories(root_str, target_name, on_error=record_walk_error):
            log.debug("Found %s", found)
            order.append(found)
            pending[executor.submit(get_directory_size, found)] = found

            # Report whatever has finished so far without waiting on the rest
            for future in [f for f in pending if f.done()]:
                collect(pending.pop(future), future)

        for future in as_completed(pending):
            collect(pending[future], future)

    entries = [DirectoryEntry(path=path, size_bytes=sizes[path]) for path in order if path in sizes]

    log.info(
        "Found %d %s directories in %s (%d skipped)",
        len(entries),
        target_name,
        root_str,
        len(skipped),
    )
    return DiscoveryResult(
        root=root_str,
        target_name=target_name,
        entries=entries,
        skipped=skipped,
    )
