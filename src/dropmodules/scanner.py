"""Directory size calculation for dropmodules."""

import logging
import os
import stat
from pathlib import Path

log = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def get_directory_size(path: Path | str) -> int:
    """
    Calculate the total size of the files below a directory.

    Walks iteratively with os.scandir. Directories add nothing themselves.
    Symlinks are never followed; a symlink counts the size of the link itself,
    so targets outside the tree are not counted and loops are impossible.

    Any error aborts the calculation. A partial sum would under-report what
    deleting the directory frees, so the caller gets the error instead.

    Args:
        path: Directory to measure

    Returns:
        Total size in bytes

    Raises:
        OSError: If any part of the tree cannot be read
    """
    total_size = 0
    stack: list[str] = [os.fspath(path)]

    while stack:
        current = stack.pop()
        with os.scandir(current) as entries:
            for entry in entries:
                info = entry.stat(follow_symlinks=False)
                if stat.S_ISDIR(info.st_mode):
                    stack.append(entry.path)
                else:
                    total_size += info.st_size

    log.debug("Sized %s: %d bytes", path, total_size)
    return total_size
