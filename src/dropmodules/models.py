"""Data models for dropmodules."""

import os
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DirectoryEntry(BaseModel):
    """A discovered target directory and its size at discovery time."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path of the directory")
    size_bytes: int = Field(..., ge=0, description="Total size of files below the directory")

    @property
    def name(self) -> str:
        """Base name of the directory."""
        return os.path.basename(self.path.rstrip(os.sep)) or self.path


class SkippedPath(BaseModel):
    """A branch the walk could not list, or a match that could not be sized."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path that was skipped")
    reason: str = Field(..., description="Why it was skipped")
    stage: Literal["walk", "size"] = Field(..., description="Stage that failed")


class DiscoveryResult(BaseModel):
    """Everything found below a root, plus what had to be left out."""

    root: str = Field(..., description="Root that was walked")
    target_name: str = Field(..., description="Directory name that was matched")
    entries: list[DirectoryEntry] = Field(default_factory=list)
    skipped: list[SkippedPath] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def total_bytes(self) -> int:
        """Combined size of all discovered entries."""
        return sum(e.size_bytes for e in self.entries)


class DeletionOutcome(BaseModel):
    """Result of attempting to delete one directory."""

    entry: DirectoryEntry
    success: bool = Field(..., description="Whether the directory is gone")
    error: Optional[str] = Field(None, description="Error message if deletion failed")
    elapsed_seconds: float = Field(0.0, ge=0, description="Time spent deleting")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class RunStatus(str, Enum):
    """How a cleanup run ended."""

    COMPLETED = "completed"
    NOTHING_FOUND = "nothing_found"
    NOTHING_SELECTED = "nothing_selected"
    CANCELLED = "cancelled"
    FAILED = "failed"


class RunReport(BaseModel):
    """Summary of a full discover/select/confirm/delete run."""

    status: RunStatus
    root: str
    discovered: list[DirectoryEntry] = Field(default_factory=list)
    skipped: list[SkippedPath] = Field(default_factory=list)
    selected: list[DirectoryEntry] = Field(default_factory=list)
    outcomes: list[DeletionOutcome] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Error message if the run failed")
    dry_run: bool = Field(False, description="Whether deletions were simulated")

    @property
    def selected_bytes(self) -> int:
        """Total size of the selected entries, as shown at confirmation."""
        return sum(e.size_bytes for e in self.selected)

    @property
    def bytes_freed(self) -> int:
        """Bytes freed by successful deletions."""
        return sum(o.entry.size_bytes for o in self.outcomes if o.success)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.success)


def validate_selection(indices: list[int], count: int) -> list[int]:
    """
    Check a selection against the number of available entries.

    Args:
        indices: Zero-based indices returned by the selection prompt
        count: Number of entries that were offered

    Returns:
        The indices, unchanged

    Raises:
        ValueError: If an index is duplicated or out of range
    """
    seen: set[int] = set()
    for idx in indices:
        if not 0 <= idx < count:
            raise ValueError(f"selection index {idx} out of range (0-{count - 1})")
        if idx in seen:
            raise ValueError(f"selection index {idx} given twice")
        seen.add(idx)
    return indices
