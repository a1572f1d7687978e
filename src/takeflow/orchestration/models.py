"""Outcome types returned by the orchestrators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class DiscardPrompt:
    """Pending "discard remaining files?" decision raised by a rename.

    Attributes:
        trigger_path: Path of the recording whose rename raised the prompt.
        remaining_count: Pending recordings left once that rename was applied.
    """

    trigger_path: str
    remaining_count: int


@dataclass(frozen=True, slots=True)
class RenameOutcome:
    """Result of a successful rename.

    Attributes:
        original_path: Path the recording had while pending.
        new_path: Path reported by the file service.
        filename: Basename of ``new_path``.
        preview: Filename built from the template just before the rename.
        discard_prompt: Set when other recordings are still pending.
    """

    original_path: str
    new_path: str
    filename: str
    preview: str
    discard_prompt: Optional[DiscardPrompt] = None


@dataclass(frozen=True, slots=True)
class DiscardOutcome:
    """Result of trashing one recording; ``error`` is set when it failed."""

    path: str
    success: bool
    trash_path: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DiscardSummary:
    """Aggregate counts for a batch discard."""

    success_count: int = 0
    failed_count: int = 0

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count


@dataclass(frozen=True, slots=True)
class UndoOutcome:
    """Result of a successful undo."""

    rename_id: str
    original_name: Optional[str] = None
    original_path: Optional[str] = None


__all__ = ["DiscardPrompt", "RenameOutcome", "DiscardOutcome", "DiscardSummary", "UndoOutcome"]
