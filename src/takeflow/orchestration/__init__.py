"""Rename, discard and undo orchestration around the pending store."""

from .controller import IncomingController, NotPendingError
from .discard import DiscardOrchestrator
from .models import DiscardOutcome, DiscardPrompt, DiscardSummary, RenameOutcome, UndoOutcome
from .rename import RenameOrchestrator, validate_template
from .undo import UndoLedger

__all__ = [
    "IncomingController",
    "NotPendingError",
    "DiscardOrchestrator",
    "DiscardOutcome",
    "DiscardPrompt",
    "DiscardSummary",
    "RenameOutcome",
    "UndoOutcome",
    "RenameOrchestrator",
    "validate_template",
    "UndoLedger",
]
