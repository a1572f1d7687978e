"""Consumer side of the undo ledger kept by the file service."""

from __future__ import annotations

import logging

from takeflow.incoming.models import UndoEntry
from takeflow.service.errors import OperationError
from takeflow.service.interface import FileService

from .models import UndoOutcome

LOGGER = logging.getLogger(__name__)

UNDO_FAILED = "Failed to undo rename"


class UndoLedger:
    """List and reverse recent renames.

    Expiry belongs to the service: every entry it lists is treated as undoable, and an
    undo may still fail because the entry expired or was already undone meanwhile.
    """

    def __init__(self, service: FileService) -> None:
        self._service = service

    async def entries(self) -> list[UndoEntry]:
        """Return the renames the ledger currently offers, newest first."""
        ledger = await self._service.list_renames()
        return list(ledger.renames)

    async def undo(self, rename_id: str) -> UndoOutcome:
        """Reverse the rename ``rename_id``.

        Raises:
            OperationError: With the service's reason (expired, unknown, conflict...).
            TransportError: If the service call fails.
        """
        response = await self._service.undo(rename_id)
        if not response.success:
            reason = response.error or UNDO_FAILED
            LOGGER.warning("Undo of %s refused: %s", rename_id, reason)
            raise OperationError(reason)
        LOGGER.info("Undid rename %s (%s)", rename_id, response.original_name)
        return UndoOutcome(
            rename_id=rename_id,
            original_name=response.original_name,
            original_path=response.original_path,
        )


__all__ = ["UNDO_FAILED", "UndoLedger"]
