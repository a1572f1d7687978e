"""Discard orchestration: move pending recordings to trash."""

from __future__ import annotations

import logging
from typing import Iterable

from takeflow.incoming.events import FileRemoved
from takeflow.incoming.store import EventChannel
from takeflow.service.errors import TakeflowError
from takeflow.service.interface import FileService

from .models import DiscardOutcome, DiscardSummary

LOGGER = logging.getLogger(__name__)

TRASH_FAILED = "Failed to trash file"


class DiscardOrchestrator:
    """Trash recordings one at a time and drop each from the store once confirmed."""

    def __init__(self, service: FileService, channel: EventChannel) -> None:
        self._service = service
        self._channel = channel

    async def discard_one(self, path: str) -> DiscardOutcome:
        """Trash ``path``; failures are reported in the outcome, not raised."""
        try:
            response = await self._service.trash(path)
        except TakeflowError as exc:
            LOGGER.warning("Failed to trash %s: %s", path, exc)
            return DiscardOutcome(path=path, success=False, error=str(exc) or TRASH_FAILED)

        if not response.success:
            reason = response.error or TRASH_FAILED
            LOGGER.warning("Trash of %s refused: %s", path, reason)
            return DiscardOutcome(path=path, success=False, error=reason)

        self._channel.dispatch(FileRemoved(path=path, reason="trashed"))
        LOGGER.info("Trashed %s -> %s", path, response.trash_path)
        return DiscardOutcome(path=path, success=True, trash_path=response.trash_path)

    async def discard_many(self, paths: Iterable[str]) -> DiscardSummary:
        """Trash ``paths`` sequentially and return aggregate counts.

        Each path is attempted whatever happened to the previous one.
        """
        success_count = 0
        failed_count = 0
        for path in list(paths):
            try:
                outcome = await self.discard_one(path)
            except Exception:  # pragma: no cover - unexpected service failure
                LOGGER.exception("Unexpected error while trashing %s", path)
                failed_count += 1
                continue
            if outcome.success:
                success_count += 1
            else:
                failed_count += 1
        return DiscardSummary(success_count=success_count, failed_count=failed_count)


__all__ = ["TRASH_FAILED", "DiscardOrchestrator"]
