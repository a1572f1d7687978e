"""In-memory file service.

Mirrors the behavior of the real file service (rename into the project recordings
folder, trash with collision suffixes, a short-lived undo ledger) without touching
disk, for tests and offline use.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Union

from takeflow.config.models import LedgerSettings
from takeflow.incoming.events import FileNew, WatcherEvent
from takeflow.incoming.models import PendingFile, UndoEntry
from takeflow.naming.builder import DEFAULT_EXTENSION, build_filename
from takeflow.naming.models import SuggestedNaming
from takeflow.naming.parser import calculate_suggested_naming
from takeflow.naming.rules import validate_chapter, validate_sequence

from .errors import TakeflowError
from .interface import RenameLedger, RenameRequest, RenameResponse, TrashResponse, UndoResponse

Failure = Union[str, TakeflowError]

MISSING_FIELDS = "Missing required fields: originalPath, chapter, and name are required"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class _LedgerRecord:
    id: str
    original_path: str
    new_path: str
    created_at: datetime

    def to_entry(self) -> UndoEntry:
        return UndoEntry(
            id=self.id,
            original_name=PurePosixPath(self.original_path).name,
            new_name=PurePosixPath(self.new_path).name,
            created_at=self.created_at,
        )


class InMemoryFileService:
    """File service backed by in-memory path sets."""

    def __init__(
        self,
        recordings_dir: str = "/project/recordings",
        trash_dir: str = "/project/-trash",
        *,
        ledger: Optional[LedgerSettings] = None,
        extension: str = DEFAULT_EXTENSION,
        clock: Callable[[], datetime] = _utcnow,
        emit: Optional[Callable[[WatcherEvent], None]] = None,
    ) -> None:
        """Initialize an empty service.

        Args:
            recordings_dir: Folder renamed recordings are moved into.
            trash_dir: Folder discarded recordings are moved into.
            ledger: Expiry and size limits for the undo ledger.
            extension: Extension appended to renamed recordings.
            clock: Source of the current time, used for ledger expiry.
            emit: Receives the watcher events this service would cause.
        """
        settings = ledger or LedgerSettings()
        self._recordings = PurePosixPath(recordings_dir)
        self._trash = PurePosixPath(trash_dir)
        self._expiry = timedelta(minutes=settings.expiry_minutes)
        self._max_entries = settings.max_entries
        self._extension = extension
        self._clock = clock
        self._emit = emit
        self._existing: set[str] = set()
        self._pending: dict[str, PendingFile] = {}
        self._ledger: list[_LedgerRecord] = []
        self._failures: dict[str, Failure] = {}
        self.calls: list[tuple[str, str]] = []

    # ------------------------------------------------------------------ #
    # Test helpers                                                       #
    # ------------------------------------------------------------------ #

    def add_pending(self, file: PendingFile) -> None:
        """Register ``file`` as a fresh recording in the watch directory."""
        self._existing.add(file.path)
        self._pending[file.path] = file
        if self._emit is not None:
            self._emit(FileNew(file=file))

    def add_existing(self, path: str) -> None:
        """Mark ``path`` as occupied without making it pending."""
        self._existing.add(path)

    def delete(self, path: str) -> None:
        """Remove ``path`` as if it vanished from disk."""
        self._existing.discard(path)
        self._pending.pop(path, None)

    def exists(self, path: str) -> bool:
        return path in self._existing

    def inject_failure(self, path: str, failure: Failure) -> None:
        """Make the next rename or trash of ``path`` fail.

        A string becomes a ``success: false`` reason; an exception is raised.
        """
        self._failures[path] = failure

    # ------------------------------------------------------------------ #
    # FileService                                                        #
    # ------------------------------------------------------------------ #

    async def rename(self, request: RenameRequest) -> RenameResponse:
        self.calls.append(("rename", request.original_path))
        failure = self._take_failure(request.original_path)
        if failure is not None:
            return RenameResponse(success=False, old_path=request.original_path, error=failure)

        error = (
            validate_chapter(request.chapter)
            or validate_sequence(request.sequence or "")
            or (None if request.name else MISSING_FIELDS)
        )
        if error:
            return RenameResponse(success=False, old_path=request.original_path, error=error)
        if request.original_path not in self._existing:
            return RenameResponse(
                success=False, old_path=request.original_path, error="Source file not found"
            )

        filename = build_filename(
            request.chapter,
            request.sequence,
            request.name,
            request.tags,
            extension=self._extension,
        )
        new_path = str(self._recordings / filename)
        if new_path in self._existing:
            return RenameResponse(
                success=False,
                old_path=request.original_path,
                new_path=new_path,
                error=f"Target file already exists: {filename}",
            )

        self._move(request.original_path, new_path)
        self._record_rename(request.original_path, new_path)
        return RenameResponse(success=True, old_path=request.original_path, new_path=new_path)

    async def trash(self, path: str) -> TrashResponse:
        self.calls.append(("trash", path))
        failure = self._take_failure(path)
        if failure is not None:
            return TrashResponse(success=False, error=failure)

        if path not in self._existing:
            self._pending.pop(path, None)
            return TrashResponse(success=True, trash_path=None)

        source = PurePosixPath(path)
        candidate = self._trash / source.name
        counter = 1
        while str(candidate) in self._existing:
            candidate = self._trash / f"{source.stem}-{counter}{source.suffix}"
            counter += 1
        self._move(path, str(candidate))
        return TrashResponse(success=True, trash_path=str(candidate))

    async def undo(self, rename_id: str) -> UndoResponse:
        self.calls.append(("undo", rename_id))
        self._expire()
        record = next((item for item in self._ledger if item.id == rename_id), None)
        if record is None:
            return UndoResponse(success=False, error="Rename not found or expired")
        if record.new_path not in self._existing:
            self._ledger.remove(record)
            return UndoResponse(success=False, error="File has been moved or deleted since rename")
        if record.original_path in self._existing:
            return UndoResponse(
                success=False, error="A file already exists at the original location"
            )

        self._existing.discard(record.new_path)
        self._ledger.remove(record)
        original = PurePosixPath(record.original_path)
        restored = PendingFile(
            path=record.original_path,
            filename=original.name,
            timestamp=self._clock(),
            size=0,
        )
        self.add_pending(restored)
        return UndoResponse(
            success=True, original_path=record.original_path, original_name=original.name
        )

    async def aclose(self) -> None:
        """Nothing to release; present for parity with the HTTP client."""

    async def list_renames(self) -> RenameLedger:
        self._expire()
        return RenameLedger(renames=[record.to_entry() for record in reversed(self._ledger)])

    async def list_pending(self) -> List[PendingFile]:
        return list(self._pending.values())

    async def suggested_naming(self) -> SuggestedNaming:
        names = sorted(
            PurePosixPath(path).name
            for path in self._existing
            if PurePosixPath(path).parent == self._recordings and path.endswith(self._extension)
        )
        return calculate_suggested_naming(names)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #

    def _take_failure(self, path: str) -> Optional[str]:
        failure = self._failures.pop(path, None)
        if isinstance(failure, TakeflowError):
            raise failure
        return failure

    def _move(self, source: str, destination: str) -> None:
        self._existing.discard(source)
        self._existing.add(destination)
        self._pending.pop(source, None)

    def _record_rename(self, original_path: str, new_path: str) -> None:
        self._expire()
        now = self._clock()
        record_id = f"rename-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:9]}"
        self._ledger.append(
            _LedgerRecord(
                id=record_id, original_path=original_path, new_path=new_path, created_at=now
            )
        )
        del self._ledger[: max(0, len(self._ledger) - self._max_entries)]

    def _expire(self) -> None:
        cutoff = self._clock() - self._expiry
        self._ledger = [record for record in self._ledger if record.created_at >= cutoff]


__all__ = ["InMemoryFileService"]
