"""Request/response contract of the external file service."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from pydantic import Field

from takeflow.incoming.models import PendingFile, UndoEntry, WireModel
from takeflow.naming.models import SuggestedNaming


class RenameRequest(WireModel):
    """Rename ``original_path`` into the project using the given naming components."""

    original_path: str
    chapter: str
    sequence: Optional[str] = None
    name: str
    tags: List[str] = Field(default_factory=list)


class RenameResponse(WireModel):
    """Outcome of a rename; ``new_path`` is empty on failure."""

    success: bool
    new_path: str = ""
    old_path: Optional[str] = None
    error: Optional[str] = None


class TrashResponse(WireModel):
    """Outcome of moving one recording to trash."""

    success: bool
    trash_path: Optional[str] = None
    error: Optional[str] = None


class UndoResponse(WireModel):
    """Outcome of reversing one rename from the ledger."""

    success: bool
    original_path: Optional[str] = None
    original_name: Optional[str] = None
    error: Optional[str] = None


class RenameLedger(WireModel):
    """Ledger listing; every entry returned is currently undoable."""

    renames: List[UndoEntry] = Field(default_factory=list)


@runtime_checkable
class FileService(Protocol):
    """Operations the engine invokes on the file-service collaborator.

    Implementations return ``success: false`` responses for failures the service
    understands and raise :class:`~takeflow.service.errors.TransportError` when the
    call itself fails.
    """

    async def rename(self, request: RenameRequest) -> RenameResponse: ...

    async def trash(self, path: str) -> TrashResponse: ...

    async def undo(self, rename_id: str) -> UndoResponse: ...

    async def list_renames(self) -> RenameLedger: ...

    async def list_pending(self) -> List[PendingFile]: ...

    async def suggested_naming(self) -> SuggestedNaming: ...

    async def aclose(self) -> None: ...


__all__ = [
    "RenameRequest",
    "RenameResponse",
    "TrashResponse",
    "UndoResponse",
    "RenameLedger",
    "FileService",
]
