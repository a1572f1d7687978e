"""File-service contract, error taxonomy and implementations."""

from .errors import OperationError, TakeflowError, TemplateValidationError, TransportError
from .http import HttpFileService
from .interface import (
    FileService,
    RenameLedger,
    RenameRequest,
    RenameResponse,
    TrashResponse,
    UndoResponse,
)
from .memory import InMemoryFileService

__all__ = [
    "OperationError",
    "TakeflowError",
    "TemplateValidationError",
    "TransportError",
    "HttpFileService",
    "FileService",
    "RenameLedger",
    "RenameRequest",
    "RenameResponse",
    "TrashResponse",
    "UndoResponse",
    "InMemoryFileService",
]
