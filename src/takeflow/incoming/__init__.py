"""Pending recordings, the shared naming template and push-event reconciliation."""

from .events import (
    EventFormatError,
    FileDeleted,
    FileError,
    FileNew,
    FileRemoved,
    FileRenamed,
    StoreMessage,
    WatcherEvent,
    parse_event,
)
from .models import NamingTemplate, PendingFile, UndoEntry
from .store import EventChannel, PendingFileStore

__all__ = [
    "EventFormatError",
    "FileDeleted",
    "FileError",
    "FileNew",
    "FileRemoved",
    "FileRenamed",
    "StoreMessage",
    "WatcherEvent",
    "parse_event",
    "NamingTemplate",
    "PendingFile",
    "UndoEntry",
    "EventChannel",
    "PendingFileStore",
]
