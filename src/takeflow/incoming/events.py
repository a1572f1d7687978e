"""Push events reported by the watcher collaborator and local removal messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Union

from pydantic import ValidationError

from .models import PendingFile


class EventFormatError(ValueError):
    """Raised when a pushed event cannot be decoded."""


@dataclass(frozen=True, slots=True)
class FileNew:
    """``file:new`` - a recording appeared in the watch directory."""

    file: PendingFile
    name: Literal["file:new"] = "file:new"


@dataclass(frozen=True, slots=True)
class FileDeleted:
    """``file:deleted`` - a pending recording disappeared from disk."""

    path: str
    name: Literal["file:deleted"] = "file:deleted"


@dataclass(frozen=True, slots=True)
class FileRenamed:
    """``file:renamed`` - a pending recording was renamed out of the watch directory."""

    old_path: str
    new_path: str
    name: Literal["file:renamed"] = "file:renamed"


@dataclass(frozen=True, slots=True)
class FileError:
    """``file:error`` - the watcher failed to process a recording."""

    path: str
    error: str
    name: Literal["file:error"] = "file:error"


@dataclass(frozen=True, slots=True)
class FileRemoved:
    """Local removal issued after a confirmed rename or trash."""

    path: str
    reason: Literal["renamed", "trashed"]
    name: Literal["local:removed"] = "local:removed"


WatcherEvent = Union[FileNew, FileDeleted, FileRenamed, FileError]
StoreMessage = Union[FileNew, FileDeleted, FileRenamed, FileError, FileRemoved]


def parse_event(name: str, payload: Mapping[str, Any]) -> WatcherEvent:
    """Decode a pushed event from its wire name and JSON payload.

    Args:
        name: Event name such as ``file:new``.
        payload: Decoded JSON body of the event.

    Returns:
        WatcherEvent: Typed event.

    Raises:
        EventFormatError: If the name is unknown or the payload is malformed.
    """
    try:
        if name == "file:new":
            return FileNew(file=PendingFile.model_validate(payload))
        if name == "file:deleted":
            return FileDeleted(path=str(payload["path"]))
        if name == "file:renamed":
            return FileRenamed(old_path=str(payload["oldPath"]), new_path=str(payload["newPath"]))
        if name == "file:error":
            return FileError(path=str(payload["path"]), error=str(payload["error"]))
    except (KeyError, TypeError, ValidationError) as exc:
        raise EventFormatError(f"Malformed {name} payload: {exc}") from exc
    raise EventFormatError(f"Unknown event: {name}")


__all__ = [
    "EventFormatError",
    "FileNew",
    "FileDeleted",
    "FileRenamed",
    "FileError",
    "FileRemoved",
    "WatcherEvent",
    "StoreMessage",
    "parse_event",
]
