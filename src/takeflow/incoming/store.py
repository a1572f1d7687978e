"""Authoritative set of pending recordings and the channel that feeds it."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional

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
from .models import PendingFile

LOGGER = logging.getLogger(__name__)

Subscriber = Callable[[StoreMessage], None]


class PendingFileStore:
    """Pending recordings keyed by path.

    Every mutation is a single-key upsert or removal, so a push event and a local
    removal racing on the same path resolve as last writer wins. ``apply`` is the one
    reducer through which both watcher events and confirmed local removals flow.
    """

    def __init__(self) -> None:
        self._files: dict[str, PendingFile] = {}

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def get(self, path: str) -> Optional[PendingFile]:
        """Return the pending file stored under ``path``, if any."""
        return self._files.get(path)

    def upsert(self, file: PendingFile) -> None:
        """Add ``file`` or replace the entry that shares its path."""
        self._files[file.path] = file

    def remove(self, path: str) -> bool:
        """Remove ``path``; removing an unknown path is a no-op.

        Returns:
            bool: True when an entry was removed.
        """
        return self._files.pop(path, None) is not None

    def snapshot(self) -> list[PendingFile]:
        """Return the pending files in arrival order."""
        return list(self._files.values())

    def paths(self) -> list[str]:
        """Return the pending paths in arrival order."""
        return list(self._files)

    def apply(self, message: StoreMessage) -> None:
        """Reduce one event or local removal into the store."""
        if isinstance(message, FileNew):
            self.upsert(message.file)
            LOGGER.info("New pending file: %s", message.file.filename)
        elif isinstance(message, FileDeleted):
            if self.remove(message.path):
                LOGGER.info("Pending file deleted from disk: %s", message.path)
        elif isinstance(message, FileRenamed):
            self.remove(message.old_path)
            LOGGER.info("Pending file renamed: %s -> %s", message.old_path, message.new_path)
        elif isinstance(message, FileRemoved):
            self.remove(message.path)
            LOGGER.debug("Removed %s after it was %s", message.path, message.reason)
        elif isinstance(message, FileError):
            LOGGER.warning("Watcher error for %s: %s", message.path, message.error)


class EventChannel:
    """Queue of watcher events drained into a :class:`PendingFileStore`.

    Producers call :meth:`publish` from the event loop; :meth:`run` is the single
    consumer that applies each event and then notifies subscribers.
    """

    def __init__(self, store: PendingFileStore) -> None:
        self._store = store
        self._queue: asyncio.Queue[Optional[StoreMessage]] = asyncio.Queue()
        self._subscribers: list[Subscriber] = []

    @property
    def store(self) -> PendingFileStore:
        return self._store

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for applied messages; returns an unsubscribe hook."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, event: WatcherEvent) -> None:
        """Queue a typed watcher event."""
        self._queue.put_nowait(event)

    def publish_raw(self, name: str, payload: Mapping[str, Any]) -> bool:
        """Decode and queue a wire event; malformed events are logged and dropped.

        Returns:
            bool: True when the event was queued.
        """
        try:
            event = parse_event(name, payload)
        except EventFormatError as exc:
            LOGGER.warning("Dropping pushed event: %s", exc)
            return False
        self.publish(event)
        return True

    def close(self) -> None:
        """Ask :meth:`run` to stop after the events already queued."""
        self._queue.put_nowait(None)

    def pending(self) -> int:
        """Return the number of queued messages not yet applied."""
        return self._queue.qsize()

    async def run(self) -> None:
        """Consume queued events until :meth:`close` is called."""
        while True:
            message = await self._queue.get()
            try:
                if message is None:
                    return
                self.dispatch(message)
            finally:
                self._queue.task_done()

    def drain(self) -> int:
        """Apply every queued message without waiting; returns how many were applied."""
        applied = 0
        while True:
            try:
                message = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return applied
            self._queue.task_done()
            if message is None:
                # Keep the stop request for a running consumer.
                self._queue.put_nowait(None)
                return applied
            self.dispatch(message)
            applied += 1

    def dispatch(self, message: StoreMessage) -> None:
        """Apply ``message`` to the store and notify subscribers."""
        self._store.apply(message)
        for callback in list(self._subscribers):
            callback(message)


__all__ = ["PendingFileStore", "EventChannel", "Subscriber"]
