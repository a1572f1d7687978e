"""Shared fixtures for the takeflow test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath
from typing import Callable

import pytest

from takeflow.incoming.models import PendingFile
from takeflow.service import InMemoryFileService

WATCH_DIR = "/watch"
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

FileFactory = Callable[..., PendingFile]


class FakeClock:
    """Manually advanced clock for ledger expiry tests."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def make_file() -> FileFactory:
    """Build pending recordings under the watch directory."""

    def _make(name: str, *, size: int = 0, minutes: float = 0) -> PendingFile:
        path = name if name.startswith("/") else f"{WATCH_DIR}/{name}"
        return PendingFile(
            path=path,
            filename=PurePosixPath(path).name,
            timestamp=T0 + timedelta(minutes=minutes),
            size=size,
        )

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock: FakeClock) -> InMemoryFileService:
    return InMemoryFileService(clock=clock)
