"""Tests for decoding pushed watcher events."""

from datetime import timezone

import pytest

from takeflow.incoming import (
    EventFormatError,
    FileDeleted,
    FileError,
    FileNew,
    FileRenamed,
    parse_event,
)


def test_parse_file_new_accepts_camel_case_payload() -> None:
    event = parse_event(
        "file:new",
        {
            "path": "/watch/take.mov",
            "filename": "take.mov",
            "timestamp": "2026-03-01T09:00:00",
            "size": 7_000_000,
            "duration": 12.5,
        },
    )

    assert isinstance(event, FileNew)
    assert event.file.size == 7_000_000
    assert event.file.duration == pytest.approx(12.5)
    assert event.file.timestamp.tzinfo == timezone.utc


def test_parse_path_events() -> None:
    deleted = parse_event("file:deleted", {"path": "/watch/a.mov"})

    assert deleted == FileDeleted(path="/watch/a.mov")
    assert parse_event(
        "file:renamed", {"oldPath": "/watch/a.mov", "newPath": "/watch/b.mov"}
    ) == FileRenamed(old_path="/watch/a.mov", new_path="/watch/b.mov")
    assert parse_event("file:error", {"path": "/watch/a.mov", "error": "boom"}) == FileError(
        path="/watch/a.mov", error="boom"
    )


@pytest.mark.parametrize(
    ("name", "payload"),
    [
        ("file:new", {"path": "/watch/a.mov"}),
        ("file:new", {"path": "/watch/a.mov", "filename": "a.mov", "timestamp": "x"}),
        ("file:renamed", {"old_path": "/watch/a.mov", "new_path": "/watch/b.mov"}),
        ("file:error", {"path": "/watch/a.mov"}),
        ("file:unknown", {}),
    ],
)
def test_parse_event_rejects_malformed_payloads(name: str, payload: dict) -> None:
    with pytest.raises(EventFormatError):
        parse_event(name, payload)
