"""Tests for the discard orchestrator and the in-memory trash."""

import asyncio

from takeflow.incoming import EventChannel, FileNew, PendingFileStore
from takeflow.orchestration import DiscardOrchestrator, DiscardSummary
from takeflow.service import InMemoryFileService, TransportError


def _orchestrator(service: InMemoryFileService, files) -> tuple[DiscardOrchestrator, EventChannel]:
    channel = EventChannel(PendingFileStore())
    for file in files:
        service.add_pending(file)
        channel.dispatch(FileNew(file=file))
    return DiscardOrchestrator(service, channel), channel


def test_discard_many_continues_after_failure(service, make_file) -> None:
    files = [make_file("a.mov"), make_file("b.mov"), make_file("c.mov")]
    orchestrator, channel = _orchestrator(service, files)
    service.inject_failure("/watch/b.mov", "Permission denied")

    summary = asyncio.run(orchestrator.discard_many(channel.store.paths()))

    assert summary == DiscardSummary(success_count=2, failed_count=1)
    assert summary.total == 3
    assert channel.store.paths() == ["/watch/b.mov"]
    assert [call for call, _ in service.calls] == ["trash", "trash", "trash"]


def test_discard_many_counts_transport_errors(service, make_file) -> None:
    files = [make_file("a.mov"), make_file("b.mov")]
    orchestrator, channel = _orchestrator(service, files)
    service.inject_failure("/watch/a.mov", TransportError("timed out"))

    summary = asyncio.run(orchestrator.discard_many(["/watch/a.mov", "/watch/b.mov"]))

    assert summary == DiscardSummary(success_count=1, failed_count=1)
    assert channel.store.paths() == ["/watch/a.mov"]


def test_discard_one_reports_reason(service, make_file) -> None:
    orchestrator, channel = _orchestrator(service, [make_file("a.mov")])
    service.inject_failure("/watch/a.mov", "Disk full")

    outcome = asyncio.run(orchestrator.discard_one("/watch/a.mov"))

    assert outcome.success is False
    assert outcome.error == "Disk full"
    assert "/watch/a.mov" in channel.store


def test_discard_one_uses_generic_message_without_reason(service, make_file) -> None:
    orchestrator, _ = _orchestrator(service, [make_file("a.mov")])
    service.inject_failure("/watch/a.mov", TransportError(""))

    outcome = asyncio.run(orchestrator.discard_one("/watch/a.mov"))

    assert outcome.error == "Failed to trash file"


def test_trash_adds_counter_suffix_on_collision(service, make_file) -> None:
    service.add_existing("/project/-trash/take.mov")
    service.add_existing("/project/-trash/take-1.mov")
    orchestrator, channel = _orchestrator(service, [make_file("take.mov")])

    outcome = asyncio.run(orchestrator.discard_one("/watch/take.mov"))

    assert outcome.success is True
    assert outcome.trash_path == "/project/-trash/take-2.mov"
    assert len(channel.store) == 0
    assert service.exists("/project/-trash/take-2.mov")


def test_trash_of_vanished_file_still_succeeds(service, make_file) -> None:
    orchestrator, channel = _orchestrator(service, [make_file("gone.mov")])
    service.delete("/watch/gone.mov")

    outcome = asyncio.run(orchestrator.discard_one("/watch/gone.mov"))

    assert outcome.success is True
    assert outcome.trash_path is None
    assert len(channel.store) == 0
