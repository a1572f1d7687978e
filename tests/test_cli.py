"""CLI tests driven against the in-memory file service."""

import json
import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from takeflow.cli import cli
from takeflow.config import ConfigManager
from takeflow.service import InMemoryFileService

MB = 1_000_000


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    env["TAKEFLOW__LOGGING__LEVEL"] = "CRITICAL"
    return env


@pytest.fixture
def wired(service: InMemoryFileService, monkeypatch: pytest.MonkeyPatch) -> InMemoryFileService:
    monkeypatch.setattr("takeflow.cli._build_service", lambda config: service)
    return service


def _invoke(tmp_path: Path, args: list[str]):
    return CliRunner().invoke(cli, args, env=_env_with_home(tmp_path))


def test_cli_help_displays_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("preview", "pending", "rename", "discard", "undo", "config"):
        assert command in result.output


def test_preview_builds_filename(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(
        tmp_path,
        ["preview", "--name", "Intro Segment", "--tag", "cta", "--custom-tag", "vo"],
    )

    assert result.exit_code == 0
    assert result.output.strip() == "01-1-intro-segment-cta-VO.mov"


def test_preview_without_sequence_as_json(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(
        tmp_path,
        ["preview", "--chapter", "02", "--sequence", "", "--name", "outro", "--json"],
    )

    assert result.exit_code == 0
    assert json.loads(result.output) == {"filename": "02-outro.mov"}


def test_preview_matches_rename_result(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_existing("/project/recordings/02-4-demo.mov")
    wired.add_pending(make_file("a.mov"))

    preview = _invoke(tmp_path, ["preview", "--name", "take", "--json"])
    renamed = _invoke(tmp_path, ["rename", "/watch/a.mov", "--name", "take", "--json"])

    assert preview.exit_code == 0
    assert renamed.exit_code == 0
    assert json.loads(preview.output)["filename"] == "02-5-take.mov"
    assert json.loads(renamed.output)["filename"] == "02-5-take.mov"


def test_unknown_tag_is_rejected(tmp_path: Path, wired: InMemoryFileService, make_file) -> None:
    wired.add_pending(make_file("a.mov"))

    preview = _invoke(tmp_path, ["preview", "--name", "x", "--tag", "bogus", "--json"])
    renamed = _invoke(tmp_path, ["rename", "/watch/a.mov", "--tag", "bogus", "--json"])

    for result in (preview, renamed):
        assert result.exit_code == 1
        error = json.loads(result.output)["error"]
        assert error["code"] == "validation_error"
        assert error["message"] == "Unknown tag: bogus (available: cta, endcards)"
    assert wired.exists("/watch/a.mov")


def test_pending_reports_ranks(tmp_path: Path, wired: InMemoryFileService, make_file) -> None:
    wired.add_pending(make_file("A.mov", size=9 * MB, minutes=0))
    wired.add_pending(make_file("B.mov", size=500_000, minutes=1))
    wired.add_pending(make_file("C.mov", size=12 * MB, minutes=2))

    result = _invoke(tmp_path, ["pending", "--json"])

    assert result.exit_code == 0
    rows = json.loads(result.output)["files"]
    assert {row["filename"]: row["rank"] for row in rows} == {
        "A.mov": "good",
        "B.mov": None,
        "C.mov": "best",
    }


def test_pending_table_when_empty(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(tmp_path, ["pending"])

    assert result.exit_code == 0
    assert "No pending recordings." in result.output


def test_rename_reports_new_name_and_remaining(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))
    wired.add_pending(make_file("b.mov"))

    result = _invoke(
        tmp_path, ["rename", "/watch/a.mov", "--name", "Welcome", "--tag", "cta", "--json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["filename"] == "01-1-welcome-cta.mov"
    assert payload["new_path"] == "/project/recordings/01-1-welcome-cta.mov"
    assert payload["next_sequence"] == "2"
    assert payload["remaining"] == 1
    assert payload["discarded"] is None
    assert wired.exists("/watch/b.mov")


def test_rename_continues_existing_numbering(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_existing("/project/recordings/03-2-demo.mov")
    wired.add_pending(make_file("a.mov"))

    result = _invoke(tmp_path, ["rename", "/watch/a.mov"])

    assert result.exit_code == 0
    assert "Renamed to: 03-3-demo.mov" in result.output


def test_rename_discard_rest_trashes_remaining(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))
    wired.add_pending(make_file("b.mov"))
    wired.add_pending(make_file("c.mov"))

    result = _invoke(tmp_path, ["rename", "/watch/b.mov", "--discard-rest", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["discarded"] == {"success_count": 2, "failed_count": 0}
    assert wired.exists("/project/-trash/a.mov")
    assert wired.exists("/project/-trash/c.mov")


def test_rename_validation_error_as_json(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))

    result = _invoke(tmp_path, ["rename", "/watch/a.mov", "--chapter", "1", "--json"])

    assert result.exit_code == 1
    error = json.loads(result.output)["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Chapter must be a 2-digit number (01-99)"
    assert wired.calls == []


def test_rename_collision_is_reported(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))
    wired.add_existing("/project/recordings/01-4-intro.mov")

    result = _invoke(
        tmp_path, ["rename", "/watch/a.mov", "--sequence", "4", "--name", "intro", "--json"]
    )

    assert result.exit_code == 1
    error = json.loads(result.output)["error"]
    assert error == {
        "code": "operation_error",
        "message": "Target file already exists: 01-4-intro.mov",
    }


def test_rename_unknown_path_fails(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(tmp_path, ["rename", "/watch/missing.mov"])

    assert result.exit_code == 1
    assert "File is not pending: /watch/missing.mov" in result.output


def test_discard_reports_counts(tmp_path: Path, wired: InMemoryFileService, make_file) -> None:
    for name in ("a.mov", "b.mov", "c.mov"):
        wired.add_pending(make_file(name))
    wired.inject_failure("/watch/b.mov", "Permission denied")

    result = _invoke(tmp_path, ["discard", "--all", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"success_count": 2, "failed_count": 1}


def test_discard_text_mode_fails_on_partial_failure(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))
    wired.inject_failure("/watch/a.mov", "Permission denied")

    result = _invoke(tmp_path, ["discard", "/watch/a.mov"])

    assert result.exit_code == 1
    assert "Moved 0 file(s) to trash, 1 failed." in result.output


def test_discard_requires_paths_or_all(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(tmp_path, ["discard"])

    assert result.exit_code == 2


def test_undo_lists_and_reverses_renames(
    tmp_path: Path, wired: InMemoryFileService, make_file
) -> None:
    wired.add_pending(make_file("a.mov"))
    assert _invoke(tmp_path, ["rename", "/watch/a.mov"]).exit_code == 0

    listing = _invoke(tmp_path, ["undo", "--json"])
    entries = json.loads(listing.output)["renames"]
    assert [(entry["originalName"], entry["newName"]) for entry in entries] == [
        ("a.mov", "01-1-intro.mov")
    ]

    result = _invoke(tmp_path, ["undo", entries[0]["id"]])

    assert result.exit_code == 0
    assert "Undone: a.mov" in result.output
    assert wired.exists("/watch/a.mov")


def test_undo_unknown_id_reports_reason(tmp_path: Path, wired: InMemoryFileService) -> None:
    result = _invoke(tmp_path, ["undo", "rename-0-missing", "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["message"] == "Rename not found or expired"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["config", "view"])

    assert result.exit_code == 0
    assert "substantial_bytes" in result.output
    assert (tmp_path / ".takeflow" / "config.yaml").exists()


def test_config_set_updates_value(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["config", "set", "ranking.substantial_bytes", "--value", "1000"])

    assert result.exit_code == 0
    assert "5242880 -> 1000" in result.output

    manager = ConfigManager(config_path=tmp_path / ".takeflow" / "config.yaml")
    config = manager.load(include_env=False)
    assert config.ranking.substantial_bytes == 1000


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    result = _invoke(tmp_path, ["config", "set", "ledger.max_entries", "--value", "lots"])

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output

    manager = ConfigManager(config_path=tmp_path / ".takeflow" / "config.yaml")
    assert manager.load(include_env=False).ledger.max_entries == 5


def test_config_view_json_honours_env(tmp_path: Path) -> None:
    env = _env_with_home(tmp_path)
    env["TAKEFLOW__SERVICE__BASE_URL"] = "http://studio.local:5101"

    result = CliRunner().invoke(cli, ["config", "view", "--json"], env=env)

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["service"]["base_url"] == "http://studio.local:5101"
    assert data["ledger"] == {"expiry_minutes": 10, "max_entries": 5}
