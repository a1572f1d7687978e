"""Data models for pending recordings, the naming template and undo entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from takeflow.naming.builder import (
    DEFAULT_EXTENSION,
    PLACEHOLDER,
    build_filename,
    sanitize_custom_tag,
)
from takeflow.naming.models import SuggestedNaming
from takeflow.naming.rules import format_chapter, parse_number


class WireModel(BaseModel):
    """Base for models exchanged with the file service using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PendingFile(WireModel):
    """One unprocessed recording reported by the watcher.

    Attributes:
        path: Filesystem path; the identity of the file.
        filename: Basename of the recording.
        timestamp: Capture time.
        size: Size in bytes.
        duration: Duration in seconds, when known.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    filename: str
    timestamp: datetime
    size: int = Field(default=0, ge=0)
    duration: Optional[float] = None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive and aware timestamps must stay comparable for ranking.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class NamingTemplate(WireModel):
    """Shared draft used to build the next recording filename.

    One template serves every pending file. The controller that owns it hands it
    explicitly to each operation that reads or advances it.
    """

    model_config = ConfigDict(validate_assignment=True)

    chapter: str = "01"
    sequence: str = "1"
    name: str = "intro"
    tags: List[str] = Field(default_factory=list)
    custom_tag: str = ""

    @field_validator("custom_tag")
    @classmethod
    def _normalize_custom_tag(cls, value: str) -> str:
        return sanitize_custom_tag(value)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(tag for tag in value if tag))

    @classmethod
    def from_suggestion(cls, suggestion: SuggestedNaming) -> "NamingTemplate":
        """Seed a fresh template from a suggested naming."""
        return cls(chapter=suggestion.chapter, sequence=suggestion.sequence, name=suggestion.name)

    def all_tags(self) -> List[str]:
        """Return the tags sent with a rename: ``tags`` plus the custom tag if set."""
        if self.custom_tag:
            return [*self.tags, self.custom_tag]
        return list(self.tags)

    def preview(self, *, extension: str = DEFAULT_EXTENSION, placeholder: str = PLACEHOLDER) -> str:
        """Return the filename the next rename will request."""
        return build_filename(
            self.chapter,
            self.sequence,
            self.name,
            self.tags,
            self.custom_tag,
            extension=extension,
            placeholder=placeholder,
        )

    def toggle_tag(self, tag: str) -> None:
        """Remove ``tag`` when present, otherwise append it."""
        if tag in self.tags:
            self.tags = [existing for existing in self.tags if existing != tag]
        else:
            self.tags = [*self.tags, tag]

    def advance_sequence(self) -> None:
        """Increment the sequence by one; an unparsable sequence counts as zero."""
        self.sequence = str(parse_number(self.sequence, default=0) + 1)

    def new_chapter(self) -> None:
        """Move to the next chapter and restart its sequence.

        The name and tags are cleared; the custom tag is kept.
        """
        current = parse_number(self.chapter or "01", default=1)
        self.chapter = format_chapter(current + 1)
        self.sequence = "1"
        self.name = ""
        self.tags = []


class UndoEntry(WireModel):
    """A completed rename that the ledger still offers for reversal.

    Attributes:
        id: Opaque identifier assigned by the rename operation.
        original_name: Filename before the rename.
        new_name: Filename after the rename.
        created_at: When the rename happened.
    """

    id: str
    original_name: str
    new_name: str
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "created_at", "timestamp"),
        serialization_alias="createdAt",
    )


__all__ = ["WireModel", "PendingFile", "NamingTemplate", "UndoEntry"]
