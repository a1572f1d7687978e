"""Naming data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class ParsedRecording:
    """Components recovered from an existing recording filename."""

    chapter: str
    sequence: Optional[str]
    name: str


@dataclass(frozen=True, slots=True)
class AllChapters:
    """Chapter filter that accepts every chapter."""

    def matches(self, chapter: int) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class ChapterRange:
    """Chapter filter bounded on either side; open bounds are ``None``.

    Attributes:
        min: Lowest chapter accepted, inclusive.
        max: Highest chapter accepted, inclusive.
    """

    min: Optional[int] = None
    max: Optional[int] = None

    def matches(self, chapter: int) -> bool:
        if self.min is not None and chapter < self.min:
            return False
        if self.max is not None and chapter > self.max:
            return False
        return True


ChapterFilter = Union[AllChapters, ChapterRange]


class SuggestedNaming(BaseModel):
    """Next chapter/sequence/name derived from files already in the project.

    Attributes:
        chapter: Suggested two-digit chapter.
        sequence: Suggested next sequence.
        name: Name carried over from the latest recording in the chapter.
        existing_files: Recording filenames the suggestion was computed from.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    chapter: str = "01"
    sequence: str = "1"
    name: str = "intro"
    existing_files: List[str] = Field(default_factory=list)


__all__ = [
    "ParsedRecording",
    "AllChapters",
    "ChapterRange",
    "ChapterFilter",
    "SuggestedNaming",
]
