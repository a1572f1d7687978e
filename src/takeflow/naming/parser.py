"""Parsing of existing recording filenames and next-name suggestions."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .models import AllChapters, ChapterFilter, ChapterRange, ParsedRecording, SuggestedNaming
from .rules import CHAPTER_PARSE_PATTERN, CHAPTER_RULE, SEQUENCE_RULE, format_chapter

_EXTENSION = re.compile(r"\.mov$", re.IGNORECASE)
_TAG_WORD = re.compile(r"^[A-Z]+$")
_RANGE = re.compile(r"^(?P<min>\d*)-(?P<max>\d*)$")

ALL_CHAPTERS = AllChapters()


def _strip_trailing_tags(parts: list[str]) -> list[str]:
    # Tags are trailing words written entirely in capitals (CTA, API, ...).
    result = list(parts)
    while result and _TAG_WORD.match(result[-1]):
        result.pop()
    return result


def parse_recording_filename(filename: str, *, lenient: bool = True) -> Optional[ParsedRecording]:
    """Split ``filename`` into chapter, optional sequence and name.

    Accepts ``10-5-intro.mov``, ``10-10-john-product-manager-CTA.mov`` and, when
    ``lenient`` is true, single-digit chapters such as ``1-1-demo.mov``.

    Args:
        filename: Basename of the recording.
        lenient: Accept 1-2 digit chapters instead of exactly two.

    Returns:
        Optional[ParsedRecording]: Parsed components, or ``None`` when the name does
        not follow the recording convention.
    """
    parts = _EXTENSION.sub("", filename).split("-")
    if len(parts) < 2:
        return None

    chapter = parts[0]
    chapter_pattern = CHAPTER_PARSE_PATTERN if lenient else CHAPTER_RULE.pattern
    if not chapter_pattern.match(chapter):
        return None

    if SEQUENCE_RULE.pattern.match(parts[1]):
        name_parts = _strip_trailing_tags(parts[2:])
        return ParsedRecording(chapter=chapter, sequence=parts[1], name="-".join(name_parts))

    name_parts = _strip_trailing_tags(parts[1:])
    return ParsedRecording(chapter=chapter, sequence=None, name="-".join(name_parts))


def parse_chapter_filter(value: Optional[str]) -> ChapterFilter:
    """Turn ``"all"``, ``"3"``, ``"3-5"``, ``"3-"`` or ``"-5"`` into a chapter filter.

    Raises:
        ValueError: If ``value`` matches none of the accepted forms.
    """
    if value is None or value.strip().lower() in {"", "all"}:
        return ALL_CHAPTERS
    text = value.strip()
    if text.isdigit():
        number = int(text)
        return ChapterRange(min=number, max=number)
    match = _RANGE.match(text)
    if match is None:
        raise ValueError(f"Invalid chapter filter: {value!r}")
    low = int(match.group("min")) if match.group("min") else None
    high = int(match.group("max")) if match.group("max") else None
    return ChapterRange(min=low, max=high)


def calculate_suggested_naming(
    existing_files: Iterable[str],
    chapter_filter: ChapterFilter = ALL_CHAPTERS,
) -> SuggestedNaming:
    """Suggest the next chapter, sequence and name from existing recordings.

    Only sequenced recordings inside ``chapter_filter`` are considered. The suggestion
    continues the highest chapter with its highest sequence plus one and repeats the
    name of that chapter's last file.
    """
    filenames = list(existing_files)
    parsed: list[ParsedRecording] = []
    for filename in filenames:
        recording = parse_recording_filename(filename)
        if recording is None or recording.sequence is None:
            continue
        if not chapter_filter.matches(int(recording.chapter)):
            continue
        parsed.append(recording)

    if not parsed:
        return SuggestedNaming(existing_files=filenames)

    max_chapter = max(int(recording.chapter) for recording in parsed)
    in_chapter = [recording for recording in parsed if int(recording.chapter) == max_chapter]
    max_sequence = max(int(recording.sequence or "0") for recording in in_chapter)

    return SuggestedNaming(
        chapter=format_chapter(max_chapter),
        sequence=str(max_sequence + 1),
        name=in_chapter[-1].name,
        existing_files=filenames,
    )


__all__ = [
    "ALL_CHAPTERS",
    "parse_recording_filename",
    "parse_chapter_filter",
    "calculate_suggested_naming",
]
