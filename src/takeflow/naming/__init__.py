"""Naming rules, filename building and recording filename parsing."""

from .builder import (
    DEFAULT_EXTENSION,
    PLACEHOLDER,
    build_filename,
    sanitize_custom_tag,
    sanitize_name,
)
from .models import AllChapters, ChapterFilter, ChapterRange, ParsedRecording, SuggestedNaming
from .parser import (
    ALL_CHAPTERS,
    calculate_suggested_naming,
    parse_chapter_filter,
    parse_recording_filename,
)
from .rules import validate_chapter, validate_name, validate_sequence

__all__ = [
    "DEFAULT_EXTENSION",
    "PLACEHOLDER",
    "build_filename",
    "sanitize_custom_tag",
    "sanitize_name",
    "AllChapters",
    "ChapterFilter",
    "ChapterRange",
    "ParsedRecording",
    "SuggestedNaming",
    "ALL_CHAPTERS",
    "calculate_suggested_naming",
    "parse_chapter_filter",
    "parse_recording_filename",
    "validate_chapter",
    "validate_name",
    "validate_sequence",
]
