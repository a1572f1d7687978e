"""Validation rules shared by every piece of naming logic."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Pattern and operator-facing message for one naming field."""

    pattern: Pattern[str]
    message: str


CHAPTER_RULE = FieldRule(
    pattern=re.compile(r"^\d{2}$"),
    message="Chapter must be a 2-digit number (01-99)",
)
# Existing files may carry single-digit chapters; accept them when reading.
CHAPTER_PARSE_PATTERN = re.compile(r"^\d{1,2}$")
SEQUENCE_RULE = FieldRule(
    pattern=re.compile(r"^\d+$"),
    message="Sequence must be a number (1, 2, 3, ...)",
)
NAME_REQUIRED_MESSAGE = "Name is required"

CHAPTER_MIN = 1
CHAPTER_MAX = 99


def validate_chapter(value: str) -> Optional[str]:
    """Return an error message when ``value`` is not a strict 2-digit chapter."""
    if not value or not CHAPTER_RULE.pattern.match(value):
        return CHAPTER_RULE.message
    return None


def validate_sequence(value: str) -> Optional[str]:
    """Return an error message when a non-empty ``value`` is not all digits.

    An empty sequence is valid and means the sequence is omitted from the filename.
    """
    if value and not SEQUENCE_RULE.pattern.match(value):
        return SEQUENCE_RULE.message
    return None


def validate_name(value: str) -> Optional[str]:
    """Return an error message when ``value`` is empty."""
    if not value:
        return NAME_REQUIRED_MESSAGE
    return None


def format_chapter(number: int) -> str:
    """Clamp ``number`` into the chapter range and zero-pad it to two digits."""
    return str(max(CHAPTER_MIN, min(CHAPTER_MAX, number))).zfill(2)


def parse_number(value: str, default: int = 0) -> int:
    """Parse a numeric naming field, falling back to ``default`` when unparsable."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


__all__ = [
    "FieldRule",
    "CHAPTER_RULE",
    "CHAPTER_PARSE_PATTERN",
    "SEQUENCE_RULE",
    "NAME_REQUIRED_MESSAGE",
    "CHAPTER_MIN",
    "CHAPTER_MAX",
    "validate_chapter",
    "validate_sequence",
    "validate_name",
    "format_chapter",
    "parse_number",
]
