"""Filename builder shared by the live preview and the rename request."""

from __future__ import annotations

import re
from typing import Iterable, Optional

DEFAULT_EXTENSION = ".mov"
PLACEHOLDER = "..."

_WHITESPACE = re.compile(r"\s+")
_NAME_INVALID = re.compile(r"[^a-z0-9-]")
_TAG_SEPARATORS = re.compile(r"[\s,]+")
_TAG_INVALID = re.compile(r"[^A-Z0-9-]")
_REPEATED_DASHES = re.compile(r"-+")


def sanitize_name(name: str) -> str:
    """Lower-case ``name``, turn whitespace runs into dashes and drop anything else.

    Example:
        >>> sanitize_name("Intro Segment!")
        'intro-segment'
    """
    lowered = _WHITESPACE.sub("-", name.lower())
    return _NAME_INVALID.sub("", lowered)


def sanitize_custom_tag(value: str) -> str:
    """Normalize a one-off tag typed by the operator.

    Upper-cases the value, turns whitespace and commas into dashes, strips characters
    outside ``[A-Z0-9-]``, collapses repeated dashes and trims a single leading dash.
    A trailing dash is kept so multi-segment tags such as ``TAG1-TAG2`` can be typed
    one keystroke at a time.
    """
    normalized = _TAG_SEPARATORS.sub("-", value.upper())
    normalized = _TAG_INVALID.sub("", normalized)
    normalized = _REPEATED_DASHES.sub("-", normalized)
    if normalized.startswith("-"):
        normalized = normalized[1:]
    return normalized


def build_filename(
    chapter: str,
    sequence: Optional[str],
    name: str,
    tags: Iterable[str] = (),
    custom_tag: Optional[str] = None,
    *,
    extension: str = DEFAULT_EXTENSION,
    placeholder: str = PLACEHOLDER,
) -> str:
    """Assemble ``<chapter>[-<sequence>]-<name>[-<tag>...][-<custom_tag>]<ext>``.

    Args:
        chapter: Two-digit chapter string.
        sequence: Sequence string; empty or ``None`` omits it.
        name: Free-text name, kebab-cased through :func:`sanitize_name`.
        tags: Tag codes emitted in the given order.
        custom_tag: Optional one-off tag appended after ``tags``.
        extension: Video extension appended to the result.
        placeholder: Value returned while ``chapter`` or ``name`` is empty.

    Returns:
        str: The filename, or ``placeholder`` when it cannot be built yet.
    """
    if not chapter or not name:
        return placeholder
    parts = [chapter]
    if sequence:
        parts.append(sequence)
    parts.append(sanitize_name(name))
    parts.extend(tags)
    if custom_tag:
        parts.append(custom_tag)
    return "-".join(parts) + extension


__all__ = [
    "DEFAULT_EXTENSION",
    "PLACEHOLDER",
    "sanitize_name",
    "sanitize_custom_tag",
    "build_filename",
]
