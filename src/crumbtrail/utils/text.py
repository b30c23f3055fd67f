"""Utilities for normalizing display text such as crumb names."""

from __future__ import annotations

import re
from typing import Pattern

_NBSP_PATTERN: Pattern[str] = re.compile("(?:\u00a0|&nbsp;|&#160;|&#xa0;)", re.IGNORECASE)
_CONTROL_SPACE_PATTERN: Pattern[str] = re.compile(r"[\t\r\n\f\v]+")
_REPEATED_SPACE_PATTERN: Pattern[str] = re.compile(r" {2,}")
_TAG_PATTERN: Pattern[str] = re.compile(r"<[^>]*>")


def normalize_title(value: str | None) -> str:
    """Flatten ``value`` into a single trimmed line suitable for a crumb name."""
    text = value or ""
    if not text:
        return ""
    text = _TAG_PATTERN.sub("", text)
    text = _NBSP_PATTERN.sub(" ", text)
    text = _CONTROL_SPACE_PATTERN.sub(" ", text)
    text = _REPEATED_SPACE_PATTERN.sub(" ", text)
    return text.strip()

