"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

import re
import unicodedata

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "article", separator: str = "_", max_length: int = 50) -> str:
    """Generate a filesystem-friendly slug using ASCII characters only.

    Accented letters keep their base character ("opinión" -> "opinion").
    """
    normalized = unicodedata.normalize("NFKD", value or "")
    normalized = normalized.encode("ascii", "ignore").decode("ascii").lower()
    normalized = SLUG_PATTERN.sub(separator, normalized).strip(separator)
    normalized = normalized[:max_length].rstrip(separator)
    return normalized or fallback
