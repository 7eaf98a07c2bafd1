"""Word frequency analysis over article titles."""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Dict, Iterable

logger = logging.getLogger("article_scraper")

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "will", "would",
        "could", "should", "may", "might", "that", "this", "these", "those",
        "it", "its", "as", "not",
    }
)

_NON_WORD = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    if text is None:
        return ""
    text = _NON_WORD.sub("", text.lower())
    return _SPACES.sub(" ", text).strip()


def analyze_word_frequency(
    titles: Iterable[str], min_count: int = 3, skip_stop_words: bool = False
) -> Dict[str, int]:
    """Count words appearing at least ``min_count`` times, most frequent first."""
    titles = list(titles)
    logger.info("Analyzing word frequency across %d titles.", len(titles))
    counts = Counter(normalize(" ".join(titles)).split())
    repeated = {
        word: count
        for word, count in counts.most_common()
        if count >= min_count and not (skip_stop_words and word in STOP_WORDS)
    }
    logger.info("Found %d words repeated at least %d times.", len(repeated), min_count)
    return repeated


def unique_word_count(texts: Iterable[str]) -> int:
    return len(set(normalize(" ".join(texts)).split()))


def word_frequency_report(titles: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """Repeated words with and without stop words, keyed for persistence."""
    titles = list(titles)
    return {
        "all_words": analyze_word_frequency(titles),
        "without_stop_words": analyze_word_frequency(titles, skip_stop_words=True),
    }
