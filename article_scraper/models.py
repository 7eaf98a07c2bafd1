"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class Strategy(str, Enum):
    """Which extraction attempt produced a value."""

    HEADING = "heading"
    DOCUMENT_TITLE = "document_title"
    BODY = "body"
    PARAGRAPHS = "paragraphs"
    META_DESCRIPTION = "meta_description"
    STRUCTURED_DATA = "structured_data"
    IMAGE_ELEMENT = "image_element"
    OG_IMAGE = "og_image"
    TWITTER_IMAGE = "twitter_image"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction cascade."""

    found: bool
    value: Optional[str]
    strategy: Strategy


@dataclass(frozen=True)
class ImageCandidate:
    """Raw image-bearing attributes read from a single element."""

    src: Optional[str]
    data_src: Optional[str]
    srcset: Optional[str]

    def first_srcset_url(self) -> Optional[str]:
        if not self.srcset or not self.srcset.strip():
            return None
        tokens = self.srcset.split(",")[0].split()
        return tokens[0] if tokens else None

    def resolve(self, is_valid: Callable[[Optional[str]], bool]) -> Optional[str]:
        """Return the real photo URL for this element, or None."""
        for value in (self.data_src, self.first_srcset_url(), self.src):
            if is_valid(value):
                return value.strip()
        return None


@dataclass
class Article:
    """A scraped article. ``index`` is its 1-based position in the batch."""

    index: int
    source_url: str
    title_original: str = ""
    title_translated: Optional[str] = None
    body_text: str = ""
    cover_image_url: Optional[str] = None
    local_image_path: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.cover_image_url and self.cover_image_url.strip())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BatchResult:
    """Articles produced by one orchestration pass."""

    urls: List[str] = field(default_factory=list)
    articles: List[Article] = field(default_factory=list)
    failed_indices: List[int] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        """True when no article URLs were collected at all."""
        return not self.urls
