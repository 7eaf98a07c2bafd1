"""Configuration objects and constants for the scraper."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

logger = logging.getLogger("article_scraper")

DEFAULT_SITE_URL = "https://elpais.com"
DEFAULT_LISTING_PATH = "/opinion/"
DEFAULT_DOMAIN_MARKER = "elpais.com"


@dataclass(frozen=True)
class SelectorTable:
    """Ordered CSS selector sets keyed by extraction step."""

    listing_links: Tuple[str, ...] = (
        "section article h2 a",
        ".opinion article h2 a",
        "article.opinion-article h2 a",
        "h2.article-title a",
    )
    listing_links_fallback: Tuple[str, ...] = (
        "article a[href]",
        "h2 a[href]",
        "h3 a[href]",
    )
    title: Tuple[str, ...] = (
        "h1.article-title",
        "h1[class*='title']",
        "header h1",
        "h1",
    )
    body: Tuple[str, ...] = (
        "[data-dtm-region='articulo_cuerpo']",
        ".article-body",
        "[class*='article-body']",
        "[class*='article_body']",
        "[itemprop='articleBody']",
    )
    paragraphs: Tuple[str, ...] = (
        "article p",
        ".article-text p",
        "[class*='body'] p",
        ".story-body p",
    )
    meta_description: Tuple[str, ...] = (
        "meta[property='og:description']",
        "meta[name='description']",
    )
    structured_data: Tuple[str, ...] = ("script[type='application/ld+json']",)
    cover_image: Tuple[str, ...] = (
        "figure img",
        ".article-cover img",
        "[class*='cover'] img",
        "[class*='lead'] img",
        "[class*='hero'] img",
        "header picture img",
        "[class*='main-image'] img",
        "[class*='featured'] img",
    )
    og_image: Tuple[str, ...] = ("meta[property='og:image']",)
    twitter_image: Tuple[str, ...] = ("meta[name='twitter:image']",)
    overlays: Tuple[str, ...] = (
        "#didomi-notice-agree-button",
        "button[class*='accept']",
        "button[id*='accept']",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SelectorTable":
        """Build a table from a mapping, keeping defaults for missing keys."""
        known = {item.name for item in fields(cls)}
        overrides: Dict[str, Tuple[str, ...]] = {}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"Unknown selector set: {key}")
            if isinstance(value, str) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"Selector set {key} must be a list of strings")
            overrides[key] = tuple(value)
        return replace(cls(), **overrides)

    @classmethod
    def from_file(cls, path: Path) -> "SelectorTable":
        """Load selector overrides from a JSON object on disk."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        logger.debug("Loaded selector overrides for %s", ", ".join(sorted(data)))
        return cls.from_mapping(data)


@dataclass
class ScrapeConfig:
    """Top-level settings that control collection and extraction behaviour."""

    site_url: str = DEFAULT_SITE_URL
    listing_path: str = DEFAULT_LISTING_PATH
    domain_marker: str = DEFAULT_DOMAIN_MARKER
    article_count: int = 5
    explicit_timeout: float = 20.0
    page_load_timeout: float = 30.0
    expected_language: str = "es"
    headless: bool = True
    output_root: Path = Path("output")
    translation_source: str = "es"
    translation_target: str = "en"
    min_body_chars: int = 100
    min_paragraph_chars: int = 40
    min_aggregate_chars: int = 100
    min_description_chars: int = 30
    image_keywords: Tuple[str, ...] = ("image", "foto", "media")
    selectors: SelectorTable = field(default_factory=SelectorTable)

    @property
    def listing_url(self) -> str:
        return self.site_url.rstrip("/") + "/" + self.listing_path.lstrip("/")
