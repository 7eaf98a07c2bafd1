"""Console reporting and on-disk persistence of scraped articles."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, TextIO

from .models import Article
from .utils import slugify

logger = logging.getLogger("article_scraper")

SEPARATOR = "=" * 55
THIN_SEPARATOR = "-" * 55
PREVIEW_CHARS = 500


def save_article_text(article: Article, articles_dir: Path) -> Optional[Path]:
    """Write one article as ``article_<index>_<slug>.txt``."""
    filename = f"article_{article.index}_{slugify(article.title_original)}.txt"
    destination = articles_dir / filename
    content = (
        f"=== ARTICLE {article.index} ===\n"
        f"TITLE: {article.title_original}\n"
        f"URL: {article.source_url}\n\n"
        f"{article.body_text}"
    )
    try:
        articles_dir.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save article %d: %s", article.index, exc)
        return None
    logger.info("Saved article %d to %s", article.index, destination)
    return destination


def save_json(payload: Any, path: Path) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except (OSError, TypeError) as exc:
        logger.error("Failed to save JSON to %s: %s", path, exc)
        return False
    logger.info("Saved JSON to %s", path)
    return True


def _header(title: str, out: TextIO) -> None:
    out.write(f"\n{SEPARATOR}\n  {title}\n{SEPARATOR}\n")


def print_articles(articles: Iterable[Article], out: TextIO = sys.stdout) -> None:
    """Print every article with a preview of its body text."""
    _header("SCRAPED ARTICLES", out)
    for article in articles:
        out.write(f"\n  [Article {article.index}] {article.title_original}\n")
        if article.title_translated:
            out.write(f"  EN Title : {article.title_translated}\n")
        out.write(f"  URL      : {article.source_url}\n")
        body = article.body_text or ""
        if not body.strip():
            out.write("  [Content not available — possible paywall]\n")
        else:
            preview = body
            if len(body) > PREVIEW_CHARS:
                preview = body[:PREVIEW_CHARS] + "..."
            for line in preview.splitlines():
                out.write(f"    {line}\n")
        if article.local_image_path:
            image = f"saved to {article.local_image_path}"
        elif article.has_image:
            image = article.cover_image_url
        else:
            image = "No image available"
        out.write(f"  Image    : {image}\n")
        out.write(f"  Content  : {len(body)} chars\n  {THIN_SEPARATOR}\n")


def print_translated_titles(articles: Iterable[Article], out: TextIO = sys.stdout) -> None:
    _header("TRANSLATED TITLES", out)
    for article in articles:
        out.write(f"\n  [{article.index}] {article.title_original}\n")
        out.write(f"      {article.title_translated}\n")


def _write_counts(repeated: Dict[str, int], out: TextIO) -> None:
    if not repeated:
        out.write("\n  No words repeated more than twice across titles.\n")
        return
    out.write(f"\n  {'WORD':<25} COUNT\n  {THIN_SEPARATOR}\n")
    for word, count in repeated.items():
        out.write(f"  {word:<25} {count}\n")


def print_word_frequency(
    report: Optional[Dict[str, Dict[str, int]]], out: TextIO = sys.stdout
) -> None:
    _header("WORD FREQUENCY ANALYSIS (words repeated more than twice)", out)
    if report is None:
        out.write("\n  Skipping analysis — no valid translations available.\n")
        return
    _write_counts(report["all_words"], out)
    if report["without_stop_words"]:
        out.write("\n  [Meaningful words only — stop words removed]\n")
        _write_counts(report["without_stop_words"], out)
