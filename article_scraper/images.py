"""Cover image resolution and downloading utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

import requests
from filetype import guess

from .config import ScrapeConfig
from .content import StrategyFn, run_cascade
from .models import Article, ExtractionResult, ImageCandidate, Strategy

logger = logging.getLogger("article_scraper")

MAX_IMAGE_BYTES = 10 * 1024 * 1024
MIN_IMAGE_BYTES = 512
ALLOWED_IMAGE_TYPES = {"png", "jpg", "jpeg", "gif", "webp", "bmp", "tiff"}
PHOTO_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
REJECTED_EXTENSIONS = (".svg", ".gif")


def is_valid_image_url(
    url: Optional[str], keywords: Sequence[str] = ("image", "foto", "media")
) -> bool:
    """Return True only for absolute URLs that look like a real photo.

    SVGs and GIFs are logos, icons and animations; data URIs are inline
    placeholders. CDN URLs often omit the extension, so a path keyword
    counts as evidence of a photo too.
    """
    if url is None or not url.strip():
        return False
    lower = url.strip().lower()
    if lower.startswith("data:"):
        return False
    if lower.endswith(REJECTED_EXTENSIONS):
        return False
    if not lower.startswith(("http://", "https://")):
        return False
    return any(ext in lower for ext in PHOTO_EXTENSIONS) or any(
        keyword in lower for keyword in keywords
    )


class ImageResolver:
    """Find the cover photo URL of the loaded article page."""

    def __init__(self, config: ScrapeConfig) -> None:
        self.config = config
        self.strategies: List[StrategyFn] = [
            self.from_elements,
            self.from_og_image,
            self.from_twitter_image,
        ]

    def is_valid(self, url: Optional[str]) -> bool:
        return is_valid_image_url(url, self.config.image_keywords)

    async def resolve(self, document: Any) -> ExtractionResult:
        result = await run_cascade(document, self.strategies, "cover image")
        if result is None:
            logger.info("No article cover image found.")
            return ExtractionResult(False, None, Strategy.FALLBACK)
        logger.info("Cover image found via %s: %s", result.strategy.value, result.value)
        return result

    async def resolve_cover_image(self, document: Any) -> Optional[str]:
        return (await self.resolve(document)).value

    async def candidates(self, document: Any) -> List[ImageCandidate]:
        """Read image attributes for every cover selector match, by priority."""
        found: List[ImageCandidate] = []
        for selector in self.config.selectors.cover_image:
            for element in await document.find_all(selector):
                found.append(
                    ImageCandidate(
                        src=await document.read_attribute(element, "src"),
                        data_src=await document.read_attribute(element, "data-src"),
                        srcset=await document.read_attribute(element, "srcset"),
                    )
                )
        return found

    async def from_elements(self, document: Any) -> Optional[ExtractionResult]:
        for candidate in await self.candidates(document):
            resolved = candidate.resolve(self.is_valid)
            if resolved:
                return ExtractionResult(True, resolved, Strategy.IMAGE_ELEMENT)
        return None

    async def from_og_image(self, document: Any) -> Optional[ExtractionResult]:
        url = await self._from_meta(document, self.config.selectors.og_image)
        return ExtractionResult(True, url, Strategy.OG_IMAGE) if url else None

    async def from_twitter_image(self, document: Any) -> Optional[ExtractionResult]:
        url = await self._from_meta(document, self.config.selectors.twitter_image)
        return ExtractionResult(True, url, Strategy.TWITTER_IMAGE) if url else None

    async def _from_meta(self, document: Any, selectors: Iterable[str]) -> Optional[str]:
        for selector in selectors:
            elements = await document.find_all(selector)
            if not elements:
                continue
            url = await document.read_attribute(elements[0], "content")
            if url and not url.lower().endswith(".svg"):
                return url
        return None


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def infer_image_extension(content_type: Optional[str], data: bytes) -> Optional[str]:
    """Guess an image file extension from HTTP metadata or file signature."""
    detected = detect_image_format(data)
    if detected:
        return detected
    if not content_type:
        return None
    parts = content_type.split(";")[0].split("/")
    if len(parts) == 2 and parts[0] == "image":
        ext = parts[1].strip().lower()
        if ext == "jpeg":
            ext = "jpg"
        return ext
    return None


def download_cover_image(
    image_url: Optional[str],
    index: int,
    image_dir: Path,
    session: Optional[requests.Session] = None,
) -> Optional[Path]:
    """Fetch one cover image and store it as ``article_<index>_cover.<ext>``."""
    if not image_url or not image_url.strip():
        logger.warning("Article %d: no image URL provided. Skipping.", index)
        return None
    image_url = image_url.strip()
    if image_url.startswith("//"):
        image_url = "https:" + image_url
    if image_url.startswith("data:"):
        logger.warning("Article %d: skipping data URI image.", index)
        return None
    if image_url.lower().endswith(".svg"):
        logger.warning("Article %d: skipping SVG (logo/icon, not cover photo).", index)
        return None

    session = session or requests.Session()
    try:
        resp = session.get(image_url, timeout=15)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Article %d: failed to fetch image %s: %s", index, image_url, exc)
        return None

    content_type = resp.headers.get("Content-Type", "")
    data = resp.content
    if len(data) < MIN_IMAGE_BYTES:
        logger.warning("Skipping %s: response too small", image_url)
        return None
    if len(data) > MAX_IMAGE_BYTES:
        logger.warning(
            "Skipping %s: image larger than %s bytes", image_url, MAX_IMAGE_BYTES
        )
        return None

    extension = infer_image_extension(content_type, data)
    if not extension or extension.lower() not in ALLOWED_IMAGE_TYPES:
        logger.warning(
            "Skipping %s: unsupported image type (Content-Type=%s)",
            image_url,
            content_type,
        )
        return None

    destination = image_dir / f"article_{index}_cover.{extension}"
    try:
        image_dir.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        logger.warning("Failed to write image %s: %s", destination, exc)
        return None
    logger.info("Article %d: image saved to %s", index, destination)
    return destination


def download_images(articles: Iterable[Article], image_dir: Path) -> int:
    """Download cover images for every article that has one."""
    session = requests.Session()
    saved = 0
    for article in articles:
        if not article.has_image:
            continue
        path = download_cover_image(
            article.cover_image_url, article.index, image_dir, session=session
        )
        if path is not None:
            article.local_image_path = str(path)
            saved += 1
    return saved
