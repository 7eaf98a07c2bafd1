"""High-level orchestration of a scrape batch and its browser workers."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from playwright.async_api import Playwright, async_playwright

from .analysis import word_frequency_report
from .config import ScrapeConfig
from .content import ContentExtractor, TitleExtractor
from .document import PlaywrightDocument, dismiss_overlays
from .images import ImageResolver, download_images
from .listing import UrlCollector, open_listing, page_language
from .models import Article, BatchResult
from .reporting import save_article_text, save_json
from .translation import FAILED_PREFIX, NO_KEY_PREFIX, Translator

logger = logging.getLogger("article_scraper")

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class EmptyBatchError(RuntimeError):
    """No article URLs could be collected from the listing page."""


class ScrapeOrchestrator:
    """Drive one sequential batch over a single document session."""

    def __init__(
        self,
        config: ScrapeConfig,
        collector: Optional[UrlCollector] = None,
        title_extractor: Optional[TitleExtractor] = None,
        content_extractor: Optional[ContentExtractor] = None,
        image_resolver: Optional[ImageResolver] = None,
    ) -> None:
        self.config = config
        self.collector = collector or UrlCollector(config)
        self.title_extractor = title_extractor or TitleExtractor(config)
        self.content_extractor = content_extractor or ContentExtractor(config)
        self.image_resolver = image_resolver or ImageResolver(config)

    async def scrape(self, document: Any, count: Optional[int] = None) -> BatchResult:
        """Collect article URLs from the listing page, then extract each one."""
        count = self.config.article_count if count is None else count
        logger.info("Starting scrape of %d articles from %s", count, self.config.listing_url)
        try:
            await open_listing(document, self.config)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Could not open listing page %s: %s", self.config.listing_url, exc)
            return BatchResult()
        await self._log_language(document)

        try:
            urls = await self.collector.collect(document, count)
        except Exception:  # pylint: disable=broad-except
            logger.exception("URL collection failed")
            urls = []
        batch = BatchResult(urls=urls)
        if not urls:
            logger.error("No article URLs found. Check listing page selectors.")
            return batch

        logger.info("Found %d article URLs. Scraping each...", len(urls))
        for position, url in enumerate(urls, start=1):
            article = Article(index=position, source_url=url)
            try:
                await self.scrape_article(document, article)
            except Exception as exc:  # pylint: disable=broad-except
                logger.error("Failed to scrape article %d (%s): %s", position, url, exc)
                batch.failed_indices.append(position)
            else:
                batch.articles.append(article)
                logger.info(
                    "Scraped article %d/%d: %s", position, len(urls), article.title_original
                )
            if position < len(urls):
                await self._return_to_listing(document)

        logger.info(
            "Scraping complete. Successfully scraped %d of %d articles.",
            len(batch.articles),
            len(urls),
        )
        return batch

    async def scrape_article(self, document: Any, article: Article) -> Article:
        """Navigate to one detail page and fill in title, body and image."""
        logger.debug("Opening article %d: %s", article.index, article.source_url)
        await document.navigate(article.source_url)
        await dismiss_overlays(document, self.config.selectors.overlays)
        return await self.extract_loaded(document, article)

    async def extract_loaded(self, document: Any, article: Article) -> Article:
        """Extract fields from the page that is already loaded."""
        article.title_original = await self.title_extractor.extract_title(document)
        article.body_text = await self.content_extractor.extract_content(document)
        article.cover_image_url = await self.image_resolver.resolve_cover_image(document)
        return article

    async def _return_to_listing(self, document: Any) -> None:
        try:
            await open_listing(document, self.config)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Could not return to listing page: %s", exc)

    async def _log_language(self, document: Any) -> None:
        try:
            lang = await page_language(document)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Could not read page language: %s", exc)
            return
        expected = self.config.expected_language.lower()
        match = bool(lang) and lang.lower().startswith(expected)
        logger.info("Page lang attribute: %r | Expected: %r | Match: %s", lang, expected, match)


@asynccontextmanager
async def browser_session(
    playwright: Playwright, browser_name: str, config: ScrapeConfig
) -> AsyncIterator[PlaywrightDocument]:
    """Own one browser, context and page for the duration of a batch."""
    if browser_name not in SUPPORTED_BROWSERS:
        raise ValueError(
            f"Unknown browser {browser_name!r}; valid: {', '.join(SUPPORTED_BROWSERS)}"
        )
    browser_type = getattr(playwright, browser_name)
    browser = await browser_type.launch(headless=config.headless)
    try:
        context = await browser.new_context(locale=config.expected_language)
        page = await context.new_page()
        page.set_default_timeout(config.explicit_timeout * 1000)
        page.set_default_navigation_timeout(config.page_load_timeout * 1000)
        yield PlaywrightDocument(page, page_load_timeout=config.page_load_timeout)
    finally:
        await browser.close()
        logger.info("Browser %s closed", browser_name)


@dataclass
class WorkerResult:
    """Outcome and timing of one browser worker."""

    browser: str
    batch: BatchResult = field(default_factory=BatchResult)
    total_seconds: float = 0.0
    error: Optional[str] = None


async def run_worker(
    playwright: Playwright, browser_name: str, config: ScrapeConfig
) -> WorkerResult:
    """Run a full, independent scrape inside its own browser session."""
    start = time.perf_counter()
    result = WorkerResult(browser=browser_name)
    try:
        async with browser_session(playwright, browser_name, config) as document:
            result.batch = await ScrapeOrchestrator(config).scrape(document)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Worker %s failed", browser_name)
        result.error = str(exc)
    result.total_seconds = time.perf_counter() - start
    return result


async def run_workers(
    browser_names: Sequence[str], config: ScrapeConfig
) -> List[WorkerResult]:
    """Run one worker per browser concurrently; workers share nothing."""
    async with async_playwright() as playwright:
        return list(
            await asyncio.gather(
                *(run_worker(playwright, name, config) for name in browser_names)
            )
        )


def translated_titles(articles: Sequence[Article]) -> List[str]:
    """Titles that were actually translated, without fallback-marked ones."""
    return [
        article.title_translated
        for article in articles
        if article.title_translated
        and not article.title_translated.startswith((FAILED_PREFIX, NO_KEY_PREFIX))
    ]


def finalize_batch(
    articles: List[Article],
    config: ScrapeConfig,
    translator: Optional[Translator] = None,
    download: bool = True,
    label: str = "",
) -> Optional[Dict[str, Dict[str, int]]]:
    """Translate, download images and persist a finished batch.

    Returns the word-frequency report over the translated titles, or ``None``
    when no title was translated successfully and the analysis is skipped.
    """
    output_root = config.output_root / label if label else config.output_root
    if translator is not None:
        for article in articles:
            article.title_translated = translator.translate(article.title_original)
    if download:
        download_images(articles, output_root / "images")
    for article in articles:
        save_article_text(article, output_root / "articles")
    save_json([article.to_dict() for article in articles], output_root / "articles.json")

    titles = translated_titles(articles)
    if not titles:
        logger.warning("No valid translated titles for word frequency analysis.")
        return None
    report = word_frequency_report(titles)
    save_json(report, output_root / "word_frequency.json")
    return report


async def scrape_articles(config: ScrapeConfig, browser_name: str = "chromium") -> List[Article]:
    """Scrape one batch in a fresh browser; raise if nothing was collected."""
    async with async_playwright() as playwright:
        result = await run_worker(playwright, browser_name, config)
    if result.error:
        raise RuntimeError(f"{browser_name} worker failed: {result.error}")
    if result.batch.empty:
        raise EmptyBatchError(f"No article URLs found on {config.listing_url}")
    return result.batch.articles
