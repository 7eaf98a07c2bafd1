"""Listing page navigation and article URL collection."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence
from urllib.parse import urljoin

from .config import ScrapeConfig
from .document import WaitTimeout, dismiss_overlays, join_selectors

logger = logging.getLogger("article_scraper")


async def open_listing(document: Any, config: ScrapeConfig) -> None:
    """Load the listing page and clear any consent overlay."""
    await document.navigate(config.listing_url)
    await dismiss_overlays(document, config.selectors.overlays)


async def page_language(document: Any) -> Optional[str]:
    """Return the ``lang`` attribute of the root element, if any."""
    roots = await document.find_all("html")
    if not roots:
        return None
    return await document.read_attribute(roots[0], "lang")


class UrlCollector:
    """Collect article URLs from the currently loaded listing page."""

    def __init__(self, config: ScrapeConfig) -> None:
        self.config = config

    async def collect(self, document: Any, count: Optional[int] = None) -> List[str]:
        """Return up to ``count`` unique article URLs in first-seen order."""
        count = self.config.article_count if count is None else count
        if count <= 0:
            return []
        selectors = self.config.selectors
        try:
            await document.wait_until(
                join_selectors(selectors.listing_links), self.config.explicit_timeout
            )
        except WaitTimeout as exc:
            logger.warning("%s. Trying fallback locators...", exc)
            urls = await self._collect_fallback(document, count)
            logger.info("Fallback collected %d URLs.", len(urls))
            return urls
        return await self._gather(document, selectors.listing_links, count)

    async def _collect_fallback(self, document: Any, count: int) -> List[str]:
        try:
            return await self._gather(
                document,
                self.config.selectors.listing_links_fallback,
                count,
                skip_fragments=True,
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("Fallback URL collection failed")
            return []

    async def _gather(
        self,
        document: Any,
        selectors: Sequence[str],
        count: int,
        skip_fragments: bool = False,
    ) -> List[str]:
        base_url = await document.current_url()
        urls: List[str] = []
        for link in await document.find_all(join_selectors(selectors)):
            if len(urls) >= count:
                break
            href = await document.read_attribute(link, "href")
            if not href:
                continue
            href = urljoin(base_url, href)
            if skip_fragments and "#" in href:
                continue
            if href in urls or self.config.domain_marker not in href:
                continue
            urls.append(href)
            logger.debug("Collected URL: %s", href)
        return urls
