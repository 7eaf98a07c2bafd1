"""Navigable document backends used by the extractors.

Extraction code only talks to the small async surface defined here:
``navigate``, ``find_all``, ``read_attribute``, ``read_text``,
``read_source``, ``scroll_into_view``, ``wait_until``, ``current_url``,
``title`` and ``click``. ``PlaywrightDocument`` drives a live browser
page; ``StaticDocument`` serves saved HTML through BeautifulSoup so the
same extractors can run offline.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from bs4 import BeautifulSoup, Tag
from playwright.async_api import (
    ElementHandle,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

logger = logging.getLogger("article_scraper")


class WaitTimeout(Exception):
    """A wait budget elapsed before the expected element appeared."""

    def __init__(self, selector: str, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:.1f}s waiting for {selector!r}")
        self.selector = selector
        self.timeout = timeout


def join_selectors(selectors: Sequence[str]) -> str:
    """Combine a selector set into one selector matching in document order."""
    return ", ".join(selectors)


class PlaywrightDocument:
    """Document capability backed by a Playwright async page."""

    def __init__(self, page: Page, page_load_timeout: float = 30.0) -> None:
        self.page = page
        self.page_load_timeout = page_load_timeout

    async def navigate(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        try:
            await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.page_load_timeout * 1000,
            )
        except PlaywrightTimeoutError:
            logger.warning("Page load timeout for %s; proceeding with current state", url)

    async def find_all(self, selector: str) -> List[ElementHandle]:
        return await self.page.query_selector_all(selector)

    async def read_attribute(self, element: ElementHandle, name: str) -> Optional[str]:
        value = await element.get_attribute(name)
        return value.strip() if value is not None else None

    async def read_text(self, element: ElementHandle) -> str:
        return await element.inner_text()

    async def read_source(self, element: ElementHandle) -> str:
        return await element.text_content() or ""

    async def scroll_into_view(self, element: ElementHandle) -> None:
        await element.evaluate("el => el.scrollIntoView(true)")
        # lazy-loaded blocks need a moment to render after scrolling
        await self.page.wait_for_timeout(300)

    async def wait_until(self, selector: str, timeout: float) -> ElementHandle:
        try:
            element = await self.page.wait_for_selector(
                selector, state="attached", timeout=timeout * 1000
            )
        except PlaywrightTimeoutError as exc:
            raise WaitTimeout(selector, timeout) from exc
        if element is None:
            raise WaitTimeout(selector, timeout)
        return element

    async def current_url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        return await self.page.title()

    async def click(self, element: ElementHandle) -> bool:
        if not await element.is_visible() or not await element.is_enabled():
            return False
        await element.click(timeout=5000)
        await self.page.wait_for_timeout(1000)
        return True


def _visible_text(tag: Tag) -> str:
    lines = (line.strip() for line in tag.get_text().splitlines())
    return "\n".join(line for line in lines if line)


class StaticDocument:
    """Document capability over pre-fetched HTML, keyed by URL."""

    def __init__(self, pages: Mapping[str, str], url: Optional[str] = None) -> None:
        self._pages: Dict[str, str] = dict(pages)
        self._url = ""
        self._soup = BeautifulSoup("", "html.parser")
        self.history: List[str] = []
        if url is not None:
            self._load(url)

    @classmethod
    def from_html(cls, html: str, url: str = "about:blank") -> "StaticDocument":
        return cls({url: html}, url=url)

    def _load(self, url: str) -> None:
        html = self._pages[url]
        self._soup = BeautifulSoup(html, "html.parser")
        self._url = url
        self.history.append(url)

    async def navigate(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        self._load(url)

    async def find_all(self, selector: str) -> List[Tag]:
        return self._soup.select(selector)

    async def read_attribute(self, element: Tag, name: str) -> Optional[str]:
        value: Any = element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()

    async def read_text(self, element: Tag) -> str:
        return _visible_text(element)

    async def read_source(self, element: Tag) -> str:
        # get_text() skips <script> strings when called on a parent
        if element.string is not None:
            return str(element.string)
        return element.get_text()

    async def scroll_into_view(self, element: Tag) -> None:
        return None

    async def wait_until(self, selector: str, timeout: float) -> Tag:
        element = self._soup.select_one(selector)
        if element is None:
            raise WaitTimeout(selector, timeout)
        return element

    async def current_url(self) -> str:
        return self._url

    async def title(self) -> str:
        if self._soup.title and self._soup.title.string:
            return self._soup.title.string
        return ""

    async def click(self, element: Tag) -> bool:
        logger.debug("Static document ignores click on <%s>", element.name)
        return False


async def dismiss_overlays(document: Any, selectors: Iterable[str]) -> int:
    """Click the first match of each overlay selector, best effort."""
    dismissed = 0
    for selector in selectors:
        try:
            elements = await document.find_all(selector)
            if not elements:
                logger.debug("No overlay found: %s", selector)
                continue
            if await document.click(elements[0]):
                logger.info("Overlay dismissed: %s", selector)
                dismissed += 1
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Overlay %s not clickable: %s", selector, exc)
    return dismissed
