"""Title and body extraction from article detail pages."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from .config import ScrapeConfig
from .document import WaitTimeout, join_selectors
from .models import ExtractionResult, Strategy

logger = logging.getLogger("article_scraper")

TITLE_NOT_FOUND = "Title Not Found"
PAYWALL_PREVIEW_MARKER = "[Article Preview — Full content behind paywall]\n\n"
STRUCTURED_PREVIEW_MARKER = "[Article Preview — Paywall]\n\n"
CONTENT_UNAVAILABLE = "[Content not available — article is behind paywall]"

_DESCRIPTION_FIELD = re.compile(r'"description"\s*:\s*"((?:[^"\\]|\\.)*)"')

StrategyFn = Callable[[Any], Awaitable[Optional[ExtractionResult]]]


async def run_cascade(
    document: Any, strategies: Sequence[StrategyFn], step: str
) -> Optional[ExtractionResult]:
    """Try each strategy in order and return the first found result.

    A strategy returns ``None`` when it has nothing acceptable. Timeouts are
    logged as warnings and any other error is logged and treated the same
    way, so a broken strategy only ever means "try the next one".
    """
    for strategy in strategies:
        name = getattr(strategy, "__name__", repr(strategy))
        try:
            result = await strategy(document)
        except WaitTimeout as exc:
            logger.warning("%s strategy %s timed out: %s", step, name, exc)
            continue
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("%s strategy %s failed: %s", step, name, exc)
            continue
        if result is not None and result.found:
            logger.debug("%s resolved by %s", step, result.strategy.value)
            return result
    return None


def extract_json_description(payload: str) -> Optional[str]:
    """Pull the first ``description`` string out of a JSON-LD block.

    Only that field is needed, so the payload is searched rather than parsed;
    malformed or truncated blocks still yield their description.
    """
    match = _DESCRIPTION_FIELD.search(payload)
    if not match:
        return None
    raw = match.group(1)
    try:
        return json.loads(f'"{raw}"')
    except ValueError:
        return raw


class TitleExtractor:
    """Headline lookup: heading selectors, then the document title."""

    def __init__(self, config: ScrapeConfig) -> None:
        self.config = config
        self.strategies: List[StrategyFn] = [self.from_heading, self.from_document_title]

    async def extract(self, document: Any) -> ExtractionResult:
        result = await run_cascade(document, self.strategies, "title")
        if result is None:
            logger.error("All title extraction attempts failed.")
            return ExtractionResult(False, TITLE_NOT_FOUND, Strategy.FALLBACK)
        return result

    async def extract_title(self, document: Any) -> str:
        return (await self.extract(document)).value

    async def from_heading(self, document: Any) -> Optional[ExtractionResult]:
        chain = self.config.selectors.title
        await document.wait_until(join_selectors(chain), self.config.explicit_timeout)
        for selector in chain:
            for element in await document.find_all(selector):
                text = (await document.read_text(element)).strip()
                if text:
                    return ExtractionResult(True, text, Strategy.HEADING)
        return None

    async def from_document_title(self, document: Any) -> Optional[ExtractionResult]:
        title = (await document.title() or "").split("|")[0].strip()
        if not title:
            return None
        return ExtractionResult(True, title, Strategy.DOCUMENT_TITLE)


class ContentExtractor:
    """Four-step body extraction, degrading towards paywall previews."""

    def __init__(self, config: ScrapeConfig) -> None:
        self.config = config
        self.strategies: List[StrategyFn] = [
            self.from_body,
            self.from_paragraphs,
            self.from_meta_description,
            self.from_structured_data,
        ]

    async def extract(self, document: Any) -> ExtractionResult:
        result = await run_cascade(document, self.strategies, "content")
        if result is None:
            logger.warning("All content extraction strategies failed; paywall article.")
            return ExtractionResult(False, CONTENT_UNAVAILABLE, Strategy.FALLBACK)
        return result

    async def extract_content(self, document: Any) -> str:
        return (await self.extract(document)).value

    async def from_body(self, document: Any) -> Optional[ExtractionResult]:
        selector = join_selectors(self.config.selectors.body)
        for element in await document.find_all(selector):
            await document.scroll_into_view(element)
            text = (await document.read_text(element)).strip()
            if len(text) > self.config.min_body_chars:
                return ExtractionResult(True, text, Strategy.BODY)
        return None

    async def from_paragraphs(self, document: Any) -> Optional[ExtractionResult]:
        selector = join_selectors(self.config.selectors.paragraphs)
        chunks: List[str] = []
        for element in await document.find_all(selector):
            text = (await document.read_text(element)).strip()
            # short paragraphs are bylines, captions and navigation labels
            if len(text) > self.config.min_paragraph_chars:
                chunks.append(text)
        aggregate = "\n\n".join(chunks)
        if len(aggregate) > self.config.min_aggregate_chars:
            return ExtractionResult(True, aggregate, Strategy.PARAGRAPHS)
        return None

    async def from_meta_description(self, document: Any) -> Optional[ExtractionResult]:
        for selector in self.config.selectors.meta_description:
            elements = await document.find_all(selector)
            if not elements:
                continue
            description = await document.read_attribute(elements[0], "content")
            if description and len(description) > self.config.min_description_chars:
                logger.info("Using %s as content fallback.", selector)
                return ExtractionResult(
                    True, PAYWALL_PREVIEW_MARKER + description, Strategy.META_DESCRIPTION
                )
        return None

    async def from_structured_data(self, document: Any) -> Optional[ExtractionResult]:
        selector = join_selectors(self.config.selectors.structured_data)
        for script in await document.find_all(selector):
            payload = await document.read_source(script)
            if "description" not in payload:
                continue
            description = extract_json_description(payload)
            if description and len(description) > self.config.min_description_chars:
                logger.info("Using JSON-LD description as content fallback.")
                return ExtractionResult(
                    True,
                    STRUCTURED_PREVIEW_MARKER + description,
                    Strategy.STRUCTURED_DATA,
                )
        return None
