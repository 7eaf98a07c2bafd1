"""MCP server exposing article-scraper tools."""

from __future__ import annotations

import json
import logging

from mcp.server.fastmcp import FastMCP

from .config import ScrapeConfig
from .crawler import ScrapeOrchestrator, scrape_articles
from .document import StaticDocument
from .models import Article

logger = logging.getLogger("article_scraper.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="article-scraper")


@mcp.tool()
async def scrape(
    count: int = 5,
    site_url: str = "https://elpais.com",
    listing_path: str = "/opinion/",
    domain_marker: str = "elpais.com",
) -> str:
    """Scrape up to ``count`` articles from a listing page and return them as JSON."""
    config = ScrapeConfig(
        site_url=site_url,
        listing_path=listing_path,
        domain_marker=domain_marker,
        article_count=count,
    )
    articles = await scrape_articles(config)
    return json.dumps([article.to_dict() for article in articles], ensure_ascii=False)


@mcp.tool()
async def extract_html(html: str, url: str = "about:blank") -> str:
    """Extract title, body text and cover image from one article's HTML."""
    document = StaticDocument.from_html(html, url=url)
    article = Article(index=1, source_url=url)
    await ScrapeOrchestrator(ScrapeConfig()).extract_loaded(document, article)
    return json.dumps(article.to_dict(), ensure_ascii=False)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
