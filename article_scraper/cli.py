"""Command-line entry point for the article scraper."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Sequence

from .config import (
    DEFAULT_DOMAIN_MARKER,
    DEFAULT_LISTING_PATH,
    DEFAULT_SITE_URL,
    ScrapeConfig,
    SelectorTable,
)
from .crawler import SUPPORTED_BROWSERS, ScrapeOrchestrator, finalize_batch, run_workers
from .document import StaticDocument
from .models import Article
from .reporting import print_articles, print_translated_titles, print_word_frequency
from .translation import Translator

logger = logging.getLogger("article_scraper.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("scrape", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--selectors",
        type=Path,
        default=None,
        help="JSON file overriding the default selector sets",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_scrape_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--site", default=DEFAULT_SITE_URL, help="Site root URL")
    parser.add_argument(
        "--listing-path",
        default=DEFAULT_LISTING_PATH,
        help="Path of the listing page relative to the site root",
    )
    parser.add_argument(
        "--domain",
        default=DEFAULT_DOMAIN_MARKER,
        help="Only accept article URLs containing this marker",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=5,
        help="Maximum number of articles to scrape",
    )
    parser.add_argument(
        "--browser",
        action="append",
        choices=SUPPORTED_BROWSERS,
        help="Browser engine to run; repeat to run several workers in parallel",
    )
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where articles, images and JSON should be written",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=20.0,
        help="Seconds to wait for elements before falling back",
    )
    parser.add_argument(
        "--page-timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument("--language", default="es", help="Expected page language")
    parser.add_argument("--target-language", default="en", help="Translate titles into")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    parser.add_argument(
        "--no-translate",
        action="store_true",
        help="Skip title translation",
    )
    parser.add_argument(
        "--no-download",
        action="store_true",
        help="Skip downloading cover images",
    )
    _add_common_arguments(parser)


def _add_extract_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Saved article HTML files to extract",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape news articles with Playwright, degrading gracefully behind paywalls.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape_parser = subparsers.add_parser(
        "scrape", help="Collect and extract articles from a live listing page"
    )
    _add_scrape_arguments(scrape_parser)

    extract_parser = subparsers.add_parser(
        "extract", help="Extract title, body and cover image from saved HTML files"
    )
    _add_extract_arguments(extract_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _load_selectors(path: Path | None) -> SelectorTable:
    if path is None:
        return SelectorTable()
    return SelectorTable.from_file(path)


def _run_scrape(args: argparse.Namespace) -> int:
    config = ScrapeConfig(
        site_url=args.site,
        listing_path=args.listing_path,
        domain_marker=args.domain,
        article_count=args.count,
        explicit_timeout=args.timeout,
        page_load_timeout=args.page_timeout,
        expected_language=args.language,
        headless=not args.headed,
        output_root=Path(args.output).resolve(),
        translation_source=args.language,
        translation_target=args.target_language,
        selectors=_load_selectors(args.selectors),
    )
    browsers: List[str] = args.browser or ["chromium"]

    overall_start = time.perf_counter()
    results = asyncio.run(run_workers(browsers, config))
    total_elapsed = time.perf_counter() - overall_start

    translator = None
    if not args.no_translate:
        translator = Translator(config.translation_source, config.translation_target)

    exit_code = 0
    try:
        for result in results:
            batch = result.batch
            if result.error or batch.empty:
                logger.error(
                    "%s produced no articles (%s)",
                    result.browser,
                    result.error or "no article URLs collected",
                )
                exit_code = 1
                continue
            label = result.browser if len(results) > 1 else ""
            report = finalize_batch(
                batch.articles,
                config,
                translator=translator,
                download=not args.no_download,
                label=label,
            )
            print_articles(batch.articles)
            if translator is not None:
                print_translated_titles(batch.articles)
            print_word_frequency(report)
            logger.info(
                "%s: %d/%d articles scraped in %.2fs (failed indices: %s)",
                result.browser,
                len(batch.articles),
                len(batch.urls),
                result.total_seconds,
                batch.failed_indices or "none",
            )
    finally:
        if translator is not None:
            translator.close()

    logger.info("Finished in %.2fs", total_elapsed)
    return exit_code


async def extract_files(paths: Sequence[Path], config: ScrapeConfig) -> List[Article]:
    """Run title, content and image extraction over saved HTML files."""
    pages = {path.resolve().as_uri(): path.read_text(encoding="utf-8") for path in paths}
    document = StaticDocument(pages)
    orchestrator = ScrapeOrchestrator(config)
    articles: List[Article] = []
    for index, url in enumerate(pages, start=1):
        article = Article(index=index, source_url=url)
        try:
            await orchestrator.scrape_article(document, article)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to extract %s: %s", url, exc)
            continue
        articles.append(article)
    return articles


def _run_extract(args: argparse.Namespace) -> int:
    config = ScrapeConfig(selectors=_load_selectors(args.selectors))
    articles = asyncio.run(extract_files(args.paths, config))
    json.dump([article.to_dict() for article in articles], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    sys.stdout.flush()
    return 0 if articles else 1


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "scrape":
        exit_code = _run_scrape(args)
    else:
        exit_code = _run_extract(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
