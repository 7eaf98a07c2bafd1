from __future__ import annotations

import asyncio
import logging

from article_scraper.document import StaticDocument
from article_scraper.listing import UrlCollector, open_listing, page_language

from conftest import LISTING_URL, detail_url, render_listing


def _collect(config, html: str, count: int):
    document = StaticDocument({LISTING_URL: html}, url=LISTING_URL)
    return asyncio.run(UrlCollector(config).collect(document, count))


def test_collects_requested_count_in_document_order(config):
    hrefs = [detail_url(f"a{i}") for i in range(1, 8)]

    urls = _collect(config, render_listing(hrefs), count=5)

    assert urls == hrefs[:5]


def test_duplicates_and_foreign_domains_are_skipped(config):
    hrefs = [
        detail_url("a1"),
        detail_url("a1"),
        "https://otro-diario.com/opinion/x.html",
        "",
        "/opinion/2024-05-01/relativo.html",
        detail_url("a2"),
    ]

    urls = _collect(config, render_listing(hrefs), count=10)

    assert urls == [
        detail_url("a1"),
        "https://elpais.com/opinion/2024-05-01/relativo.html",
        detail_url("a2"),
    ]
    assert len(set(urls)) == len(urls)
    assert all(config.domain_marker in url for url in urls)


def test_fallback_locators_used_when_primary_times_out(config, caplog):
    html = (
        "<html><body><div>"
        f'<h3><a href="{detail_url("f1")}">Uno</a></h3>'
        f'<h3><a href="{detail_url("f2")}#comentarios">Dos</a></h3>'
        f'<h2><a href="{detail_url("f3")}">Tres</a></h2>'
        "</div></body></html>"
    )

    with caplog.at_level(logging.WARNING, logger="article_scraper"):
        urls = _collect(config, html, count=5)

    assert urls == [detail_url("f1"), detail_url("f3")]
    assert "fallback" in caplog.text


def test_empty_when_both_locator_sets_fail(config):
    assert _collect(config, "<html><body><p>Nada</p></body></html>", count=5) == []


def test_zero_count_collects_nothing(config):
    assert _collect(config, render_listing([detail_url("a1")]), count=0) == []


def test_open_listing_and_language(config):
    document = StaticDocument({LISTING_URL: render_listing([], lang="es-ES")})

    asyncio.run(open_listing(document, config))

    assert document.history == [LISTING_URL]
    assert asyncio.run(page_language(document)) == "es-ES"
