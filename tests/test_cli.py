import json
from unittest.mock import MagicMock

import pytest

from article_scraper import cli
from article_scraper.cli import _run_extract, parse_args
from article_scraper.content import PAYWALL_PREVIEW_MARKER
from article_scraper.crawler import WorkerResult
from article_scraper.models import Article, BatchResult

from conftest import render_article


def test_scrape_arguments():
    args = parse_args(["scrape", "--count", "3", "--browser", "firefox", "--browser", "webkit"])

    assert args.command == "scrape"
    assert args.count == 3
    assert args.browser == ["firefox", "webkit"]
    assert args.domain == "elpais.com"


def test_unknown_browser_is_rejected():
    with pytest.raises(SystemExit):
        parse_args(["scrape", "--browser", "netscape"])


def test_extract_prints_json_for_saved_pages(tmp_path, capsys):
    description = "Vista previa de un artículo de pago en El País"
    page = tmp_path / "nota.html"
    page.write_text(
        render_article(
            title="Titular guardado",
            og_description=description,
            og_image="https://imagenes.elpais.com/og.jpg",
        ),
        encoding="utf-8",
    )

    assert _run_extract(parse_args(["extract", str(page)])) == 0

    articles = json.loads(capsys.readouterr().out)
    assert articles == [
        {
            "index": 1,
            "source_url": page.resolve().as_uri(),
            "title_original": "Titular guardado",
            "title_translated": None,
            "body_text": PAYWALL_PREVIEW_MARKER + description,
            "cover_image_url": "https://imagenes.elpais.com/og.jpg",
            "local_image_path": None,
        }
    ]


def test_translator_is_closed_when_finalizing_fails(monkeypatch, tmp_path):
    batch = BatchResult(
        urls=["https://elpais.com/opinion/a1.html"],
        articles=[Article(index=1, source_url="https://elpais.com/opinion/a1.html")],
    )

    async def fake_workers(browsers, config):
        return [WorkerResult("chromium", batch)]

    def failing_finalize(*args, **kwargs):
        raise OSError("disk full")

    translator = MagicMock()
    monkeypatch.setattr(cli, "run_workers", fake_workers)
    monkeypatch.setattr(cli, "finalize_batch", failing_finalize)
    monkeypatch.setattr(cli, "Translator", MagicMock(return_value=translator))

    with pytest.raises(OSError):
        cli._run_scrape(parse_args(["scrape", "--output", str(tmp_path)]))

    translator.close.assert_called_once_with()
