from __future__ import annotations

import json
from typing import Dict, Iterable, Optional, Sequence

import pytest

from article_scraper.config import ScrapeConfig

LISTING_URL = "https://elpais.com/opinion/"


def detail_url(slug: str) -> str:
    return f"https://elpais.com/opinion/2024-05-01/{slug}.html"


def render_listing(hrefs: Iterable[str], lang: str = "es") -> str:
    items = "\n".join(
        f'<article><h2><a href="{href}">Titular {i}</a></h2></article>'
        for i, href in enumerate(hrefs, start=1)
    )
    return f'<html lang="{lang}"><body><section>{items}</section></body></html>'


def render_article(
    title: Optional[str] = "Un titular de opinión",
    doc_title: Optional[str] = None,
    body: Optional[str] = None,
    paragraphs: Sequence[str] = (),
    og_description: Optional[str] = None,
    meta_description: Optional[str] = None,
    json_ld: Optional[dict] = None,
    images: Sequence[Dict[str, str]] = (),
    og_image: Optional[str] = None,
    twitter_image: Optional[str] = None,
) -> str:
    head = []
    if doc_title is not None:
        head.append(f"<title>{doc_title}</title>")
    if og_description is not None:
        head.append(f'<meta property="og:description" content="{og_description}">')
    if meta_description is not None:
        head.append(f'<meta name="description" content="{meta_description}">')
    if og_image is not None:
        head.append(f'<meta property="og:image" content="{og_image}">')
    if twitter_image is not None:
        head.append(f'<meta name="twitter:image" content="{twitter_image}">')
    if json_ld is not None:
        head.append(
            f'<script type="application/ld+json">{json.dumps(json_ld, ensure_ascii=False)}</script>'
        )

    parts = []
    if title is not None:
        parts.append(f'<h1 class="article-title">{title}</h1>')
    for attrs in images:
        rendered = " ".join(f'{key}="{value}"' for key, value in attrs.items())
        parts.append(f"<figure><img {rendered}></figure>")
    if body is not None:
        parts.append(f'<div class="article-body">{body}</div>')
    parts.extend(f"<p>{text}</p>" for text in paragraphs)
    return (
        f'<html lang="es"><head>{"".join(head)}</head>'
        f'<body><article>{"".join(parts)}</article></body></html>'
    )


@pytest.fixture
def config() -> ScrapeConfig:
    return ScrapeConfig(explicit_timeout=0.1, page_load_timeout=0.1)
