"""Best-effort news article scraping for inconsistent, paywalled sites."""

from .config import ScrapeConfig, SelectorTable
from .content import ContentExtractor, TitleExtractor
from .crawler import EmptyBatchError, ScrapeOrchestrator
from .document import PlaywrightDocument, StaticDocument, WaitTimeout
from .images import ImageResolver, is_valid_image_url
from .listing import UrlCollector
from .models import Article, BatchResult, ExtractionResult, Strategy

__all__ = [
    "Article",
    "BatchResult",
    "ContentExtractor",
    "EmptyBatchError",
    "ExtractionResult",
    "ImageResolver",
    "PlaywrightDocument",
    "ScrapeConfig",
    "ScrapeOrchestrator",
    "SelectorTable",
    "StaticDocument",
    "Strategy",
    "TitleExtractor",
    "UrlCollector",
    "WaitTimeout",
    "is_valid_image_url",
]
