"""
Crawler module for the site mirror.

Contains components for crawling, rendering, asset extraction, and downloading.
"""

from .crawler import SiteCrawler, CrawlResult, discover_links
from .renderer import PageRenderer, RenderedPage
from .extractor import AssetExtractor, AssetReference
from .downloader import ResourceFetcher, PageWriter, FetchResult
from .errors import FailureKind, FailureReport, CrawlFailure, CrawlError, RenderError, PersistError, FetchError
from .settle import SettleStrategy, FixedDelay, StableContent

__all__ = [
    "SiteCrawler",
    "CrawlResult",
    "discover_links",
    "PageRenderer",
    "RenderedPage",
    "AssetExtractor",
    "AssetReference",
    "ResourceFetcher",
    "PageWriter",
    "FetchResult",
    "FailureKind",
    "FailureReport",
    "CrawlFailure",
    "CrawlError",
    "RenderError",
    "PersistError",
    "FetchError",
    "SettleStrategy",
    "FixedDelay",
    "StableContent",
]
