"""
Asset extractor for parsing rendered markup and fetching page assets.

Uses BeautifulSoup for HTML parsing to find all linked resources.
"""

from dataclasses import dataclass
from typing import List, Tuple

from bs4 import BeautifulSoup

from .downloader import FetchResult, ResourceFetcher
from .errors import FailureKind
from ..utils.log import get_logger
from ..utils.paths import is_fetchable, is_within, page_folder, resolve_url


def parse_html(html: str) -> BeautifulSoup:
    """
    Parse markup into a queryable tree.

    Args:
        html: HTML content to parse

    Returns:
        BeautifulSoup document
    """
    try:
        return BeautifulSoup(html, 'lxml')
    except Exception:
        # Fallback to html.parser if lxml fails
        return BeautifulSoup(html, 'html.parser')


@dataclass(frozen=True)
class AssetReference:
    """A resolved asset URL and the folder it is written into."""

    url: str
    folder: str


class AssetExtractor:
    """
    Finds the stylesheets, scripts, images and media a page references
    and downloads them next to the page.
    """

    # Resource-bearing elements, scanned in this order. A <source> inside
    # <video> matches twice and is fetched twice.
    SELECTORS: Tuple[str, ...] = (
        'link[href]',
        'script[src]',
        'img[src]',
        'video source[src]',
        'source[src]',
    )

    def __init__(self, fetcher: ResourceFetcher, output_dir: str):
        """
        Initialize the asset extractor.

        Args:
            fetcher: Fetcher that downloads each asset
            output_dir: Base output directory
        """
        self.fetcher = fetcher
        self.output_dir = output_dir
        self.logger = get_logger("extractor")

    def find_assets(self, html: str, page_url: str) -> List[AssetReference]:
        """
        Resolve every asset reference in a page.

        Relative references resolve against the page's own URL.

        Args:
            html: Rendered markup
            page_url: URL of the page

        Returns:
            Asset references in selector order, duplicates kept
        """
        soup = parse_html(html)
        folder = page_folder(page_url, self.output_dir)
        assets: List[AssetReference] = []

        for selector in self.SELECTORS:
            for element in soup.select(selector):
                value = element.get('src') or element.get('href')
                if not value or not is_fetchable(value):
                    continue
                assets.append(AssetReference(url=resolve_url(value, page_url), folder=folder))

        return assets

    async def extract(self, html: str, page_url: str) -> List[FetchResult]:
        """
        Download every asset a page references.

        All downloads are dispatched together and awaited as a batch; the
        fetcher caps how many are in flight at once (``concurrency``). A
        failed download is recorded by the fetcher and does not stop the
        others. A page whose folder falls outside the output directory has
        each of its assets recorded as a persist failure and nothing is
        fetched.

        Args:
            html: Rendered markup
            page_url: URL of the page

        Returns:
            One FetchResult per asset reference
        """
        assets = self.find_assets(html, page_url)
        if not assets:
            return []

        self.logger.debug(f"Fetching {len(assets)} assets for {page_url}")
        folder = assets[0].folder
        if not is_within(folder, self.output_dir):
            message = f"Refusing to write outside {self.output_dir}"
            return [
                FetchResult(
                    url=a.url,
                    failure=self.fetcher.report.record(a.url, FailureKind.PERSIST, message)
                )
                for a in assets
            ]

        results = await self.fetcher.fetch_all([a.url for a in assets], folder)

        failed = sum(1 for r in results if not r.ok)
        self.logger.info(
            f"Assets for {page_url}: {len(results) - failed} saved, {failed} failed"
        )
        return results
