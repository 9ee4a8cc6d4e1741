"""
Main site crawler module.

Walks a site section depth-first from a seed page, saving each rendered
page and downloading the assets it references.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .downloader import PageWriter, ResourceFetcher
from .errors import CrawlError, CrawlFailure, FailureKind, FailureReport, RenderError
from .extractor import AssetExtractor, parse_html
from .settle import FixedDelay, SettleStrategy
from ..config import CrawlScope, RunConfig
from ..utils.log import get_logger, print_info, print_success
from ..utils.paths import ensure_dir, normalize_url, resolve_url


@dataclass
class CrawlResult:
    """Results of the crawling operation."""

    pages_visited: List[str] = field(default_factory=list)
    pages_saved: int = 0
    assets_downloaded: int = 0
    failures: List[CrawlFailure] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def pages_crawled(self) -> int:
        return len(self.pages_visited)


@dataclass(frozen=True)
class PageTask:
    """A committed page visit."""

    url: str
    output_path: str
    depth: int = 0


def discover_links(html: str, scope: CrawlScope, base_url: str) -> List[str]:
    """
    Find the in-scope anchors of a page.

    Links resolve against the site's base URL, not the page they were
    found on.

    Args:
        html: Rendered markup
        scope: Rule deciding which hrefs are followed
        base_url: Site base URL

    Returns:
        Absolute link URLs in document order
    """
    soup = parse_html(html)
    links = []
    for anchor in soup.find_all('a', href=True):
        href = anchor.get('href', '')
        if scope.allows(href):
            links.append(resolve_url(href, base_url))
    return links


class SiteCrawler:
    """
    Depth-first crawler over one site section.

    Owns the visited set for a single run. Pages are handled one at a
    time; only the assets of the current page are fetched concurrently.
    """

    def __init__(
        self,
        config: RunConfig,
        renderer,
        fetcher: Optional[ResourceFetcher] = None,
        settle: Optional[SettleStrategy] = None,
        report: Optional[FailureReport] = None
    ):
        """
        Initialize the crawler.

        Args:
            config: Run configuration
            renderer: Started page renderer (see PageRenderer.render)
            fetcher: Asset fetcher, built from config if omitted
            settle: Wait applied after navigation, FixedDelay(config.settle_delay) if omitted
            report: Failure sink, a fresh one if omitted
        """
        self.config = config
        self.scope = config.scope
        self.renderer = renderer
        self.report = report if report is not None else FailureReport()
        self.fetcher = fetcher if fetcher is not None else ResourceFetcher(
            self.report,
            timeout=config.asset_timeout,
            concurrency=config.concurrency,
            user_agent=config.user_agent
        )
        self.settle = settle if settle is not None else FixedDelay(config.settle_delay)
        self.writer = PageWriter(config.output_dir)
        self.extractor = AssetExtractor(self.fetcher, self.writer.output_dir)
        self.logger = get_logger("crawler")

        # Tracking
        self._visited: Set[str] = set()
        self._visit_order: List[str] = []
        self._pages_saved = 0

    @property
    def visited(self) -> Set[str]:
        """URLs committed to so far, whatever their outcome."""
        return set(self._visited)

    async def crawl(self) -> CrawlResult:
        """
        Crawl from the configured seed URL until no in-scope link is left.

        Returns:
            CrawlResult with statistics and recorded failures
        """
        start_time = time.time()

        print_info(f"Starting crawl of {self.config.seed_url}")
        print_info(f"Output directory: {self.writer.output_dir}")
        print_info(f"Scope: {self.scope.path_prefix}, settle: {self.settle!r}")

        ensure_dir(self.writer.output_dir)
        await self.visit(self.config.seed_url)

        result = CrawlResult(
            pages_visited=list(self._visit_order),
            pages_saved=self._pages_saved,
            assets_downloaded=self.fetcher.downloaded_count,
            failures=self.report.failures,
            duration_seconds=time.time() - start_time
        )

        print_success(
            f"Crawl complete! {result.pages_saved} pages, "
            f"{result.assets_downloaded} assets in {result.duration_seconds:.1f}s"
        )
        return result

    async def visit(self, url: str, depth: int = 0) -> None:
        """
        Visit a page and every in-scope page reachable from it.

        Traversal is depth-first in link order and runs off an explicit
        stack, so a long chain of pages does not grow the call stack. A
        URL already visited in this run is a no-op. Failures are recorded
        on the report and never raised.

        Args:
            url: Absolute page URL
            depth: Link distance from the seed
        """
        pending: List[Tuple[str, int]] = [(url, depth)]

        while pending:
            url, depth = pending.pop()
            url = normalize_url(url)
            if url in self._visited:
                continue

            if self.config.max_depth is not None and depth > self.config.max_depth:
                self.logger.debug(f"Skipping (depth {depth}): {url}")
                continue
            if self.config.max_pages is not None and len(self._visited) >= self.config.max_pages:
                self.logger.debug(f"Skipping (page limit): {url}")
                continue

            # Commit before any await
            self._visited.add(url)
            self._visit_order.append(url)

            task = PageTask(url=url, output_path=self.writer.path_for(url), depth=depth)
            try:
                links = await self._crawl_page(task)
            except CrawlError as e:
                self.report.record_error(e)
                continue
            except Exception as e:
                self.report.record(url, FailureKind.RENDER, f"Unexpected error: {e!r}")
                continue

            # Reversed so the first link on the page is popped first
            pending.extend((link, task.depth + 1) for link in reversed(links))

    async def _crawl_page(self, task: PageTask) -> List[str]:
        """Render, save and extract one page; return its in-scope links."""
        self.logger.info(f"🌐 Visiting: {task.url}")

        html = await self._render(task.url)

        try:
            saved_path = self.writer.save(task.url, html, task.output_path)
            self._pages_saved += 1
            self.logger.info(f"💾 Saved HTML: {saved_path}")
        except CrawlError as e:
            self.report.record_error(e)

        await self._extract_assets(html, task.url)

        return discover_links(html, self.scope, self.config.base_url)

    async def _render(self, url: str) -> str:
        """
        Render a page, let it settle, and read its markup.

        Raises:
            RenderError: On timeout, navigation failure or non-success status
        """
        try:
            page = await asyncio.wait_for(
                self.renderer.render(url),
                timeout=self.config.render_timeout_seconds
            )
        except asyncio.TimeoutError:
            raise RenderError(url, f"Timed out after {self.config.render_timeout}ms")

        try:
            if not page.ok:
                raise RenderError(url, f"Page failed with status: {page.status}")
            await self.settle.wait(page)
            return await page.content()
        finally:
            await page.close()

    async def _extract_assets(self, html: str, url: str) -> None:
        try:
            await self.extractor.extract(html, url)
        except Exception as e:
            self.report.record(url, FailureKind.FETCH, f"Asset extraction failed: {e!r}")
