import asyncio
from typing import Dict, List, Optional, Set, Tuple

import pytest

from site_mirror.config import CrawlScope, RunConfig
from site_mirror.crawler.downloader import FetchResult, ResourceFetcher
from site_mirror.crawler.errors import FailureKind, FailureReport, RenderError


BASE_URL = "https://example.com"


class FakePage:
    """Stand-in for RenderedPage with scripted status and markup."""

    def __init__(self, url: str, status: int, html: str):
        self.url = url
        self.status = status
        self.html = html
        self.closed = False
        self.content_reads = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def content(self) -> str:
        self.content_reads += 1
        return self.html

    async def close(self) -> None:
        self.closed = True


class StubRenderer:
    """
    Renderer returning scripted pages.

    Unknown URLs answer 404. URLs in ``raises`` fail navigation and URLs
    in ``hangs`` never finish rendering.
    """

    def __init__(
        self,
        pages: Dict[str, Tuple[int, str]],
        raises: Optional[Set[str]] = None,
        hangs: Optional[Set[str]] = None
    ):
        self.pages = pages
        self.raises = raises or set()
        self.hangs = hangs or set()
        self.calls: List[str] = []
        self.opened: List[FakePage] = []

    async def render(self, url: str) -> FakePage:
        self.calls.append(url)
        if url in self.raises:
            raise RenderError(url, "Navigation failed: net::ERR_NAME_NOT_RESOLVED")
        if url in self.hangs:
            await asyncio.sleep(3600)
        status, html = self.pages.get(url, (404, "<html><body>Not found</body></html>"))
        page = FakePage(url, status, html)
        self.opened.append(page)
        return page


class RecordingFetcher(ResourceFetcher):
    """Fetcher that records requested assets instead of using the network."""

    def __init__(self, report: FailureReport, fail: Optional[Set[str]] = None, delays=None):
        super().__init__(report, concurrency=50)
        self.fail = fail or set()
        self.delays = delays or {}
        self.requested: List[Tuple[str, str]] = []
        self.finished: List[str] = []

    async def fetch(self, url, folder, session=None) -> FetchResult:
        self.requested.append((url, folder))
        await asyncio.sleep(self.delays.get(url, 0))
        self.finished.append(url)
        if url in self.fail:
            failure = self.report.record(url, FailureKind.FETCH, "HTTP 500")
            return FetchResult(url=url, failure=failure)
        self._downloaded += 1
        return FetchResult(url=url, path=f"{folder}/{url.rsplit('/', 1)[-1]}")


def page(body: str) -> str:
    return f"<html><head><title>t</title></head><body>{body}</body></html>"


@pytest.fixture()
def report() -> FailureReport:
    return FailureReport()


@pytest.fixture()
def run_config(tmp_path) -> RunConfig:
    """Config pointing at example.com with no settle pause."""
    return RunConfig(
        base_url=BASE_URL,
        output_dir=str(tmp_path / "site"),
        scope=CrawlScope(path_prefix="/en", base_url=BASE_URL),
        seed_path="/en",
        settle_delay=0,
        render_timeout=2000,
    )


@pytest.fixture()
def fetcher(report) -> RecordingFetcher:
    return RecordingFetcher(report)
