"""
Resource fetcher and page writer.

Uses aiohttp for concurrent asset downloads. Every failure is recorded
on the failure report and never raised to the caller.
"""

import asyncio
import os
from dataclasses import dataclass
from typing import List, Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError

from .errors import CrawlFailure, CrawlError, FailureKind, FailureReport, FetchError, PersistError
from ..utils.constants import DEFAULT_ASSET_TIMEOUT, DEFAULT_CONCURRENCY, DEFAULT_USER_AGENT
from ..utils.log import get_logger
from ..utils.paths import asset_filename, ensure_parent_dir, is_within, page_output_path


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one asset fetch."""

    url: str
    path: Optional[str] = None
    failure: Optional[CrawlFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class ResourceFetcher:
    """
    Downloads assets into a page's folder.

    The file name is the last segment of the asset's URL path; two assets
    with the same basename in one folder overwrite each other.
    """

    def __init__(
        self,
        report: FailureReport,
        timeout: float = DEFAULT_ASSET_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the resource fetcher.

        Args:
            report: Sink that failed fetches are recorded on
            timeout: Request timeout in seconds
            concurrency: Maximum concurrent downloads
            user_agent: User agent string for requests
        """
        self.report = report
        self.timeout = ClientTimeout(total=timeout)
        self.concurrency = concurrency
        self.user_agent = user_agent
        self.logger = get_logger("downloader")

        self._downloaded = 0

        # Semaphore for concurrency control
        self._semaphore = asyncio.Semaphore(concurrency)

    @property
    def downloaded_count(self) -> int:
        """Number of assets written so far."""
        return self._downloaded

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent}
        )

    async def fetch_all(self, urls: List[str], folder: str) -> List[FetchResult]:
        """
        Fetch several assets into one folder concurrently.

        Waits for every fetch to finish or fail. Duplicate URLs are
        fetched once per occurrence.

        Args:
            urls: Asset URLs in dispatch order
            folder: Folder the assets are written into

        Returns:
            One FetchResult per URL, in the same order
        """
        if not urls:
            return []

        async with self._session() as session:
            tasks = [self.fetch(url, folder, session=session) for url in urls]
            return list(await asyncio.gather(*tasks))

    async def fetch(
        self,
        url: str,
        folder: str,
        session: Optional[aiohttp.ClientSession] = None
    ) -> FetchResult:
        """
        Download a single asset.

        Args:
            url: Asset URL to download
            folder: Folder the asset is written into
            session: Shared aiohttp session (a private one is opened if omitted)

        Returns:
            FetchResult with the local path, or the recorded failure
        """
        if session is None:
            async with self._session() as own_session:
                return await self.fetch(url, folder, session=own_session)

        async with self._semaphore:
            try:
                local_path = self._target_path(url, folder)
                content = await self._download(session, url)
                self._write(url, local_path, content)
            except CrawlError as e:
                return FetchResult(url=url, failure=self.report.record_error(e))
            except ClientError as e:
                failure = self.report.record(url, FailureKind.FETCH, f"Client error: {e}")
                return FetchResult(url=url, failure=failure)
            except asyncio.TimeoutError:
                failure = self.report.record(url, FailureKind.FETCH, "Timed out")
                return FetchResult(url=url, failure=failure)
            except Exception as e:
                failure = self.report.record(url, FailureKind.FETCH, str(e) or type(e).__name__)
                return FetchResult(url=url, failure=failure)

        self._downloaded += 1
        self.logger.debug(f"✅ Downloaded: {url} -> {local_path}")
        return FetchResult(url=url, path=local_path)

    def _target_path(self, url: str, folder: str) -> str:
        filename = asset_filename(url)
        if not filename:
            raise PersistError(url, "URL path has no file name")

        local_path = os.path.join(folder, filename)
        if not is_within(local_path, folder):
            raise PersistError(url, f"Refusing to write outside {folder}")
        return local_path

    async def _download(self, session: aiohttp.ClientSession, url: str) -> bytes:
        async with session.get(url, allow_redirects=True) as response:
            if not 200 <= response.status < 300:
                raise FetchError(url, f"HTTP {response.status}")
            return await response.read()

    def _write(self, url: str, local_path: str, content: bytes) -> None:
        try:
            ensure_parent_dir(local_path)
            with open(local_path, 'wb') as f:
                f.write(content)
        except OSError as e:
            raise PersistError(url, f"Cannot write {local_path}: {e}") from e


class PageWriter:
    """Saves rendered page markup under the output root."""

    def __init__(self, output_dir: str):
        """
        Initialize the page writer.

        Args:
            output_dir: Base output directory
        """
        self.output_dir = os.path.abspath(output_dir)

    def path_for(self, url: str) -> str:
        """Get the local path a page is saved to."""
        return page_output_path(url, self.output_dir)

    def save(self, url: str, html: str, local_path: Optional[str] = None) -> str:
        """
        Write a page's markup to ``<output_dir>/<url path>/index.html``.

        Args:
            url: Page URL
            html: Rendered markup
            local_path: Target path (derived from the URL if omitted)

        Returns:
            Local file path

        Raises:
            PersistError: If the file cannot be written
        """
        local_path = local_path or self.path_for(url)
        if not is_within(local_path, self.output_dir):
            raise PersistError(url, f"Refusing to write outside {self.output_dir}")

        try:
            ensure_parent_dir(local_path)
            with open(local_path, 'w', encoding='utf-8') as f:
                f.write(html)
        except OSError as e:
            raise PersistError(url, f"Cannot write {local_path}: {e}") from e

        return local_path
