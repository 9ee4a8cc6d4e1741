"""
Failure taxonomy and reporting for the crawl.

Every failure is local to the operation that produced it: it is recorded
here and logged, and the crawl carries on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from ..utils.log import get_logger


class FailureKind(Enum):
    """Category of a non-fatal crawl failure."""

    RENDER = "render_error"
    PERSIST = "persist_error"
    FETCH = "fetch_error"


class CrawlError(Exception):
    """Base class for failures tied to a single URL."""

    kind = FailureKind.RENDER

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url
        self.message = message


class RenderError(CrawlError):
    """Page navigation failed, timed out, or returned a non-success status."""

    kind = FailureKind.RENDER


class PersistError(CrawlError):
    """A page or asset file could not be written."""

    kind = FailureKind.PERSIST


class FetchError(CrawlError):
    """An asset could not be retrieved."""

    kind = FailureKind.FETCH


@dataclass(frozen=True)
class CrawlFailure:
    """A recorded failure for one URL."""

    url: str
    kind: FailureKind
    message: str


class FailureReport:
    """
    Sink for non-fatal failures.

    Each recorded failure is logged once with its URL and kept in
    arrival order for the run summary.
    """

    def __init__(self):
        self.logger = get_logger("crawler")
        self._failures: List[CrawlFailure] = []

    def record(self, url: str, kind: FailureKind, message: str) -> CrawlFailure:
        """
        Record and log a failure.

        Args:
            url: URL the failure belongs to
            kind: Failure category
            message: Human readable reason

        Returns:
            The stored CrawlFailure
        """
        failure = CrawlFailure(url=url, kind=kind, message=message)
        self._failures.append(failure)
        self.logger.warning(f"❌ {kind.value} for {url}: {message}")
        return failure

    def record_error(self, error: CrawlError) -> CrawlFailure:
        """Record a failure from a raised CrawlError."""
        return self.record(error.url, error.kind, error.message)

    @property
    def failures(self) -> List[CrawlFailure]:
        """Get all recorded failures."""
        return list(self._failures)

    def by_kind(self, kind: FailureKind) -> List[CrawlFailure]:
        """Get recorded failures of one category."""
        return [f for f in self._failures if f.kind is kind]

    def __len__(self) -> int:
        return len(self._failures)
