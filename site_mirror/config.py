"""
Run configuration for the site mirror.

Holds the immutable settings of one crawl run and the rule deciding which
discovered links are followed.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .utils.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_SCOPE_PREFIX,
    DEFAULT_SEED_PATH,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SETTLE_DELAY,
    DEFAULT_RENDER_TIMEOUT,
    DEFAULT_WAIT_UNTIL,
    DEFAULT_USER_AGENT,
    DEFAULT_ASSET_TIMEOUT,
    DEFAULT_CONCURRENCY,
)
from .utils.paths import get_domain, resolve_url


WAIT_CONDITIONS = ('load', 'domcontentloaded', 'networkidle', 'commit')


@dataclass(frozen=True)
class CrawlScope:
    """
    Rule for which discovered anchors are followed.

    An href is in scope when it carries no ``#`` fragment and, resolved
    against the site's base URL, it stays on the site's host and its path
    starts with ``path_prefix``.
    """

    path_prefix: str = DEFAULT_SCOPE_PREFIX
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        if not self.path_prefix.startswith('/'):
            raise ValueError(f"Scope prefix must start with '/': {self.path_prefix!r}")

    def allows(self, href: str) -> bool:
        """
        Check whether an anchor href is eligible to be followed.

        Args:
            href: Raw href attribute value

        Returns:
            True if the link should be followed
        """
        href = href.strip()
        if not href or '#' in href:
            return False

        parsed = urlparse(resolve_url(href, self.base_url))
        if parsed.scheme not in ('http', 'https'):
            return False
        if parsed.netloc.lower() != get_domain(self.base_url):
            return False

        return parsed.path.startswith(self.path_prefix)


@dataclass(frozen=True)
class RunConfig:
    """Settings for one crawl run. Immutable once constructed."""

    base_url: str = DEFAULT_BASE_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    scope: Optional[CrawlScope] = None
    seed_path: str = DEFAULT_SEED_PATH
    settle_delay: float = DEFAULT_SETTLE_DELAY
    render_timeout: int = DEFAULT_RENDER_TIMEOUT
    wait_until: str = DEFAULT_WAIT_UNTIL
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    asset_timeout: float = DEFAULT_ASSET_TIMEOUT
    concurrency: int = DEFAULT_CONCURRENCY
    max_pages: Optional[int] = None
    max_depth: Optional[int] = None

    def __post_init__(self):
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValueError(f"Invalid base URL: {self.base_url}")

        # Scope follows the base URL unless given explicitly
        if self.scope is None:
            object.__setattr__(self, 'scope', CrawlScope(base_url=self.base_url))

        if self.settle_delay < 0:
            raise ValueError(f"Settle delay cannot be negative: {self.settle_delay}")
        if self.render_timeout <= 0:
            raise ValueError(f"Render timeout must be positive: {self.render_timeout}")
        if self.asset_timeout <= 0:
            raise ValueError(f"Asset timeout must be positive: {self.asset_timeout}")
        if self.concurrency < 1:
            raise ValueError(f"Concurrency must be at least 1: {self.concurrency}")
        if self.wait_until not in WAIT_CONDITIONS:
            raise ValueError(f"Unknown wait condition: {self.wait_until}")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1: {self.max_pages}")
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth cannot be negative: {self.max_depth}")

    @property
    def seed_url(self) -> str:
        """URL the crawl starts from."""
        return self.base_url.rstrip('/') + self.seed_path

    @property
    def render_timeout_seconds(self) -> float:
        """Render timeout converted for asyncio."""
        return self.render_timeout / 1000
