"""
Settle strategies run between navigation and markup capture.

Pages often keep rendering after the navigation event fires. A settle
strategy decides how long to wait before the final markup is read.
Neither strategy guarantees the page has finished.
"""

import asyncio
import time

from ..utils.log import get_logger


class SettleStrategy:
    """Base class: waits on a rendered page before its markup is captured."""

    async def wait(self, page) -> None:
        raise NotImplementedError


class FixedDelay(SettleStrategy):
    """Pause for a fixed number of seconds."""

    def __init__(self, seconds: float):
        if seconds < 0:
            raise ValueError(f"Delay cannot be negative: {seconds}")
        self.seconds = seconds

    async def wait(self, page) -> None:
        if self.seconds:
            await asyncio.sleep(self.seconds)

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds})"


class StableContent(SettleStrategy):
    """
    Poll the page markup until its length stops changing.

    Returns once the length has been unchanged for ``stable_ticks``
    consecutive polls, or after ``max_wait`` seconds.
    """

    def __init__(self, interval: float = 0.5, max_wait: float = 6.0, stable_ticks: int = 2):
        """
        Initialize the strategy.

        Args:
            interval: Seconds between polls
            max_wait: Upper bound on the total wait in seconds
            stable_ticks: Unchanged polls required before returning
        """
        if interval <= 0 or max_wait < 0 or stable_ticks < 1:
            raise ValueError("interval must be positive, max_wait non-negative, stable_ticks >= 1")
        self.interval = interval
        self.max_wait = max_wait
        self.stable_ticks = stable_ticks
        self.logger = get_logger("renderer")

    async def wait(self, page) -> None:
        deadline = time.monotonic() + self.max_wait
        previous = len(await page.content())
        stable = 0

        while time.monotonic() < deadline:
            await asyncio.sleep(self.interval)
            current = len(await page.content())
            if current == previous:
                stable += 1
                if stable >= self.stable_ticks:
                    return
            else:
                stable = 0
                previous = current

        self.logger.debug(f"Content still changing after {self.max_wait}s: {page.url}")

    def __repr__(self) -> str:
        return f"StableContent(interval={self.interval}, max_wait={self.max_wait})"
