import time

import pytest

from site_mirror.crawler.settle import FixedDelay, StableContent


class GrowingPage:
    """Page whose markup grows for a number of reads, then stays put."""

    url = "https://example.com/en"

    def __init__(self, growth_reads: int):
        self.growth_reads = growth_reads
        self.reads = 0

    async def content(self) -> str:
        self.reads += 1
        size = min(self.reads, self.growth_reads)
        return "<p>" + "x" * size + "</p>"


@pytest.mark.asyncio
async def test_fixed_delay_sleeps():
    start = time.monotonic()

    await FixedDelay(0.05).wait(GrowingPage(1))

    assert time.monotonic() - start >= 0.04


@pytest.mark.asyncio
async def test_zero_delay_returns_immediately():
    page = GrowingPage(1)

    await FixedDelay(0).wait(page)

    assert page.reads == 0


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        FixedDelay(-0.1)


@pytest.mark.asyncio
async def test_stable_content_waits_for_growth_to_stop():
    page = GrowingPage(growth_reads=4)

    await StableContent(interval=0.01, max_wait=5, stable_ticks=2).wait(page)

    # 4 growing reads, then two unchanged polls
    assert page.reads == 6


@pytest.mark.asyncio
async def test_stable_content_gives_up_after_max_wait():
    page = GrowingPage(growth_reads=10_000)
    start = time.monotonic()

    await StableContent(interval=0.01, max_wait=0.1).wait(page)

    assert time.monotonic() - start < 1.0
    assert page.reads > 1


@pytest.mark.parametrize("kwargs", [
    {"interval": 0},
    {"max_wait": -1},
    {"stable_ticks": 0},
])
def test_stable_content_rejects_bad_settings(kwargs):
    with pytest.raises(ValueError):
        StableContent(**kwargs)
