"""
Page renderer using Playwright for JavaScript rendering.

Handles headless browser rendering to capture dynamically generated content.
"""

import asyncio
from typing import Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)

from .errors import RenderError
from ..utils.constants import DEFAULT_RENDER_TIMEOUT, DEFAULT_USER_AGENT, DEFAULT_WAIT_UNTIL
from ..utils.log import get_logger


class RenderedPage:
    """
    An open browser page after navigation.

    The markup is read with ``content()`` once the caller has let the page
    settle. ``close()`` must be called when done.
    """

    def __init__(self, url: str, status: int, page: Page, context: BrowserContext):
        self.url = url
        self.status = status
        self._page = page
        self._context = context

    @property
    def ok(self) -> bool:
        """True for a 2xx navigation response."""
        return 200 <= self.status < 300

    async def content(self) -> str:
        """Get the current rendered HTML."""
        return await self._page.content()

    async def close(self) -> None:
        """Close the page and its browser context."""
        await self._context.close()


class PageRenderer:
    """
    Renders web pages using Playwright headless browser.

    Captures the final DOM after JavaScript execution.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_RENDER_TIMEOUT,
        wait_until: str = DEFAULT_WAIT_UNTIL,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the page renderer.

        Args:
            timeout: Page load timeout in milliseconds
            wait_until: Event to wait for ('load', 'domcontentloaded', 'networkidle')
            headless: Run browser in headless mode
            user_agent: User agent for the browser context
        """
        self.timeout = timeout
        self.wait_until = wait_until
        self.headless = headless
        self.user_agent = user_agent
        self.logger = get_logger("renderer")

        self._playwright = None
        self._browser: Optional[Browser] = None

    async def start(self) -> None:
        """
        Start the Playwright browser instance.
        """
        self.logger.info("Starting Playwright browser...")
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=[
                '--disable-blink-features=AutomationControlled',
                '--no-sandbox',
                '--disable-setuid-sandbox',
                '--disable-dev-shm-usage',
            ]
        )
        self.logger.info("Browser started successfully")

    async def stop(self) -> None:
        """
        Stop the Playwright browser instance.
        """
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        self.logger.info("Browser stopped")

    async def render(self, url: str) -> RenderedPage:
        """
        Navigate to a page and return it open for markup capture.

        A non-success status is returned, not raised; the caller decides
        what to do with it.

        Args:
            url: URL to render

        Returns:
            RenderedPage holding the response status

        Raises:
            RenderError: On navigation failure, timeout, or no response
        """
        if not self._browser:
            await self.start()

        context = await self._browser.new_context(
            user_agent=self.user_agent,
            viewport={"width": 1920, "height": 1080},
            ignore_https_errors=True,
        )

        try:
            page = await context.new_page()
            page.on("pageerror", lambda error: self.logger.warning(f"📛 Page error on {url}: {error}"))
            page.on("crash", lambda _: self.logger.error(f"💥 Page crashed: {url}"))

            self.logger.debug(f"Rendering: {url}")
            response = await page.goto(
                url,
                wait_until=self.wait_until,
                timeout=self.timeout
            )

            if not response:
                raise RenderError(url, "No response")

            return RenderedPage(url, response.status, page, context)

        except PlaywrightTimeout:
            await context.close()
            raise RenderError(url, f"Timed out after {self.timeout}ms")
        except PlaywrightError as e:
            await context.close()
            raise RenderError(url, f"Navigation failed: {e.message}")
        except (RenderError, asyncio.CancelledError):
            await context.close()
            raise

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
