"""
Browser Session Manager

One browser per submission attempt: either a remote Chromium reached over
CDP (browserless) or a locally launched headless Chromium. Sessions are never
pooled or shared between requests.

Usage:
    async with BrowserSessionManager(config) as session:
        await session.page.goto(config.tcvs_url)
    # page, context, browser and driver are closed here, even on error
"""

from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from config.constants import BROWSER_ARGS, USER_AGENT, VIEWPORT
from services.tcvs.config import TcvsConfig
from utils.exceptions import BrowserConnectionError
from utils.logging import get_logger

logger = get_logger(__name__)


class BrowserSessionManager:
    """Owns the Playwright handles for a single attempt."""

    def __init__(self, config: TcvsConfig):
        self.config = config
        self.page: Optional[Page] = None
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @property
    def endpoint(self) -> str:
        """Remote endpoint with credentials, or 'local'."""
        if self.config.uses_remote_browser:
            return f"{self.config.browserless_endpoint}?token={self.config.browserless_api_key}"
        return "local"

    async def open(self) -> Page:
        """
        Acquire browser, context and page.

        Raises:
            BrowserConnectionError: if the browser cannot be reached or launched
        """
        try:
            self._playwright = await async_playwright().start()

            if self.config.uses_remote_browser:
                logger.info(f"🌐 Connecting to remote browser at {self.config.browserless_endpoint}")
                self._browser = await self._playwright.chromium.connect_over_cdp(
                    self.endpoint,
                    timeout=self.config.navigation_timeout * 1000,
                )
            else:
                logger.info("🌐 Launching local Chromium")
                self._browser = await self._playwright.chromium.launch(
                    headless=self.config.headless,
                    args=BROWSER_ARGS,
                )

            self._context = await self._browser.new_context(
                viewport=VIEWPORT,
                user_agent=USER_AGENT,
                locale="en-US",
            )
            self.page = await self._context.new_page()
        except Exception as e:
            await self.close()
            raise BrowserConnectionError(
                f"Browser unavailable: {e}",
                endpoint=self.config.browserless_endpoint if self.config.uses_remote_browser else "local",
            ) from e

        return self.page

    async def close(self) -> None:
        """Release every handle that was acquired. Safe to call repeatedly."""
        for name, handle, closer in (
            ("page", self.page, "close"),
            ("context", self._context, "close"),
            ("browser", self._browser, "close"),
            ("playwright", self._playwright, "stop"),
        ):
            if handle is None:
                continue
            try:
                await getattr(handle, closer)()
            except Exception as e:
                logger.debug(f"Ignoring error while closing {name}: {e}")

        self.page = None
        self._context = None
        self._browser = None
        self._playwright = None
        logger.debug("Browser session released")

    async def __aenter__(self) -> "BrowserSessionManager":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
