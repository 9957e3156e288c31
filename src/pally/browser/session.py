"""Scoped ownership of the Playwright driver, browser and page for one run.

CRITICAL: A session must be closed on every exit path. Use it as an async
context manager so that success, errors and cancellation all release the
browser.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from playwright.async_api import (
    Browser,
    Page,
    Playwright,
    PlaywrightContextManager,
    async_playwright,
)

logger = logging.getLogger(__name__)


class BrowserSession:
    """Launch Chromium, open one page and close both exactly once.

    Launch options are passed through to ``chromium.launch``. Keys that
    Playwright only accepts when creating a page (for example
    ``ignore_https_errors``) are routed to ``browser.new_page`` instead.

    Example:
        async with BrowserSession({"headless": True}) as session:
            await session.page.goto("https://example.com")
        # Browser closed
    """

    PAGE_OPTION_KEYS = (
        "bypass_csp",
        "extra_http_headers",
        "ignore_https_errors",
        "java_script_enabled",
        "locale",
        "timezone_id",
    )

    def __init__(self, launch_config: Optional[Mapping[str, Any]] = None, log: Any = None):
        """Initialize the session.

        Args:
            launch_config: Browser launch options
            log: Object with debug and error methods, defaults to this module's logger
        """
        self.launch_config = _thaw(launch_config or {})
        self.log = log or logger
        self.playwright: Optional[Playwright] = None
        self._driver: Optional[PlaywrightContextManager] = None
        self.browser: Optional[Browser] = None
        self.page: Optional[Page] = None
        self._closed = False

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.open()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def split_options(self) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Separate launch options from page options."""
        launch_options: Dict[str, Any] = {}
        page_options: Dict[str, Any] = {}
        for key, value in self.launch_config.items():
            if key in self.PAGE_OPTION_KEYS:
                page_options[key] = value
            else:
                launch_options[key] = value
        return launch_options, page_options

    async def open(self) -> Page:
        """Start Playwright, launch the browser and create the page.

        Returns:
            The page under test

        Raises:
            playwright.async_api.Error: If the browser cannot be launched
        """
        launch_options, page_options = self.split_options()

        self.log.debug("Launching Headless Chrome")
        self._driver = async_playwright()
        self.playwright = await self._driver.start()
        self.browser = await self.playwright.chromium.launch(**launch_options)
        self.page = await self.browser.new_page(**page_options)
        return self.page

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the browser and stop Playwright.

        Safe to call more than once. Failures are logged, never raised, so
        they cannot hide the error that ended the run.
        """
        if self._closed:
            return
        self._closed = True

        try:
            if self.browser is not None:
                try:
                    await self.browser.close()
                    self.log.debug("Closed browser")
                except Exception as e:
                    self.log.error(f"Error closing browser: {e}")
        finally:
            await self._stop_driver()

    async def _stop_driver(self) -> None:
        # A driver cancelled mid-start has no Playwright object yet
        try:
            if self.playwright is not None:
                await self.playwright.stop()
            elif self._driver is not None:
                await self._driver.__aexit__(None, None, None)
        except Exception as e:
            self.log.error(f"Error stopping Playwright: {e}")


def _thaw(value: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy read-only option mappings into the plain dicts Playwright expects."""
    return {
        key: _thaw(item) if isinstance(item, Mapping) else item
        for key, item in value.items()
    }
