"""One-shot request interception for the page under test.

The first request the page makes is the request for the document itself.
Only that request gets the configured method, headers and body; everything
the page fetches afterwards goes out untouched.
"""

import logging
from enum import Enum
from typing import Any, Dict, Union

from playwright.async_api import BrowserContext, Page, Request, Route

from pally.models.options import Configuration

logger = logging.getLogger(__name__)


class InterceptionState(str, Enum):
    """Interceptor states. The only transition is UNHANDLED -> HANDLED."""

    UNHANDLED = "unhandled"
    HANDLED = "handled"


class RequestInterceptor:
    """Rewrite the first intercepted request of a run.

    Example:
        interceptor = RequestInterceptor(options)
        await interceptor.install(page)
        await page.goto(url)
        assert interceptor.state is InterceptionState.HANDLED
    """

    def __init__(self, options: Configuration):
        """Initialize the interceptor.

        Args:
            options: Resolved run options
        """
        self.options = options
        self.state = InterceptionState.UNHANDLED

    @property
    def handled(self) -> bool:
        return self.state is InterceptionState.HANDLED

    def build_overrides(self) -> Dict[str, Any]:
        """Compute the method, headers and body for the document request."""
        log = self.options.log
        overrides: Dict[str, Any] = {}

        log.debug("Setting request method")
        overrides["method"] = self.options.method

        log.debug("Setting request headers")
        headers = {"user-agent": self.options.user_agent}
        for key, value in self.options.headers.items():
            headers[key.lower()] = value
        overrides["headers"] = headers

        if self.options.post_data:
            log.debug("Setting request POST data")
            overrides["post_data"] = self.options.post_data

        return overrides

    def claim(self) -> Dict[str, Any]:
        """Return overrides for the next request and advance the state.

        Only the first call returns overrides; later calls return an empty
        mapping. The state changes before the caller awaits anything, so
        concurrently routed requests cannot both be treated as first.
        """
        if self.state is InterceptionState.HANDLED:
            return {}
        overrides = self.build_overrides()
        self.state = InterceptionState.HANDLED
        return overrides

    async def handle(self, route: Route, request: Request) -> None:
        """Playwright route handler."""
        overrides = self.claim()
        if not overrides:
            await route.continue_()
            return

        # Playwright replaces the whole header set, keep the browser's own
        headers = dict(request.headers)
        headers.update(overrides["headers"])
        overrides["headers"] = headers
        logger.debug(f"Overriding {request.method} {request.url}")
        await route.continue_(**overrides)

    async def install(self, context_or_page: Union[BrowserContext, Page]) -> None:
        """Route every request of the page through this interceptor."""
        await context_or_page.route("**/*", self.handle)
