"""The pally test pipeline.

``pally()`` resolves options, launches a browser, loads the page, replays
actions, runs the accessibility tests and returns the results. The whole
pipeline runs under one timeout, and the browser is closed on every exit
path before the caller sees a result or an error.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Union

from playwright.async_api import ConsoleMessage, Page

from pally.actions import run_action
from pally.browser.injector import TestInjector
from pally.browser.interceptor import RequestInterceptor
from pally.browser.session import BrowserSession
from pally.config import PallySettings
from pally.errors import ConfigurationError, PallyTimeoutError
from pally.models.options import Configuration
from pally.options import DEFAULT_OPTIONS, resolve_options, verify_options
from pally.url import sanitize_url

logger = logging.getLogger(__name__)

Options = Union[Mapping[str, Any], Configuration]


def _console_forwarder(log: Any):
    def forward(message: ConsoleMessage) -> None:
        log.debug(f"Browser Console: {message.text}")

    return forward


async def _capture_screen(page: Page, options: Configuration) -> None:
    log = options.log
    log.info(f'Capturing screen, saving to "{options.screen_capture}"')
    try:
        await page.screenshot(path=options.screen_capture, full_page=True)
    except Exception as e:
        log.error(f"Error capturing screen: {e}")


async def run_pipeline(
    url: str,
    options: Configuration,
    settings: Optional[PallySettings] = None,
) -> Dict[str, Any]:
    """Run every browser stage for an already sanitized URL.

    The browser session is scoped to this coroutine, so it is closed when
    the pipeline returns, raises or is cancelled by the timeout.

    Args:
        url: Sanitized URL to test
        options: Resolved and verified options
        settings: Script locations, read from the environment by default

    Returns:
        Results object produced by the in-page runner
    """
    log = options.log
    log.info(f"Running Pally on URL {url}")

    async with BrowserSession(options.chrome_launch_config, log=log) as session:
        browser, page = session.browser, session.page

        # Only the document request gets the custom method, headers and body
        interceptor = RequestInterceptor(options)
        await interceptor.install(page)

        page.on("console", _console_forwarder(log))

        if options.auth_cookie:
            log.debug("Setting authentication cookie")
            await page.context.add_cookies([dict(options.auth_cookie)])

        log.debug("Opening URL in Headless Chrome")
        await page.goto(url, wait_until="networkidle", timeout=options.timeout)

        body = await page.query_selector("body")
        if body is not None:
            html = await body.inner_html()
            await body.dispose()
            log.debug(f"Loaded page body ({len(html)} characters)")

        await page.set_viewport_size(
            {"width": options.viewport.width, "height": options.viewport.height}
        )

        if options.actions:
            log.info("Running actions")
            for action in options.actions:
                await run_action(browser, page, options, action)
            log.info("Finished running actions")

        results = await TestInjector(settings).run(page, options)
        log.debug(f'Document title: "{results.get("documentTitle")}"')

        if options.screen_capture:
            await _capture_screen(page, options)

    return results


async def pally(
    url: Optional[Union[str, Options]] = None,
    options: Optional[Options] = None,
    *,
    base: Configuration = DEFAULT_OPTIONS,
    settings: Optional[PallySettings] = None,
) -> Dict[str, Any]:
    """Run accessibility tests on a web page.

    Args:
        url: URL or local path to test. May be omitted when the options
            carry a ``url``; passing the options as the only argument works too
        options: Option overrides applied on top of ``base``
        base: Configuration the overrides are merged onto
        settings: Script locations, read from the environment by default

    Returns:
        Results object with ``documentTitle``, ``pageUrl`` and ``issues``

    Raises:
        ConfigurationError: If the options are invalid. No browser is launched
        PallyTimeoutError: If the run takes longer than ``options.timeout``
        ActionError: If an action cannot be resolved or fails
        playwright.async_api.Error: If launching, navigating or evaluating fails

    Example:
        results = await pally("example.com", {"standard": "WCAG2AAA"})
        for issue in results["issues"]:
            print(issue["type"], issue["message"])
    """
    if url is not None and not isinstance(url, str):
        options, url = url, None

    resolved = resolve_options(options, base=base)
    verify_options(resolved)

    target = url if url is not None else resolved.url
    if not target:
        raise ConfigurationError("A URL to test is required")
    target = sanitize_url(target)

    try:
        return await asyncio.wait_for(
            run_pipeline(target, resolved, settings),
            timeout=resolved.timeout / 1000,
        )
    except asyncio.TimeoutError as e:
        raise PallyTimeoutError(resolved.timeout) from e


def run(url: Optional[Union[str, Options]] = None, options: Optional[Options] = None, **kwargs: Any) -> Dict[str, Any]:
    """Blocking wrapper around ``pally()`` for scripts without an event loop."""
    return asyncio.run(pally(url, options, **kwargs))
