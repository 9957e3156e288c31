"""Inject the accessibility rules engine into a page and run it.

Two scripts are added to the page: the HTML_CodeSniffer rules engine and a
small runner that exposes ``window._runPa11y``. The runner takes the test
options, waits if asked to, runs the engine and resolves with a results
object that is handed back unchanged.
"""

import logging
from typing import Any, Dict, Optional

from playwright.async_api import Page

from pally.config import PallySettings, get_settings
from pally.models.options import Configuration

logger = logging.getLogger(__name__)

RUN_SCRIPT = "options => window._runPa11y(options)"


class TestInjector:
    """Add the rules engine and runner to a page and evaluate them."""

    # Not a pytest test class
    __test__ = False

    def __init__(self, settings: Optional[PallySettings] = None):
        self.settings = settings or get_settings()

    async def inject(self, page: Page, log: Any = None) -> None:
        """Inject the rules engine and the runner.

        Raises:
            playwright.async_api.Error: If either script fails to load
        """
        log = log or logger

        log.debug("Injecting HTML CodeSniffer")
        if self.settings.htmlcs_path:
            await page.add_script_tag(path=self.settings.htmlcs_path)
        else:
            await page.add_script_tag(url=self.settings.htmlcs_url)

        log.debug("Injecting Pally")
        await page.add_script_tag(path=self.settings.runner_path)

    @staticmethod
    def build_payload(options: Configuration) -> Dict[str, Any]:
        """Options the in-page runner understands, under its own names."""
        return {
            "hideElements": options.hide_elements,
            "ignore": list(options.ignore),
            "rootElement": options.root_element,
            "rules": list(options.rules),
            "standard": options.standard,
            "wait": options.wait,
        }

    async def evaluate(self, page: Page, options: Configuration) -> Dict[str, Any]:
        """Run the tests in the page and return its results object."""
        log = options.log
        log.debug("Running Pally on the page")
        if options.wait > 0:
            log.debug(f"Waiting for {options.wait}ms")
        return await page.evaluate(RUN_SCRIPT, self.build_payload(options))

    async def run(self, page: Page, options: Configuration) -> Dict[str, Any]:
        """Inject both scripts, then evaluate."""
        await self.inject(page, options.log)
        return await self.evaluate(page, options)
