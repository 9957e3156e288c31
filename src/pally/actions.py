"""Scripted actions replayed against the page before testing.

Each action is a short English instruction, for example
``"set field #username to jane"`` or ``"click element #login"``. Actions
are matched case-insensitively against the patterns below and run one at a
time by the pipeline.
"""

import logging
import re
from typing import Any, Awaitable, Callable, List, Match, Optional, Pattern

from playwright.async_api import Browser, Page

from pally.errors import ActionError
from pally.models.options import Configuration

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Browser, Page, Configuration, Match], Awaitable[None]]

# Page location property checked by each "wait for ..." subject
LOCATION_PROPERTIES = {
    "fragment": "hash",
    "hash": "hash",
    "host": "host",
    "path": "pathname",
    "url": "href",
}

# Playwright selector state for each "wait for element ..." state
ELEMENT_STATES = {
    "added": "attached",
    "removed": "detached",
    "visible": "visible",
    "hidden": "hidden",
}


class Action:
    """A named action pattern and the coroutine that performs it."""

    def __init__(self, name: str, pattern: str, handler: ActionHandler):
        self.name = name
        self.pattern: Pattern = re.compile(pattern, re.IGNORECASE)
        self.handler = handler

    def match(self, action: str) -> Optional[Match]:
        return self.pattern.match(action.strip())


async def _navigate_url(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    url = match.group(1)
    options.log.debug(f"Navigating to {url}")
    try:
        await page.goto(url, timeout=options.timeout)
    except Exception as e:
        raise ActionError(f'Failed action: Could not navigate to "{url}": {e}', match.string) from e


async def _click_element(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    selector = match.group(2)
    try:
        await page.click(selector, timeout=options.timeout)
    except Exception as e:
        raise ActionError(
            f'Failed action: no element matching selector "{selector}"', match.string
        ) from e


async def _set_field_value(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    selector, value = match.group(1), match.group(2)
    try:
        await page.fill(selector, value, timeout=options.timeout)
    except Exception as e:
        raise ActionError(
            f'Failed action: no element matching selector "{selector}"', match.string
        ) from e


async def _clear_field_value(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    selector = match.group(1)
    try:
        await page.fill(selector, "", timeout=options.timeout)
    except Exception as e:
        raise ActionError(
            f'Failed action: no element matching selector "{selector}"', match.string
        ) from e


async def _check_field(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    checked = match.group(1).lower() == "check"
    selector = match.group(2)
    try:
        await page.set_checked(selector, checked, timeout=options.timeout)
    except Exception as e:
        raise ActionError(
            f'Failed action: no element matching selector "{selector}"', match.string
        ) from e


async def _screen_capture(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    path = match.group(2)
    options.log.debug(f"Capturing screen to {path}")
    try:
        await page.screenshot(path=path, full_page=True)
    except Exception as e:
        raise ActionError(f'Failed action: could not capture screen to "{path}": {e}', match.string) from e


async def _wait_for_url(browser: Browser, page: Page, options: Configuration, match: Match) -> None:
    subject, negated, expected = match.group(1).lower(), bool(match.group(2)), match.group(3)
    prop = LOCATION_PROPERTIES[subject]
    try:
        await page.wait_for_function(
            """
            ({prop, expected, negated}) => {
                const matches = window.location[prop] === expected;
                return negated ? !matches : matches;
            }
            """,
            arg={"prop": prop, "expected": expected, "negated": negated},
            timeout=options.timeout,
        )
    except Exception as e:
        raise ActionError(f"Failed action: {match.string}: {e}", match.string) from e


async def _wait_for_element_state(
    browser: Browser, page: Page, options: Configuration, match: Match
) -> None:
    selector, state = match.group(1), match.group(2).lower()
    try:
        await page.wait_for_selector(
            selector, state=ELEMENT_STATES[state], timeout=options.timeout
        )
    except Exception as e:
        raise ActionError(
            f'Failed action: element "{selector}" did not become {state}', match.string
        ) from e


ACTIONS: List[Action] = [
    Action("navigate-url", r"^navigate to (.+)$", _navigate_url),
    Action("click-element", r"^click( element)? (.+)$", _click_element),
    Action("set-field-value", r"^set field (.+?) to (.+)$", _set_field_value),
    Action("clear-field-value", r"^clear field (.+)$", _clear_field_value),
    Action("check-field", r"^(check|uncheck) field (.+)$", _check_field),
    Action("screen-capture", r"^(screen[ -]?capture|capture screen) (.+)$", _screen_capture),
    Action(
        "wait-for-url",
        r"^wait for (fragment|hash|host|path|url) to (not )?be (.+)$",
        _wait_for_url,
    ),
    Action(
        "wait-for-element-state",
        r"^wait for element (.+?) to be (added|removed|visible|hidden)$",
        _wait_for_element_state,
    ),
]


def find_action(action: str) -> Optional[Action]:
    """Return the first action whose pattern matches, if any."""
    for candidate in ACTIONS:
        if candidate.match(action):
            return candidate
    return None


def is_valid_action(action: Any) -> bool:
    """Whether ``action`` is a string that some known action accepts."""
    return isinstance(action, str) and find_action(action) is not None


async def run_action(browser: Browser, page: Page, options: Configuration, action: str) -> None:
    """Run a single action against the page.

    Args:
        browser: Browser owning the page
        page: Page under test
        options: Resolved run options
        action: Action instruction

    Raises:
        ActionError: If the action is unknown or fails
    """
    definition = find_action(action) if isinstance(action, str) else None
    if definition is None:
        raise ActionError(f'Failed action: "{action}" cannot be resolved', str(action))

    options.log.debug(f"Running action: {action}")
    await definition.handler(browser, page, options, definition.match(action))
