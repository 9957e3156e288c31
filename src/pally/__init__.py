"""Run automated accessibility tests against web pages with Playwright.

This package provides:
- URL and local path normalisation
- Option defaults, merging and validation
- A pipeline that loads a page, replays actions and runs HTML_CodeSniffer
- A callback adapter for callers that do not await coroutines
"""

import logging

from pally.actions import is_valid_action
from pally.callbacks import pally_with_callback
from pally.errors import ActionError, ConfigurationError, PallyError, PallyTimeoutError
from pally.models.options import Configuration, Standard, Viewport
from pally.options import ALLOWED_STANDARDS, DEFAULT_OPTIONS, resolve_options, verify_options
from pally.runner import pally, run
from pally.url import sanitize_url
from pally.version import __version__

logging.getLogger("pally").addHandler(logging.NullHandler())

__all__ = [
    "ALLOWED_STANDARDS",
    "ActionError",
    "Configuration",
    "ConfigurationError",
    "DEFAULT_OPTIONS",
    "PallyError",
    "PallyTimeoutError",
    "Standard",
    "Viewport",
    "__version__",
    "is_valid_action",
    "pally",
    "pally_with_callback",
    "resolve_options",
    "run",
    "sanitize_url",
    "verify_options",
]
