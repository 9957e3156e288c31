"""Runtime settings loaded from the environment."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

VENDOR_DIR = Path(__file__).parent / "vendor"

HTMLCS_URL = "https://squizlabs.github.io/HTML_CodeSniffer/build/HTMLCS.js"


class PallySettings(BaseModel):
    """Where the injected scripts come from, and how verbose scripts are."""

    htmlcs_url: str = Field(
        default_factory=lambda: os.getenv("PALLY_HTMLCS_URL", HTMLCS_URL),
        description="URL of the HTML_CodeSniffer build to inject",
    )
    htmlcs_path: Optional[str] = Field(
        default_factory=lambda: os.getenv("PALLY_HTMLCS_PATH"),
        description="Local HTML_CodeSniffer build, used instead of the URL",
    )
    runner_path: str = Field(
        default_factory=lambda: os.getenv(
            "PALLY_RUNNER_PATH", str(VENDOR_DIR / "runner.js")
        ),
        description="Script exposing the in-page _runPa11y entry point",
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("PALLY_LOG_LEVEL", "INFO"),
        description="Level used by configure_logging",
    )


def get_settings() -> PallySettings:
    """Read settings from the current environment."""
    return PallySettings()


def configure_logging(level: Optional[str] = None) -> None:
    """Send pally log output to stderr.

    Args:
        level: Logging level name; defaults to PALLY_LOG_LEVEL
    """
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
