"""Run configuration models.

This module defines the immutable configuration record that drives a single
pally run. Field names are snake_case; the camelCase option names used by
the wider pa11y ecosystem are accepted as aliases so option files can be
shared.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pally.version import __version__


class Standard(str, Enum):
    """Accessibility standards understood by the rules engine."""

    SECTION508 = "Section508"
    WCAG2A = "WCAG2A"
    WCAG2AA = "WCAG2AA"
    WCAG2AAA = "WCAG2AAA"


class Viewport(BaseModel):
    """Browser viewport size in CSS pixels."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=1280, description="Viewport width")
    height: int = Field(default=1024, description="Viewport height")


class Configuration(BaseModel):
    """Fully resolved options for one run.

    Instances are frozen. Build them with ``pally.options.resolve_options``
    rather than directly, so that the ignore list is normalised.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        validate_default=True,
    )

    # Navigation
    url: Optional[str] = Field(default=None, description="Target before sanitizing")
    method: str = Field(default="GET", description="HTTP method of the first request")
    headers: Mapping[str, str] = Field(
        default_factory=dict, description="Headers added to the first request"
    )
    post_data: Optional[Union[str, bytes]] = Field(
        default=None, alias="postData", description="Body of the first request"
    )
    user_agent: str = Field(
        default=f"pally/{__version__}",
        alias="userAgent",
        description="User-Agent header of the first request",
    )
    auth_cookie: Optional[Mapping[str, Any]] = Field(
        default=None, alias="authCookie", description="Cookie set before navigating"
    )

    # Browser
    viewport: Viewport = Field(default_factory=Viewport, description="Viewport size")
    chrome_launch_config: Mapping[str, Any] = Field(
        default_factory=lambda: {"ignore_https_errors": True},
        alias="chromeLaunchConfig",
        description="Options passed through to the browser launcher",
    )

    # Test run
    wait: int = Field(default=0, description="Delay in ms before collecting results")
    actions: Tuple[str, ...] = Field(
        default=(), description="Actions replayed after the page loads"
    )
    standard: str = Field(default=Standard.WCAG2AA.value, description="Standard to test")
    ignore: Tuple[str, ...] = Field(
        default=(), description="Issue types or rule codes to drop"
    )
    include_notices: bool = Field(default=False, alias="includeNotices")
    include_warnings: bool = Field(default=False, alias="includeWarnings")
    hide_elements: Optional[str] = Field(
        default=None, alias="hideElements", description="Selector of elements to skip"
    )
    root_element: Optional[str] = Field(
        default=None, alias="rootElement", description="Selector the scan starts from"
    )
    rules: Tuple[str, ...] = Field(default=(), description="Extra rules to run")

    # Output
    screen_capture: Optional[str] = Field(
        default=None, alias="screenCapture", description="Full-page screenshot path"
    )
    timeout: int = Field(default=30000, description="Overall run deadline in ms")
    log: Any = Field(
        default_factory=lambda: logging.getLogger("pally"),
        description="Object with debug, info and error methods",
    )

    @field_validator("headers", "auth_cookie", "chrome_launch_config")
    @classmethod
    def _freeze_mapping(cls, value: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
        """Store mappings as read-only views so resolved options stay fixed."""
        if value is None:
            return None
        return freeze_mapping(value)


def freeze_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only copy of ``value``, nested mappings included."""
    return MappingProxyType(
        {
            key: freeze_mapping(item) if isinstance(item, Mapping) else item
            for key, item in value.items()
        }
    )
