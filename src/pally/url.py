"""Normalise a URL or local path into a scheme-qualified URL."""

import os
import re

_SCHEME_PATTERN = re.compile(r"^(https?|file)://", re.IGNORECASE)


def sanitize_url(url: str) -> str:
    """Return ``url`` with an explicit scheme.

    Absolute paths become ``file://`` URLs, relative paths (starting with
    ``.``) are resolved against the working directory first, URLs that
    already carry an http, https or file scheme are returned unchanged and
    everything else is assumed to be a host name served over http.

    Example:
        >>> sanitize_url("example.com")
        'http://example.com'
        >>> sanitize_url("/tmp/page.html")
        'file:///tmp/page.html'
    """
    if url.startswith("/"):
        return f"file://{url}"
    if url.startswith("."):
        return f"file://{os.path.abspath(os.path.join(os.getcwd(), url))}"
    if not _SCHEME_PATTERN.match(url):
        return f"http://{url}"
    return url
