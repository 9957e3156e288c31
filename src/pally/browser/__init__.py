"""Browser-side stages of a pally run.

- Scoped browser and page ownership
- One-shot interception of the document request
- Injection and evaluation of the accessibility rules engine
"""

from pally.browser.injector import TestInjector
from pally.browser.interceptor import InterceptionState, RequestInterceptor
from pally.browser.session import BrowserSession

__all__ = [
    "BrowserSession",
    "InterceptionState",
    "RequestInterceptor",
    "TestInjector",
]
