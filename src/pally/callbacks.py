"""Callback-style calling convention on top of ``pally()``."""

from typing import Any, Callable, Dict, Optional

from pally.runner import pally

Callback = Callable[[Optional[BaseException], Optional[Dict[str, Any]]], Any]


async def pally_with_callback(url: Any, options: Any, callback: Callback) -> Any:
    """Run pally and report the outcome to ``callback`` instead of raising.

    The callback is called exactly once, as ``callback(error, None)`` on
    failure or ``callback(None, results)`` on success.

    Returns:
        Whatever the callback returns
    """
    try:
        results = await pally(url, options)
    except Exception as e:
        return callback(e, None)
    return callback(None, results)
