"""Exception types raised by pally."""


class PallyError(Exception):
    """Base class for errors raised by pally itself."""

    pass


class ConfigurationError(PallyError):
    """Raised when options are invalid. Never raised after a browser launch."""

    pass


class PallyTimeoutError(PallyError, TimeoutError):
    """Raised when a run does not finish within the configured timeout."""

    def __init__(self, timeout: int):
        self.timeout = timeout
        super().__init__(f"Pally timed out ({timeout}ms)")


class ActionError(PallyError):
    """Raised when a scripted action is invalid or fails to run."""

    def __init__(self, message: str, action: str = ""):
        self.action = action
        super().__init__(message)
