"""
Exception types raised by the UI helpers.

Driver failures (playwright.sync_api.Error / TimeoutError) are never wrapped;
only conditions detected by the helpers themselves show up here.
"""

from __future__ import annotations

from typing import Any, Optional


class WebHelperError(Exception):
    """Base class for all helper errors."""
    pass


class ElementNotFoundError(WebHelperError):
    """Raised when a locator matches no element, including wait timeouts."""

    def __init__(self, locator: Any, message: Optional[str] = None):
        self.locator = locator
        super().__init__(message or f"Element could not be found! {locator}")


class NoSuchFrameError(WebHelperError):
    """Raised when a frame switch target does not exist."""

    def __init__(self, frame_id: str):
        self.frame_id = frame_id
        super().__init__(f"No frame found with name or id '{frame_id}'")


class InvalidOperationError(WebHelperError):
    """Raised when an operation's precondition does not hold."""
    pass


class NoAlertPresentError(InvalidOperationError):
    """Raised when accepting a dialog while none is open."""
    pass


class WaitTimeoutError(WebHelperError):
    """Raised when a polled condition is not met before the deadline."""
    pass


class WaitCancelledError(WebHelperError):
    """Raised when a wait is stopped through its stop event."""
    pass


__all__ = [
    "WebHelperError",
    "ElementNotFoundError",
    "NoSuchFrameError",
    "InvalidOperationError",
    "NoAlertPresentError",
    "WaitTimeoutError",
    "WaitCancelledError",
]
