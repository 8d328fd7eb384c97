"""
================================================================================
UI Helpers Framework
================================================================================

Playwright-based convenience layer for UI test authors.

Components:
    - locators: By locator value objects rendered as Playwright selectors
    - element_inspector: Read-only questions about one located element
    - search_context: Lookup, interaction and polling waits scoped to a root
    - browser: Session facade (navigation, frames, dialogs, windows)
    - host: Host descriptor for path navigation
    - waits: Fixed-interval polling primitives
    - exceptions: Errors detected by the helpers

Author: Automation Team
License: MIT
================================================================================
"""

from .browser import Browser
from .element_inspector import ElementInspector
from .exceptions import (
    ElementNotFoundError,
    InvalidOperationError,
    NoAlertPresentError,
    NoSuchFrameError,
    WaitCancelledError,
    WaitTimeoutError,
    WebHelperError,
)
from .host import Host
from .locators import By
from .search_context import SearchContext
from .waits import WaitConfig, poll_until, poll_until_async

__all__ = [
    "Browser",
    "By",
    "ElementInspector",
    "Host",
    "SearchContext",
    "WaitConfig",
    "poll_until",
    "poll_until_async",
    "WebHelperError",
    "ElementNotFoundError",
    "InvalidOperationError",
    "NoAlertPresentError",
    "NoSuchFrameError",
    "WaitCancelledError",
    "WaitTimeoutError",
]
