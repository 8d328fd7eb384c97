"""
================================================================================
Web Helpers
================================================================================

Convenience layer over Playwright for UI test authors: element lookup,
visibility/text/value inspection, form interaction, navigation, frame and
window switching, and polling waits.

Modules:
    - common: Configuration and logging setup
    - framework: Browser, SearchContext, ElementInspector and friends

Example:
    from playwright.sync_api import sync_playwright
    from web_helpers import Browser, By, Host

    with sync_playwright() as p:
        page = p.chromium.launch().new_page()
        with Browser(page, host=Host("localhost:3000")) as browser:
            browser.navigate_to_path("/login")
            browser.set_value(By.id("username"), "demo_user")
            browser.set_radio_value("plan", "Monthly")
            browser.click(By.id("login"))
            browser.wait_for_element(By.id("dashboard"))

================================================================================
"""

__version__ = "1.0.0"

from .framework import (
    Browser,
    By,
    ElementInspector,
    ElementNotFoundError,
    Host,
    InvalidOperationError,
    NoAlertPresentError,
    NoSuchFrameError,
    SearchContext,
    WaitCancelledError,
    WaitTimeoutError,
    WebHelperError,
)

__all__ = [
    "Browser",
    "By",
    "ElementInspector",
    "Host",
    "SearchContext",
    "WebHelperError",
    "ElementNotFoundError",
    "InvalidOperationError",
    "NoAlertPresentError",
    "NoSuchFrameError",
    "WaitCancelledError",
    "WaitTimeoutError",
]
