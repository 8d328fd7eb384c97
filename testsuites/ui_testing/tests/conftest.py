"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for the browser-backed smoke tests. These drive a real Chromium
through Playwright, so they only run when WEB_HELPERS_UI_TESTS=1 and the
browser has been installed (`playwright install chromium`).

Key Features:
- Session-scoped browser shared by every test
- Fresh context and page per test for isolation
- Browser facade that leaves the shared browser open on shutdown

================================================================================
"""

import os
from typing import Generator

import pytest
from playwright.sync_api import Browser as PlaywrightBrowser
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from web_helpers.framework.browser import Browser


UI_TESTS_ENV = "WEB_HELPERS_UI_TESTS"


def pytest_collection_modifyitems(config, items):
    """Skip browser-backed tests unless explicitly enabled."""
    if os.getenv(UI_TESTS_ENV) == "1":
        return
    skip_ui = pytest.mark.skip(reason=f"set {UI_TESTS_ENV}=1 to run browser-backed tests")
    for item in items:
        if "ui_testing" in item.path.parts:
            item.add_marker(skip_ui)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def chromium() -> Generator[PlaywrightBrowser, None, None]:
    """Session-scoped headless Chromium."""
    with sync_playwright() as playwright:
        try:
            browser = playwright.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium is not available: {e}")
        yield browser
        browser.close()


@pytest.fixture(scope="function")
def page(chromium: PlaywrightBrowser) -> Generator[Page, None, None]:
    """New context and page for each test."""
    context = chromium.new_context()
    page = context.new_page()
    yield page
    context.close()


@pytest.fixture(scope="function")
def browser(page: Page) -> Generator[Browser, None, None]:
    """Session facade over the test page; the shared Chromium stays open."""
    facade = Browser(page, default_timeout=2000, poll_interval=100)
    yield facade
    facade.shutdown()
