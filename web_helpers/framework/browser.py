"""
================================================================================
Browser Session
================================================================================

Session-level facade over a live Playwright Page.

Element-level operations are delegated to a SearchContext bound to the
current frame; this class adds what only the session can do:

    - Navigation (by path on a configured Host, or by absolute URL)
    - Frame switching (lookups follow the selected frame)
    - Native dialog handling (expected, unexpected and held dialogs)
    - Window/tab switching
    - Screenshots and teardown

Usage:
    with Browser(page, host=Host("example.com")) as browser:
        browser.navigate_to_path("/login")
        browser.set_value(By.id("username"), "demo_user")
        browser.click(By.id("login"))
        browser.wait_for_element(By.id("dashboard"))

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Union

import allure
from loguru import logger
from playwright.sync_api import Dialog, ElementHandle, Frame, Page

from web_helpers.common import get_config

from .element_inspector import ElementInspector
from .exceptions import InvalidOperationError, NoAlertPresentError, NoSuchFrameError
from .host import Host
from .locators import By
from .search_context import SearchContext


DIALOG_POLICIES = ("dismiss", "hold")


class Browser:
    """
    Facade over one browser session.

    Attributes:
        host: Optional Host used by navigate_to_path
        search: SearchContext bound to the current frame
        owns_browser: Whether shutdown also closes the Playwright browser
        unexpected_dialogs: "dismiss" or "hold", see expect_alert_dialog
    """

    def __init__(
        self,
        page: Page,
        host: Optional[Host] = None,
        default_timeout: Optional[int] = None,
        poll_interval: Optional[int] = None,
        owns_browser: bool = False,
        unexpected_dialogs: Optional[str] = None,
    ):
        """
        Initialize the session facade.

        Args:
            page: Live Playwright page
            host: Host for path navigation; without it navigate_to_path fails
            default_timeout: Wait timeout in ms (defaults to timeouts.default)
            poll_interval: Poll interval in ms (defaults to timeouts.poll_interval)
            owns_browser: Close the Playwright browser on shutdown too. Leave
                False when the browser is shared with other sessions.
            unexpected_dialogs: Policy for dialogs opened outside
                expect_alert_dialog() (defaults to browser.unexpected_dialogs)

        Raises:
            ValueError: If page is None or the dialog policy is unknown
        """
        if page is None:
            raise ValueError("Browser requires a page, got None")
        policy = unexpected_dialogs or get_config("browser.unexpected_dialogs", "dismiss")
        if policy not in DIALOG_POLICIES:
            raise ValueError(
                f"unexpected_dialogs must be one of {DIALOG_POLICIES}, got '{policy}'"
            )
        self.host = host
        self.owns_browser = owns_browser
        self.unexpected_dialogs = policy
        self._page: Optional[Page] = None
        self._frame: Optional[Frame] = None
        self._watched_pages: List[Page] = []
        self._dialogs: List[Dialog] = []
        self._expecting: Optional[List[Dialog]] = None
        self._search = SearchContext(page, default_timeout=default_timeout, poll_interval=poll_interval)
        self._attach(page)

    @classmethod
    def from_config(cls, page: Page, owns_browser: bool = False) -> "Browser":
        """Build a Browser using browser.host and timeouts.* from configuration."""
        host_name = get_config("browser.host")
        return cls(
            page,
            host=Host(host_name) if host_name else None,
            default_timeout=get_config("timeouts.default"),
            poll_interval=get_config("timeouts.poll_interval"),
            owns_browser=owns_browser,
        )

    def __enter__(self) -> "Browser":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    # =========================================================================
    # Session state
    # =========================================================================

    def _attach(self, page: Page) -> None:
        """Make `page` the active page and route lookups to its top-level document."""
        if not any(watched is page for watched in self._watched_pages):
            page.on("dialog", self._on_dialog)
            self._watched_pages.append(page)
        self._page = page
        self._frame = None
        self._search.root = page

    def _on_dialog(self, dialog: Dialog) -> None:
        # Playwright stalls the triggering action until every dialog is handled
        if self._expecting is not None:
            logger.info(f"Accepting expected dialog ({dialog.type}): {dialog.message}")
            dialog.accept()
            self._expecting.append(dialog)
        elif self.unexpected_dialogs == "hold":
            logger.warning(f"Holding unexpected dialog ({dialog.type}): {dialog.message}")
            self._dialogs.append(dialog)
        else:
            logger.warning(f"Dismissing unexpected dialog ({dialog.type}): {dialog.message}")
            dialog.dismiss()

    @property
    def page(self) -> Page:
        """The active page. Raises InvalidOperationError after shutdown."""
        if self._page is None:
            raise InvalidOperationError("Browser session has been shut down")
        return self._page

    @property
    def search(self) -> SearchContext:
        """SearchContext bound to the current frame of the active page."""
        if self._page is None:
            raise InvalidOperationError("Browser session has been shut down")
        return self._search

    @property
    def current_url(self) -> str:
        return self.page.url

    @property
    def default_timeout(self) -> int:
        return self._search.default_timeout

    @property
    def poll_interval(self) -> int:
        return self._search.poll_interval

    # =========================================================================
    # Navigation
    # =========================================================================

    @allure.step("Navigate to path: {path}")
    def navigate_to_path(self, path: str) -> None:
        """
        Navigate to `path` on the configured host.

        Raises:
            InvalidOperationError: If the browser was built without a host
        """
        if self.host is None:
            raise InvalidOperationError(
                f"Cannot navigate to path '{path}': no host configured"
            )
        self.navigate_to_url(self.host.construct_url(path))

    @allure.step("Navigate to URL: {url}")
    def navigate_to_url(self, url: str) -> None:
        logger.info(f"Navigating to: {url}")
        self.page.goto(url)

    # =========================================================================
    # Frames, dialogs and windows
    # =========================================================================

    def switch_to_frame(self, frame_id: str) -> None:
        """
        Route subsequent lookups into a child frame of the current frame.

        The frame is matched by its name first, then by the id of its
        <iframe>/<frame> element.

        Raises:
            NoSuchFrameError: If no such frame exists
        """
        frame = self._find_frame(frame_id)
        if frame is None:
            raise NoSuchFrameError(frame_id)
        logger.debug(f"Switched to frame: {frame_id}")
        self._frame = frame
        self._search.root = frame

    def _find_frame(self, frame_id: str) -> Optional[Frame]:
        current = self._frame or self.page.main_frame
        for child in current.child_frames:
            if child.name == frame_id:
                return child
        quoted = By.id(frame_id).to_selector()
        handle = current.query_selector(f"iframe{quoted}, frame{quoted}")
        if handle is None:
            return None
        return handle.content_frame()

    def switch_to_default_frame(self) -> None:
        """Route lookups back to the top-level document."""
        self._frame = None
        self._search.root = self.page

    @contextmanager
    def expect_alert_dialog(self) -> Iterator[List[Dialog]]:
        """
        Accept every native dialog opened by the actions inside the block.

        The acceptance is armed before the actions run, so a click or a
        navigation that opens an alert or confirm returns normally.

        Usage:
            with browser.expect_alert_dialog() as dialogs:
                browser.click(By.id("delete"))
            assert dialogs[0].message == "Delete item?"

        Yields:
            List that collects the accepted dialogs

        Raises:
            NoAlertPresentError: If the block opened no dialog
            InvalidOperationError: If blocks are nested or after shutdown
        """
        if self._page is None:
            raise InvalidOperationError("Browser session has been shut down")
        if self._expecting is not None:
            raise InvalidOperationError("expect_alert_dialog() blocks cannot be nested")
        accepted: List[Dialog] = []
        self._expecting = accepted
        try:
            yield accepted
        finally:
            self._expecting = None
        if not accepted:
            raise NoAlertPresentError("No alert dialog was opened inside the block")

    @allure.step("Accept alert dialog")
    def accept_alert_dialog(self) -> None:
        """
        Accept the most recent dialog held open by the "hold" policy.

        Dialogs triggered by an action are handled with expect_alert_dialog();
        this covers dialogs opened on their own, e.g. from a timer.

        Raises:
            NoAlertPresentError: If no dialog is waiting to be handled
        """
        self._dialogs = [d for d in self._dialogs if not _page_closed(d)]
        if not self._dialogs:
            raise NoAlertPresentError("No alert dialog is open")
        dialog = self._dialogs.pop()
        logger.info(f"Accepting dialog: {dialog.message}")
        dialog.accept()

    def switch_to_most_recent_page(self) -> None:
        """Switch to the most recently opened page (window or tab) of this context."""
        pages = self.page.context.pages
        newest = pages[-1]
        newest.bring_to_front()
        self._attach(newest)
        logger.debug(f"Switched to page: {newest.url}")

    # =========================================================================
    # Element delegation
    # =========================================================================

    def find_element(self, locator: By) -> ElementHandle:
        return self.search.find_element(locator)

    def find_elements(self, locator: By) -> List[ElementHandle]:
        return self.search.find_elements(locator)

    def exists(self, locator: By) -> bool:
        return self.search.exists(locator)

    def within(self, locator: By) -> SearchContext:
        return self.search.within(locator)

    def inspect(self, locator: By) -> ElementInspector:
        return self.search.inspect(locator)

    def is_visible(self, locator: By) -> bool:
        return self.search.is_visible(locator)

    def get_text(self, locator: By) -> str:
        return self.search.get_text(locator)

    def get_value(self, locator: By) -> Optional[str]:
        return self.search.get_value(locator)

    def click(self, locator: By) -> None:
        self.search.click(locator)

    def set_value(self, locator: By, new_value: str) -> None:
        self.search.set_value(locator, new_value)

    def toggle_checkbox(self, checkbox: Union[ElementHandle, By], selected: bool) -> None:
        self.search.toggle_checkbox(checkbox, selected)

    def set_radio_value(self, group_id: str, new_value: str) -> None:
        self.search.set_radio_value(group_id, new_value)

    def wait_for_element(
        self,
        locator: By,
        poll_interval: Optional[int] = None,
        timeout: Optional[int] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self.search.wait_for_element(locator, poll_interval, timeout, stop_event)

    def wait(self, milliseconds: int) -> None:
        self.search.wait(milliseconds)

    @allure.step("Hover element: {locator}")
    def hover_element(self, locator: By) -> None:
        """Move the pointer over the first match without clicking it."""
        logger.info(f"Hovering over: {locator}")
        self.find_element(locator).hover()

    # =========================================================================
    # Screenshots and teardown
    # =========================================================================

    def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take a screenshot of the active page and optionally attach it to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        screenshot_dir = Path(get_config("screenshots.dir", "screenshots"))
        screenshot_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = screenshot_dir / f"{name}_{timestamp}.png"

        png = self.page.screenshot(path=str(filepath), full_page=full_page)
        if attach_to_allure:
            allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    def shutdown(self) -> None:
        """
        Close every window of the session, and the browser when owns_browser is set.

        Safe to call more than once.
        """
        if self._page is None:
            return
        context = self._page.context
        browser = context.browser
        context.close()
        if self.owns_browser and browser is not None:
            browser.close()
        self._page = None
        self._frame = None
        self._watched_pages.clear()
        self._dialogs.clear()
        logger.debug("Browser session shut down")

    def __repr__(self) -> str:
        return f"Browser(host={self.host!r}, active={self._page is not None})"


def _page_closed(dialog: Dialog) -> bool:
    page = dialog.page
    return page is not None and page.is_closed()


__all__ = ["Browser", "DIALOG_POLICIES"]
