"""
================================================================================
Search Context
================================================================================

Element discovery and interaction scoped to a searchable root.

A root is anything that can locate child elements through Playwright's
query_selector / query_selector_all: a Page, a Frame or an ElementHandle.
When the root is an element, every lookup is limited to its subtree.

Provides:
    - Lookup (find_element / find_elements / exists)
    - Inspection (is_visible / get_text / get_value)
    - Interaction (click / set_value / toggle_checkbox / set_radio_value)
    - Polling wait for an element to appear, plus a fixed sleep

Usage:
    search = SearchContext(page, default_timeout=5000)
    search.wait_for_element(By.id("username"))
    search.set_value(By.id("username"), "demo_user")
    search.set_radio_value("color", "Green")

    form = search.within(By.css("form#signup"))
    form.click(By.css("button[type=submit]"))

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from typing import List, Optional, Protocol, Union

import allure
from loguru import logger
from playwright.sync_api import ElementHandle

from web_helpers.common import get_config

from .element_inspector import ElementInspector, read_value
from .exceptions import ElementNotFoundError, InvalidOperationError, WaitTimeoutError
from .locators import By
from .waits import DEFAULT_POLL_INTERVAL_MS, DEFAULT_TIMEOUT_MS, WaitConfig, poll_until, sleep_ms


# Inputs and textareas only; other elements keep their native caret.
CARET_TO_END_SCRIPT = (
    "el => { try { const n = el.value.length; el.setSelectionRange(n, n); } catch (e) {} }"
)


class Searchable(Protocol):
    """Capability every search root provides (Page, Frame, ElementHandle)."""

    def query_selector(self, selector: str) -> Optional[ElementHandle]:
        ...

    def query_selector_all(self, selector: str) -> List[ElementHandle]:
        ...


class SearchContext:
    """
    Lookup, inspection and interaction helpers bound to one search root.

    Attributes:
        root: Page, Frame or ElementHandle that lookups run against
        default_timeout: Milliseconds used by waits and option selection
        poll_interval: Milliseconds between checks in wait_for_element
    """

    def __init__(
        self,
        root: Searchable,
        default_timeout: Optional[int] = None,
        poll_interval: Optional[int] = None,
    ):
        """
        Initialize a search context.

        Args:
            root: Page, Frame or ElementHandle to search within
            default_timeout: Wait timeout in ms (defaults to timeouts.default)
            poll_interval: Poll interval in ms (defaults to timeouts.poll_interval)

        Raises:
            ValueError: If root is None
        """
        if root is None:
            raise ValueError("SearchContext requires a search root, got None")
        self.root = root
        self.default_timeout = (
            default_timeout
            if default_timeout is not None
            else get_config("timeouts.default", DEFAULT_TIMEOUT_MS)
        )
        self.poll_interval = (
            poll_interval
            if poll_interval is not None
            else get_config("timeouts.poll_interval", DEFAULT_POLL_INTERVAL_MS)
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, locator: By) -> Optional[ElementHandle]:
        """
        First element matching the locator, or None.

        This is the single not-found boundary; callers decide whether a
        missing element is an error.
        """
        return self.root.query_selector(locator.to_selector())

    def find_element(self, locator: By) -> ElementHandle:
        """
        Find the first element matching the locator.

        Raises:
            ElementNotFoundError: When nothing matches in this context
        """
        element = self.lookup(locator)
        if element is None:
            raise ElementNotFoundError(locator)
        return element

    def find_elements(self, locator: By) -> List[ElementHandle]:
        """All matching elements in document order; empty list when none match."""
        return list(self.root.query_selector_all(locator.to_selector()))

    def exists(self, locator: By) -> bool:
        """True if at least one element matches. Never raises for a missing element."""
        return self.lookup(locator) is not None

    def within(self, locator: By) -> "SearchContext":
        """New context rooted at the first match, sharing this context's timeouts."""
        return SearchContext(
            self.find_element(locator),
            default_timeout=self.default_timeout,
            poll_interval=self.poll_interval,
        )

    def inspect(self, locator: By) -> ElementInspector:
        return ElementInspector(self.find_element(locator))

    # =========================================================================
    # Inspection
    # =========================================================================

    def is_visible(self, locator: By) -> bool:
        return self.find_element(locator).is_visible()

    def get_text(self, locator: By) -> str:
        """Rendered text of the first match, exactly as reported (not trimmed)."""
        return self.find_element(locator).inner_text()

    def get_value(self, locator: By) -> Optional[str]:
        """Value of the first match."""
        return read_value(self.find_element(locator))

    # =========================================================================
    # Interaction
    # =========================================================================

    @allure.step("Click element: {locator}")
    def click(self, locator: By) -> None:
        logger.info(f"Clicking element: {locator}")
        self.find_element(locator).click()

    @allure.step("Set value of {locator}")
    def set_value(self, locator: By, new_value: str) -> None:
        """
        Set the value of the first matching element.

        A <select> gets the option whose label equals new_value. Any other
        element is hovered, focused with the caret after its current content,
        and new_value is typed on the keyboard. Existing content is not
        cleared, so typed text is appended.

        Raises:
            ElementNotFoundError: When nothing matches
            playwright TimeoutError: When a select has no such option
        """
        element = self.find_element(locator)
        if ElementInspector(element).tag_name == "select":
            logger.info(f"Selecting option '{new_value}' in {locator}")
            element.select_option(label=new_value, timeout=self.default_timeout)
        else:
            logger.info(f"Typing into {locator}: '{new_value[:50]}'")
            frame = element.owner_frame()
            if frame is None:
                raise InvalidOperationError(f"Cannot type into {locator}: element is detached")
            element.hover()
            element.focus()
            # ElementHandle.type() would reset the caret of an unfocused input to 0
            element.evaluate(CARET_TO_END_SCRIPT)
            frame.page.keyboard.type(new_value)

    @allure.step("Set checkbox to {selected}")
    def toggle_checkbox(self, checkbox: Union[ElementHandle, By], selected: bool) -> None:
        """
        Make sure a checkbox's checked state equals `selected`.

        Clicks only when the current state differs, so repeated calls are
        no-ops.
        """
        if isinstance(checkbox, By):
            checkbox = self.find_element(checkbox)
        if checkbox.is_checked() != selected:
            logger.debug(f"Toggling checkbox to selected={selected}")
            checkbox.click()

    @allure.step("Set radio group {group_id} to {new_value}")
    def set_radio_value(self, group_id: str, new_value: str) -> None:
        """
        Click the radio button whose text or value matches new_value.

        The group is every element with id == group_id or, only when no
        element has that id, every element with name == group_id.

        Raises:
            InvalidOperationError: When no member of the group matches
        """
        for element in self._find_elements_by_id_or_name(group_id):
            inspector = ElementInspector(element)
            if inspector.text_matches(new_value) or inspector.value_attribute_matches(new_value):
                logger.info(f"Selecting radio '{new_value}' in group '{group_id}'")
                element.click()
                return
        raise InvalidOperationError(
            f"Could not find the value '{new_value}' in the radio button '{group_id}'"
        )

    def _find_elements_by_id_or_name(self, group_id: str) -> List[ElementHandle]:
        elements = self.find_elements(By.id(group_id))
        if not elements:
            elements = self.find_elements(By.name(group_id))
        return elements

    # =========================================================================
    # Waits
    # =========================================================================

    @allure.step("Wait for element: {locator}")
    def wait_for_element(
        self,
        locator: By,
        poll_interval: Optional[int] = None,
        timeout: Optional[int] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Block until an element matching the locator exists.

        Args:
            locator: Element to wait for
            poll_interval: Milliseconds between checks (default: context setting)
            timeout: Milliseconds before giving up (default: context setting)
            stop_event: Optional event another thread can set to end the wait

        Raises:
            ElementNotFoundError: When the element does not appear in time
            WaitCancelledError: When stop_event is set during the wait
        """
        config = WaitConfig(
            poll_interval=self.poll_interval if poll_interval is None else poll_interval,
            timeout=self.default_timeout if timeout is None else timeout,
        )
        try:
            poll_until(
                lambda: self.exists(locator),
                config,
                description=f"element {locator}",
                stop_event=stop_event,
            )
        except WaitTimeoutError as e:
            raise ElementNotFoundError(locator, f"Element could not be found! {locator}") from e

    def wait(self, milliseconds: int) -> None:
        """Unconditional sleep. Prefer wait_for_element where possible."""
        logger.debug(f"Sleeping for {milliseconds}ms")
        sleep_ms(milliseconds)

    def __repr__(self) -> str:
        return f"SearchContext(root={self.root!r}, default_timeout={self.default_timeout})"


__all__ = [
    "Searchable",
    "SearchContext",
]
