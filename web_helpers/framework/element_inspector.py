"""
================================================================================
Element Inspector
================================================================================

Read-only convenience methods around a single, already-located Playwright
ElementHandle: tag name, rendered text, value and simple matching rules.

Matching rules:
    - text_matches: rendered text and candidate are both stripped, then
      compared exactly (case-sensitive, no substring or regex)
    - value_attribute_matches: exact comparison, no stripping; a missing
      value counts as the empty string

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import List, Optional

from playwright.sync_api import ElementHandle

from .locators import CHILDREN


# DOM value property first (reflects typed text), then the plain attribute.
VALUE_SCRIPT = (
    "el => (el.value !== undefined && el.value !== null)"
    " ? String(el.value) : el.getAttribute('value')"
)

TAG_NAME_SCRIPT = "el => el.tagName.toLowerCase()"


def read_value(element: ElementHandle) -> Optional[str]:
    """Current value of an element, or None when it has none."""
    return element.evaluate(VALUE_SCRIPT)


class ElementInspector:
    """
    Inspects one element.

    Usage:
        >>> inspector = ElementInspector(page.query_selector("#size"))
        >>> inspector.tag_name
        'select'
        >>> inspector.has_matching_label_child("Size")
        True
    """

    def __init__(self, element: ElementHandle):
        if element is None:
            raise ValueError("ElementInspector requires an element handle, got None")
        self.element = element

    @property
    def tag_name(self) -> str:
        """Lowercase tag name of the element."""
        return self.element.evaluate(TAG_NAME_SCRIPT)

    @property
    def text(self) -> str:
        """Rendered text, untrimmed."""
        return self.element.inner_text()

    @property
    def value(self) -> Optional[str]:
        return read_value(self.element)

    def text_matches(self, candidate: str) -> bool:
        """True if the trimmed rendered text equals the trimmed candidate."""
        return self.text.strip() == candidate.strip()

    def value_attribute_matches(self, candidate: str) -> bool:
        """True if the element's value equals the candidate exactly."""
        return (self.value or "") == candidate

    def children(self) -> List["ElementInspector"]:
        """
        Direct children of this element, in document order.

        Returns:
            Always a list, possibly empty
        """
        return [
            ElementInspector(child)
            for child in self.element.query_selector_all(CHILDREN.to_selector())
        ]

    def has_matching_label_child(self, text: str) -> bool:
        """True if a direct <label> child has text matching `text`."""
        for child in self.children():
            if child.tag_name == "label" and child.text_matches(text):
                return True
        return False

    def __repr__(self) -> str:
        return f"ElementInspector({self.element!r})"


__all__ = [
    "ElementInspector",
    "read_value",
]
