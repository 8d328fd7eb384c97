"""
================================================================================
Locators
================================================================================

Immutable search criteria translated into Playwright selector strings.

A locator is a strategy plus a value. Strategies mirror the classic
WebDriver ones so page objects read the same way regardless of engine:

    >>> By.id("username").to_selector()
    '[id="username"]'
    >>> By.name("color").to_selector()
    '[name="color"]'
    >>> str(By.xpath("//form/input"))
    'By.xpath: //form/input'

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass


def _quote(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector or text pseudo-class."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class By:
    """
    Locator value object.

    Attributes:
        strategy: Location strategy name (id, name, xpath, css, ...)
        value: Strategy-specific search value
    """

    strategy: str
    value: str

    ID = "id"
    NAME = "name"
    XPATH = "xpath"
    CSS = "css"
    TAG_NAME = "tag_name"
    CLASS_NAME = "class_name"
    LINK_TEXT = "link_text"
    PARTIAL_LINK_TEXT = "partial_link_text"
    SELECTOR = "selector"

    # Strategy -> selector template. {q} is the quoted value, {v} the raw value.
    _TEMPLATES = {
        ID: "[id={q}]",
        NAME: "[name={q}]",
        XPATH: "xpath={v}",
        CSS: "css={v}",
        TAG_NAME: "css={v}",
        CLASS_NAME: "css=[class~={q}]",
        LINK_TEXT: "css=a:text-is({q})",
        PARTIAL_LINK_TEXT: "css=a:has-text({q})",
        SELECTOR: "{v}",
    }

    def __post_init__(self) -> None:
        if self.strategy not in self._TEMPLATES:
            raise ValueError(f"Unknown locator strategy: {self.strategy}")
        if self.value is None:
            raise ValueError(f"Locator value must not be None ({self.strategy})")

    @classmethod
    def id(cls, value: str) -> "By":
        return cls(cls.ID, value)

    @classmethod
    def name(cls, value: str) -> "By":
        return cls(cls.NAME, value)

    @classmethod
    def xpath(cls, value: str) -> "By":
        return cls(cls.XPATH, value)

    @classmethod
    def css(cls, value: str) -> "By":
        return cls(cls.CSS, value)

    @classmethod
    def tag_name(cls, value: str) -> "By":
        return cls(cls.TAG_NAME, value)

    @classmethod
    def class_name(cls, value: str) -> "By":
        return cls(cls.CLASS_NAME, value)

    @classmethod
    def link_text(cls, value: str) -> "By":
        return cls(cls.LINK_TEXT, value)

    @classmethod
    def partial_link_text(cls, value: str) -> "By":
        return cls(cls.PARTIAL_LINK_TEXT, value)

    @classmethod
    def selector(cls, value: str) -> "By":
        """Wrap a raw Playwright selector (e.g. "text=Log in", "role=button")."""
        return cls(cls.SELECTOR, value)

    def to_selector(self) -> str:
        """Render the Playwright selector string for this locator."""
        return self._TEMPLATES[self.strategy].format(q=_quote(self.value), v=self.value)

    def __str__(self) -> str:
        return f"By.{self.strategy}: {self.value}"


# Direct children of the current element, used for one-level child scans.
CHILDREN = By.xpath("*")


__all__ = [
    "By",
    "CHILDREN",
]
