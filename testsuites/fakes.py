"""
In-memory stand-ins for the Playwright handles the helpers talk to.

Only the calls the helpers make are implemented. Selector support is
limited to what By renders for id/name lookups and the direct-children
XPath, which is all the unit tests need.

Two Playwright behaviours are modelled because the helpers depend on them:

    - ElementHandle.type() on an <input> that is not focused moves the
      caret to the start before typing.
    - While a page has a "dialog" listener, an action that opens a dialog
      does not return until someone accepts or dismisses it. Without a
      listener the dialog is dismissed automatically.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from web_helpers.framework.element_inspector import TAG_NAME_SCRIPT, VALUE_SCRIPT
from web_helpers.framework.search_context import CARET_TO_END_SCRIPT


_ATTRIBUTE_SELECTOR = re.compile(r'^(\w*)\[([\w-]+)="((?:[^"\\]|\\.)*)"\]$')


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


class FakeElement:
    """Minimal ElementHandle: a node in a tree with text, value and state."""

    def __init__(
        self,
        tag: str,
        text: str = "",
        children: Optional[List["FakeElement"]] = None,
        value: Optional[str] = None,
        checked: bool = False,
        visible: bool = True,
        options: Optional[List[str]] = None,
        frame: Optional["FakeFrame"] = None,
        events: Optional[List[str]] = None,
        dialog: Optional["FakeDialog"] = None,
        **attrs: str,
    ):
        self.tag = tag
        self.text = text
        self.children = list(children or [])
        self.value = value
        self.checked = checked
        self.visible = visible
        self.options = options
        self.frame = frame
        self.dialog = dialog
        self.owner: Optional["FakeFrame"] = None
        self.caret = 0
        self.attrs: Dict[str, str] = attrs
        self.events = events if events is not None else []
        self.clicks = 0
        self.hovers = 0
        self.typed: List[str] = []

    # -- tree ---------------------------------------------------------------

    def descendants(self) -> List["FakeElement"]:
        found = []
        for child in self.children:
            found.append(child)
            found.extend(child.descendants())
        return found

    def _matches(self, selector: str) -> List["FakeElement"]:
        if selector == "xpath=*":
            return list(self.children)
        parts = [p.strip() for p in selector.split(",")]
        patterns = []
        for part in parts:
            match = _ATTRIBUTE_SELECTOR.match(part)
            if match is None:
                raise ValueError(f"Fake does not support selector: {selector}")
            tag, attr, value = match.groups()
            patterns.append((tag, attr, _unescape(value)))
        return [
            el for el in self.descendants()
            if any(
                (not tag or el.tag == tag) and el.attrs.get(attr) == value
                for tag, attr, value in patterns
            )
        ]

    def query_selector(self, selector: str) -> Optional["FakeElement"]:
        matches = self._matches(selector)
        return matches[0] if matches else None

    def query_selector_all(self, selector: str) -> List["FakeElement"]:
        return self._matches(selector)

    # -- inspection ---------------------------------------------------------

    def evaluate(self, script: str) -> Any:
        if script == TAG_NAME_SCRIPT:
            return self.tag.lower()
        if script == VALUE_SCRIPT:
            return self.value if self.value is not None else self.attrs.get("value")
        if script == CARET_TO_END_SCRIPT:
            if self.tag in ("input", "textarea"):
                self.caret = len(self.value or "")
            return None
        raise ValueError(f"Fake does not evaluate: {script}")

    def inner_text(self) -> str:
        return self.text

    def is_visible(self) -> bool:
        return self.visible

    def is_checked(self) -> bool:
        return self.checked

    def content_frame(self) -> Optional["FakeFrame"]:
        return self.frame

    def owner_frame(self) -> Optional["FakeFrame"]:
        return self.owner

    @property
    def page(self) -> Optional["FakePage"]:
        return self.owner.page if self.owner else None

    @property
    def focused(self) -> bool:
        return self.page is not None and self.page.focused is self

    # -- interaction --------------------------------------------------------

    def click(self) -> None:
        self.clicks += 1
        self.events.append(f"click:{self.label}")
        if self.attrs.get("type") in ("checkbox", "radio"):
            self.checked = not self.checked if self.attrs["type"] == "checkbox" else True
        if self.dialog is not None:
            self.page.open_dialog(self.dialog)

    def hover(self) -> None:
        self.hovers += 1
        self.events.append(f"hover:{self.label}")

    def focus(self) -> None:
        self.events.append(f"focus:{self.label}")
        if self.page is not None:
            self.page.focused = self

    def type(self, text: str) -> None:
        if not self.focused and self.tag == "input":
            self.caret = 0
        self.focus()
        self.insert_text(text)

    def insert_text(self, text: str) -> None:
        """Insert at the caret, as keystrokes into the focused field do."""
        current = self.value or ""
        self.value = current[:self.caret] + text + current[self.caret:]
        self.caret += len(text)
        self.typed.append(text)
        self.events.append(f"type:{self.label}")

    def select_option(self, label: str, timeout: Optional[float] = None) -> List[str]:
        if label not in (self.options or []):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for option '{label}'")
        self.value = label
        self.events.append(f"select:{label}")
        return [label]

    @property
    def label(self) -> str:
        return self.attrs.get("id") or self.text or self.attrs.get("value") or self.tag

    def __repr__(self) -> str:
        return f"FakeElement(<{self.tag}> {self.label!r})"


class FakeFrame:
    """Frame with a document root and child frames."""

    def __init__(self, name: str = "", document: Optional[FakeElement] = None,
                 child_frames: Optional[List["FakeFrame"]] = None):
        self.name = name
        self.document = document or FakeElement("html")
        self.child_frames = list(child_frames or [])
        self.page: Optional["FakePage"] = None
        for element in [self.document] + self.document.descendants():
            element.owner = self

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.document.query_selector(selector)

    def query_selector_all(self, selector: str) -> List[FakeElement]:
        return self.document.query_selector_all(selector)


class FakeDialog:
    def __init__(self, message: str = "Are you sure?", type: str = "alert"):
        self.message = message
        self.type = type
        self.page: Optional["FakePage"] = None
        self.accepted = False
        self.dismissed = False

    @property
    def handled(self) -> bool:
        return self.accepted or self.dismissed

    def accept(self) -> None:
        if self.handled:
            raise PlaywrightError("Cannot accept dialog which is already handled!")
        self.accepted = True

    def dismiss(self) -> None:
        if self.handled:
            raise PlaywrightError("Cannot dismiss dialog which is already handled!")
        self.dismissed = True


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page

    def type(self, text: str) -> None:
        if self.page.focused is not None:
            self.page.focused.insert_text(text)


class FakeBrowserHandle:
    def __init__(self):
        self.closed = 0

    def close(self) -> None:
        self.closed += 1


class FakeContext:
    def __init__(self, browser: Optional[FakeBrowserHandle] = None):
        self.pages: List["FakePage"] = []
        self.browser = browser
        self.closed = 0

    def close(self) -> None:
        self.closed += 1


class FakePage:
    """Page whose lookups go to its main frame."""

    def __init__(self, document: Optional[FakeElement] = None, context: Optional[FakeContext] = None,
                 child_frames: Optional[List[FakeFrame]] = None, url: str = "about:blank"):
        self.main_frame = FakeFrame(document=document, child_frames=child_frames)
        self.context = context or FakeContext(FakeBrowserHandle())
        self.context.pages.append(self)
        self.url = url
        self.visited: List[str] = []
        self.handlers: Dict[str, List[Callable]] = {}
        self.brought_to_front = 0
        self.keyboard = FakeKeyboard(self)
        self.focused: Optional[FakeElement] = None
        self.closed = False
        # url -> dialog opened while that url loads
        self.load_dialogs: Dict[str, FakeDialog] = {}
        self._bind(self.main_frame)

    def _bind(self, frame: FakeFrame) -> None:
        frame.page = self
        for child in frame.child_frames:
            self._bind(child)

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.main_frame.query_selector(selector)

    def query_selector_all(self, selector: str) -> List[FakeElement]:
        return self.main_frame.query_selector_all(selector)

    def goto(self, url: str) -> None:
        self.visited.append(url)
        self.url = url
        if url in self.load_dialogs:
            self.open_dialog(self.load_dialogs[url])

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any) -> None:
        if event == "dialog":
            payload.page = self
        for handler in self.handlers.get(event, []):
            handler(payload)

    def open_dialog(self, dialog: FakeDialog) -> None:
        """Open a dialog from inside an action, the way Playwright reports it."""
        if not self.handlers.get("dialog"):
            dialog.page = self
            dialog.dismiss()
            return
        self.emit("dialog", dialog)
        if not dialog.handled:
            # A real page would hang here; fail fast instead.
            raise PlaywrightTimeoutError("Action stalled: dialog left open by every listener")

    def is_closed(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    def bring_to_front(self) -> None:
        self.brought_to_front += 1

    def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        png = b"\x89PNG fake"
        if path:
            Path(path).write_bytes(png)
        return png


class FakeClock:
    """Replacement for the `time` module inside web_helpers.framework.waits."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def document(*children: FakeElement) -> FakeElement:
    """Build an <html><body>...</body></html> tree."""
    return FakeElement("html", children=[FakeElement("body", children=list(children))])
