import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testsuites.fakes import FakeDialog, FakeElement, FakeFrame, FakePage, document
from web_helpers.common import set_config
from web_helpers.framework.browser import Browser
from web_helpers.framework.exceptions import (
    ElementNotFoundError,
    InvalidOperationError,
    NoAlertPresentError,
    NoSuchFrameError,
)
from web_helpers.framework.host import Host
from web_helpers.framework.locators import By


@pytest.fixture
def frames():
    inner = FakeFrame(name="editor", document=document(FakeElement("p", text="inside", id="body")))
    by_id = FakeFrame(name="", document=document(FakeElement("p", text="by id", id="body")))
    return {"editor": inner, "by_id": by_id}


@pytest.fixture
def page(frames):
    top = document(
        FakeElement("p", text="top", id="body"),
        FakeElement("a", text="Menu", id="menu"),
        FakeElement("iframe", id="payment", frame=frames["by_id"]),
    )
    return FakePage(document=top, child_frames=[frames["editor"], frames["by_id"]])


@pytest.fixture
def browser(page):
    return Browser(page, host=Host("example.com"), default_timeout=1000, poll_interval=100)


def test_none_page_rejected():
    with pytest.raises(ValueError):
        Browser(None)


@pytest.mark.P0
def test_navigate_to_path_uses_host(browser, page):
    browser.navigate_to_path("/login")
    assert page.visited == ["http://example.com/login"]
    assert browser.current_url == "http://example.com/login"


def test_navigate_to_path_without_host_fails(page):
    browser = Browser(page)
    with pytest.raises(InvalidOperationError):
        browser.navigate_to_path("/login")
    assert page.visited == []


def test_navigate_to_url_bypasses_host(browser, page):
    browser.navigate_to_url("https://other.example.org/x")
    assert page.visited == ["https://other.example.org/x"]


def test_lookups_delegate_to_current_document(browser):
    assert browser.get_text(By.id("body")) == "top"
    assert browser.exists(By.id("menu"))
    assert not browser.exists(By.id("nope"))


def test_switch_to_frame_by_name_routes_lookups(browser):
    browser.switch_to_frame("editor")
    assert browser.get_text(By.id("body")) == "inside"

    browser.switch_to_default_frame()
    assert browser.get_text(By.id("body")) == "top"


def test_switch_to_frame_by_element_id(browser):
    browser.switch_to_frame("payment")
    assert browser.get_text(By.id("body")) == "by id"


def test_switch_to_missing_frame_fails(browser):
    with pytest.raises(NoSuchFrameError) as excinfo:
        browser.switch_to_frame("nope")
    assert excinfo.value.frame_id == "nope"
    # Lookups stay where they were.
    assert browser.get_text(By.id("body")) == "top"


def test_hover_element_moves_pointer_without_click(browser, page):
    menu = page.query_selector(By.id("menu").to_selector())

    browser.hover_element(By.id("menu"))

    assert menu.hovers == 1
    assert menu.clicks == 0
    with pytest.raises(ElementNotFoundError):
        browser.hover_element(By.id("nope"))


# -----------------------------------------------------------------------------
# Dialogs
# -----------------------------------------------------------------------------

def _delete_button(page, dialog):
    button = FakeElement("button", text="Delete", id="delete", dialog=dialog)
    page.main_frame.document.children[0].children.append(button)
    button.owner = page.main_frame
    return button


@pytest.mark.P0
def test_expect_alert_dialog_accepts_dialog_opened_by_click(browser, page):
    dialog = FakeDialog("Delete item?", type="confirm")
    _delete_button(page, dialog)

    with browser.expect_alert_dialog() as dialogs:
        browser.click(By.id("delete"))

    assert dialog.accepted
    assert [d.message for d in dialogs] == ["Delete item?"]


def test_expect_alert_dialog_covers_alert_on_page_load(browser, page):
    dialog = FakeDialog("Welcome")
    page.load_dialogs["http://example.com/home"] = dialog

    with browser.expect_alert_dialog():
        browser.navigate_to_path("/home")

    assert dialog.accepted


def test_expect_alert_dialog_without_dialog_fails(browser):
    with pytest.raises(NoAlertPresentError):
        with browser.expect_alert_dialog():
            browser.click(By.id("menu"))


def test_expect_alert_dialog_cannot_be_nested(browser):
    with pytest.raises(InvalidOperationError):
        with browser.expect_alert_dialog():
            with browser.expect_alert_dialog():
                pass


def test_unexpected_dialog_is_dismissed_and_click_returns(browser, page):
    dialog = FakeDialog("Leave page?", type="confirm")
    _delete_button(page, dialog)

    browser.click(By.id("delete"))

    assert dialog.dismissed
    assert not dialog.accepted
    with pytest.raises(NoAlertPresentError):
        browser.accept_alert_dialog()


def test_held_dialog_is_accepted_later(page):
    browser = Browser(page, unexpected_dialogs="hold")
    dialog = FakeDialog("Session expires soon")

    # Opened by a page timer, not by an action.
    page.emit("dialog", dialog)
    browser.accept_alert_dialog()

    assert dialog.accepted


def test_held_dialog_stalls_the_action_that_opened_it(page):
    browser = Browser(page, unexpected_dialogs="hold")
    _delete_button(page, FakeDialog())

    with pytest.raises(PlaywrightTimeoutError):
        browser.click(By.id("delete"))


def test_returning_to_a_page_keeps_a_single_dialog_listener(page):
    browser = Browser(page, unexpected_dialogs="hold")
    popup = FakePage(context=page.context)
    browser.switch_to_most_recent_page()
    assert browser.page is popup

    page.context.pages.remove(page)
    page.context.pages.append(page)
    browser.switch_to_most_recent_page()

    assert browser.page is page
    assert len(page.handlers["dialog"]) == 1
    page.emit("dialog", FakeDialog())
    browser.accept_alert_dialog()
    with pytest.raises(NoAlertPresentError):
        browser.accept_alert_dialog()


def test_dialog_of_closed_page_is_not_pending(page):
    browser = Browser(page, unexpected_dialogs="hold")
    page.emit("dialog", FakeDialog())
    page.close()

    with pytest.raises(NoAlertPresentError):
        browser.accept_alert_dialog()


def test_unknown_dialog_policy_rejected(page):
    with pytest.raises(ValueError):
        Browser(page, unexpected_dialogs="ignore")


def test_accept_alert_dialog_without_dialog_fails(browser):
    with pytest.raises(NoAlertPresentError):
        browser.accept_alert_dialog()


def test_switch_to_most_recent_page(browser, page):
    popup = FakePage(document=document(FakeElement("h1", text="Popup", id="title")), context=page.context)

    browser.switch_to_most_recent_page()

    assert browser.page is popup
    assert popup.brought_to_front == 1
    assert browser.get_text(By.id("title")) == "Popup"
    # The new page's dialogs are watched too.
    assert len(popup.handlers["dialog"]) == 1


@pytest.mark.P0
def test_shutdown_is_idempotent(browser, page):
    browser.shutdown()
    browser.shutdown()

    assert page.context.closed == 1
    # The browser belongs to whoever launched it.
    assert page.context.browser.closed == 0
    with pytest.raises(InvalidOperationError):
        browser.click(By.id("menu"))


def test_shutdown_closes_owned_browser(page):
    browser = Browser(page, owns_browser=True)

    browser.shutdown()

    assert page.context.closed == 1
    assert page.context.browser.closed == 1


def test_context_manager_shuts_down(page):
    with Browser(page) as browser:
        browser.click(By.id("menu"))
    assert page.context.closed == 1


def test_from_config_reads_host_and_timeouts(page):
    set_config("browser.host", "staging.example.com")
    set_config("timeouts.default", 7000)

    browser = Browser.from_config(page)
    browser.navigate_to_path("/home")

    assert page.visited == ["http://staging.example.com/home"]
    assert browser.default_timeout == 7000
    assert browser.poll_interval == 500


def test_screenshot_saved_to_configured_dir(browser, tmp_path):
    set_config("screenshots.dir", str(tmp_path / "shots"))

    path = browser.screenshot("after_login", attach_to_allure=False)

    assert path.parent == tmp_path / "shots"
    assert path.name.startswith("after_login_")
    assert path.read_bytes().startswith(b"\x89PNG")
