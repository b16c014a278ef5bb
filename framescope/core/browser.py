"""
Browser Scope - The test author's handle on one browsing context.

A ``BrowserScope`` wraps the run's driver for a single scope (the top
document, or an iframe entered with ``enter_frame``). Every command first
activates that scope, so a frame wrapper and its parent can be used
interchangeably without manual ``switch_to`` calls.
"""

import logging
import time
from typing import Any, Callable, Optional, TYPE_CHECKING

from selenium.common.exceptions import NoAlertPresentException

from framescope.core.errors import AlertNotVisibleError, TestDroppedError
from framescope.core.scope import RunContext, ScopeDescriptor
from framescope.layers.action import navigator
from framescope.layers.elements.references import (
    ElementCollection,
    SelectBy,
    SelectMethod,
    SeleniumWrapper,
    WrapperKind,
)

if TYPE_CHECKING:
    from selenium.webdriver.common.alert import Alert
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

FRAME_TAGS = ("iframe", "frame")


class BrowserScope(SeleniumWrapper):
    """
    Queries and actions aimed at one browsing context.

    Example:
        >>> browser = RunContext(driver, config).browser()
        >>> browser.navigate_to_url("frametest.html")
        >>> frame = browser.enter_frame("#topframe")
        >>> frame.first("#frame2_text").get_text()
        >>> browser.first("#top").click()   # switches back automatically
    """

    kind = WrapperKind.FRAME_SCOPE

    def __init__(self, run: RunContext, scope: ScopeDescriptor):
        self.run_context = run
        self._select_method: SelectMethod = SelectBy.css_selector
        super().__init__(self, run.arena.add(None, None, scope))

    @property
    def run(self) -> RunContext:
        return self.run_context

    @property
    def config(self):
        return self.run_context.config

    @property
    def action_wait_ms(self) -> int:
        return self.config.action_wait_ms

    @property
    def base_url(self) -> str:
        return self.config.base_url

    # Selector method

    @property
    def select_method(self) -> SelectMethod:
        return self._select_method

    @select_method.setter
    def select_method(self, value: SelectMethod) -> None:
        if value is None:
            raise ValueError(
                "select_method cannot be None. It is used to select elements from the loaded page."
            )
        self._select_method = value

    def set_css_selector(self) -> None:
        self._select_method = SelectBy.css_selector

    # Driver access

    @property
    def driver(self) -> "WebDriver":
        """The driver, focused on this scope."""
        self.activate_scope()
        return self.run.driver

    def get_internal_driver(self) -> "WebDriver":
        """
        Return the driver without activating this scope.

        Unsafe: the active scope marker is cleared, so the next normal
        command performs a full window/frame switch.
        """
        return self.run.get_internal_driver()

    def get_script_executor(self) -> Optional[Callable[..., Any]]:
        """``execute_script`` of the driver, or None if it has none."""
        return getattr(self.driver, "execute_script", None)

    def execute_script(self, script: str, *args) -> Any:
        executor = self.get_script_executor()
        if executor is None:
            logger.debug("%s Driver cannot execute scripts; skipped.", self.run.log_prefix())
            return None
        return executor(script, *args)

    # Queries

    def find_elements(self, selector: str, select_method: Optional[SelectMethod] = None) -> ElementCollection:
        """Find all elements in this scope matching ``selector``."""
        by, value = self._locator(selector, select_method)
        web_elements = list(self.driver.find_elements(by, value))
        return ElementCollection.create(self, self.node, selector, web_elements, self.scope)

    @property
    def title(self) -> str:
        return self.driver.title

    @property
    def current_url(self) -> str:
        return self.driver.current_url

    @property
    def current_url_path(self) -> str:
        return navigator.url_path(self.current_url)

    def get_absolute_url(self, relative_url: str) -> str:
        return navigator.absolute_url(relative_url, self.base_url)

    # Element actions

    def click(self, selector: str, select_method: Optional[SelectMethod] = None) -> "BrowserScope":
        self.first(selector, select_method).click()
        return self.wait()

    def submit(self, selector: str, select_method: Optional[SelectMethod] = None) -> "BrowserScope":
        """Submit the form the first match belongs to."""
        self.first(selector, select_method).submit()
        return self.wait()

    def send_keys(self, selector: str, text: str, select_method: Optional[SelectMethod] = None) -> "BrowserScope":
        """Type ``text`` into every match of ``selector``."""
        for element in self.find_elements(selector, select_method):
            element.send_keys(text)
            self.wait()
        return self

    def clear_elements_content(self, selector: str, select_method: Optional[SelectMethod] = None) -> "BrowserScope":
        for element in self.find_elements(selector, select_method):
            element.clear()
            self.wait()
        return self

    def fire_js_blur(self) -> "BrowserScope":
        self.execute_script(
            "if(document.activeElement && document.activeElement.blur) {document.activeElement.blur()}"
        )
        return self

    # Navigation

    def navigate_to_url(self, url: Optional[str] = None) -> None:
        """
        Navigate to ``url``, or to the base URL when it is omitted.

        Relative URLs are combined with the configured base URL, not
        with the URL of the current page.

        Raises:
            InvalidRedirectError: if there is neither a URL nor a base URL.
        """
        current_url = None
        if url and url.strip().startswith("//"):
            current_url = self.current_url
        target = navigator.resolve_url(url, self.base_url, current_url)

        prefix = self.run.log_prefix()
        logger.debug("%s Start navigation to: %s", prefix, target)
        start = time.perf_counter()
        self.driver.get(target)
        logger.debug(
            "%s Navigation to: '%s' executed in %d ms.",
            prefix, target, (time.perf_counter() - start) * 1000,
        )

    def navigate_back(self) -> None:
        self.driver.back()

    def navigate_forward(self) -> None:
        self.driver.forward()

    def refresh(self) -> None:
        self.driver.refresh()

    def switch_to_tab(self, index: int) -> "BrowserScope":
        """
        Focus the browser tab at ``index`` (in window handle order).

        Raises:
            IndexError: if ``index`` is negative or not below the tab count.
        """
        driver = self.driver
        handles = driver.window_handles
        if not 0 <= index < len(handles):
            raise IndexError(f"Tab index {index} is out of range; {len(handles)} tab(s) are open.")
        driver.switch_to.window(handles[index])
        self.run.invalidate()
        return self

    # Alerts

    def get_alert(self) -> "Alert":
        """
        Raises:
            AlertNotVisibleError: if no alert is open.
        """
        try:
            alert = self.driver.switch_to.alert
        except NoAlertPresentException as e:
            raise AlertNotVisibleError() from e
        if alert is None:
            raise AlertNotVisibleError()
        return alert

    def has_alert(self) -> bool:
        try:
            self.get_alert()
        except AlertNotVisibleError:
            return False
        return True

    def get_alert_text(self) -> str:
        return self.get_alert().text

    def confirm_alert(self) -> "BrowserScope":
        self.get_alert().accept()
        return self.wait()

    def dismiss_alert(self) -> "BrowserScope":
        self.get_alert().dismiss()
        return self.wait()

    # Frames

    def enter_frame(self, selector: str, select_method: Optional[SelectMethod] = None) -> "BrowserScope":
        """
        Return a browser scope for the iframe matched by ``selector``.

        The new scope is nested in this one; queries on it switch into the
        frame, queries on this scope switch back out.

        Raises:
            ElementNotFoundError: if nothing matches ``selector``.
            UnexpectedTagError: if the match is not an iframe/frame.
        """
        method = select_method or self.select_method
        by, value = method(selector)
        handle = self.driver.current_window_handle
        options = ScopeDescriptor(
            parent=self.scope,
            frame_selector=value,
            frame_by=by,
            window_handle=handle,
        )

        iframe = self.first(selector, select_method)
        iframe.check_tag_name(
            FRAME_TAGS,
            f"The selected element '{iframe.full_selector}' is not an iframe element.",
        )
        self.run.driver.switch_to.frame(iframe.web_element)
        self.run.current_scope = options.scope_id
        logger.debug("%s Entered frame '%s'", self.run.log_prefix(), options.frame_path)

        return BrowserScope(self.run, options)

    # Waiting

    def wait(self, milliseconds: Optional[int] = None) -> "BrowserScope":
        """Pause for ``milliseconds`` (default: the configured action wait)."""
        self.run.waiter.sleep(self.action_wait_ms if milliseconds is None else milliseconds)
        return self

    def wait_for(
        self,
        condition: Callable[[], bool],
        timeout_ms: Optional[int] = None,
        message: Optional[str] = None,
        ignore_transient: bool = True,
        interval_ms: Optional[int] = None,
    ) -> "BrowserScope":
        """Wait until ``condition()`` is true. See ``PollingWaiter.wait_for``."""
        self.run.waiter.wait_for(
            condition,
            self._timeout(timeout_ms),
            message,
            ignore_transient=ignore_transient,
            interval_ms=interval_ms,
        )
        return self

    def wait_until(
        self,
        check: Callable[[], Any],
        timeout_ms: Optional[int] = None,
        message: Optional[str] = None,
        interval_ms: Optional[int] = None,
    ) -> "BrowserScope":
        self.run.waiter.wait_until(check, self._timeout(timeout_ms), message, interval_ms=interval_ms)
        return self

    def retry_until_success(
        self,
        action: Callable[[], Any],
        timeout_ms: Optional[int] = None,
        interval_ms: Optional[int] = None,
        message: Optional[str] = None,
    ) -> Any:
        """Repeat ``action`` until it stops raising; returns its result."""
        return self.run.waiter.retry_until_success(
            action, self._timeout(timeout_ms), interval_ms=interval_ms, message=message
        )

    def _timeout(self, timeout_ms: Optional[int]) -> int:
        return self.config.default_timeout_ms if timeout_ms is None else timeout_ms

    # Misc

    def set_timeouts(self, page_load_timeout_s: Optional[float] = None, implicit_wait_s: Optional[float] = None) -> None:
        driver = self.driver
        if page_load_timeout_s is not None:
            driver.set_page_load_timeout(page_load_timeout_s)
        if implicit_wait_s is not None:
            driver.implicitly_wait(implicit_wait_s)

    def take_screenshot(self, filename: str) -> bool:
        """Save a PNG screenshot of the whole window to ``filename``."""
        return self.run.driver.save_screenshot(filename)

    def drop_test(self, message: str) -> None:
        """Fail the current test immediately."""
        raise TestDroppedError(message)
