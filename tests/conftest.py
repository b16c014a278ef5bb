"""Fakes shared by the unit tests: a call-recording driver and a manual clock."""

from typing import Any, Dict, List, Optional

import pytest
from selenium.common.exceptions import (
    NoAlertPresentException,
    NoSuchFrameException,
    NoSuchWindowException,
)

from framescope.core.config import RunConfig
from framescope.core.scope import RunContext
from framescope.layers.action.waiter import PollingWaiter


class FakeElement:
    """An element; ``children`` maps selector -> elements, ``frame`` is an iframe document."""

    def __init__(
        self,
        name: str,
        tag: str = "div",
        text: str = "",
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        frame: Optional[Dict[str, List["FakeElement"]]] = None,
        attributes: Optional[Dict[str, str]] = None,
        displayed: bool = True,
    ):
        self.name = name
        self.tag_name = tag
        self.text = text
        self.children = children or {}
        self.frame = frame
        self.attributes = attributes or {}
        self.displayed = displayed
        self.actions: List[Any] = []
        self.driver: Optional["FakeDriver"] = None

    def find_elements(self, by, value):
        if self.driver is not None:
            self.driver.calls.append(("find", self.name, value))
        return list(self.children.get(value, []))

    def click(self):
        self.actions.append("click")

    def submit(self):
        self.actions.append("submit")

    def send_keys(self, text):
        self.actions.append(("send_keys", text))

    def clear(self):
        self.actions.append("clear")

    def get_attribute(self, name):
        return self.attributes.get(name)

    def is_displayed(self):
        return self.displayed

    def is_enabled(self):
        return True

    def __repr__(self):
        return f"<FakeElement {self.name}>"


class FakeAlert:
    def __init__(self, text):
        self.text = text
        self.accepted = False
        self.dismissed = False

    def accept(self):
        self.accepted = True

    def dismiss(self):
        self.dismissed = True


class FakeSwitchTo:
    def __init__(self, driver: "FakeDriver"):
        self._driver = driver

    def window(self, handle):
        driver = self._driver
        driver.calls.append(("window", handle))
        if handle not in driver.windows:
            raise NoSuchWindowException(f"no such window: {handle}")
        driver.current_window_handle = handle
        driver.document = driver.windows[handle]

    def default_content(self):
        driver = self._driver
        driver.calls.append(("default_content",))
        driver.document = driver.windows[driver.current_window_handle]

    def frame(self, element):
        driver = self._driver
        driver.calls.append(("frame", getattr(element, "name", element)))
        if getattr(element, "frame", None) is None:
            raise NoSuchFrameException(f"not a frame: {element}")
        driver.document = element.frame

    @property
    def alert(self):
        if self._driver.alert is None:
            raise NoAlertPresentException("no such alert")
        return self._driver.alert


class FakeDriver:
    """
    Minimal WebDriver stand-in.

    ``windows`` maps window handle -> top document; a document maps a
    selector string to the elements it matches. Every switch and find is
    appended to ``calls``.
    """

    def __init__(self, windows: Optional[Dict[str, Dict[str, List[FakeElement]]]] = None):
        self.windows = windows or {"main": {}}
        self.current_window_handle = next(iter(self.windows))
        self.document = self.windows[self.current_window_handle]
        self.calls: List[tuple] = []
        self.switch_to = FakeSwitchTo(self)
        self.current_url = "about:blank"
        self.title = "Fake page"
        self.visited: List[str] = []
        self.alert: Optional[FakeAlert] = None
        self.scripts: List[tuple] = []
        self.quit_called = False
        self._adopt(self.windows.values())

    def _adopt(self, documents):
        for document in documents:
            for elements in document.values():
                for element in elements:
                    element.driver = self
                    self._adopt([element.children])
                    if element.frame is not None:
                        self._adopt([element.frame])

    @property
    def window_handles(self):
        return list(self.windows)

    def find_elements(self, by, value):
        self.calls.append(("find", None, value))
        return list(self.document.get(value, []))

    def switch_calls(self):
        return [call for call in self.calls if call[0] != "find"]

    def get(self, url):
        self.visited.append(url)
        self.current_url = url

    def back(self):
        self.calls.append(("back",))

    def forward(self):
        self.calls.append(("forward",))

    def refresh(self):
        self.calls.append(("refresh",))

    def execute_script(self, script, *args):
        self.scripts.append((script, args))
        return None

    def save_screenshot(self, filename):
        self.calls.append(("screenshot", filename))
        return True

    def quit(self):
        self.quit_called = True


class FakeClock:
    """Time only moves when ``sleep`` is called (or ``advance``)."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def waiter(clock):
    return PollingWaiter(interval_ms=100, clock=clock, sleep=clock.sleep)


def frame_page():
    """
    Top document with ``#top`` (containing ``#child``) and ``#topframe``
    whose document holds ``#frame2_text`` and a nested ``#inner`` frame.
    """
    inner_text = FakeElement("inner_text", tag="span", text="deep")
    inner = FakeElement("inner", tag="iframe", frame={"#deep": [inner_text]})
    frame_text = FakeElement("frame2_text", tag="p", text="in frame")
    topframe = FakeElement("topframe", tag="iframe", frame={
        "#frame2_text": [frame_text],
        "#inner": [inner],
    })
    sibling = FakeElement("sibling", tag="iframe", frame={"#frame2_text": [FakeElement("other_text", tag="p")]})
    child = FakeElement("child", tag="span", text="child text")
    top = FakeElement("top", children={"#child": [child]})
    return {
        "#top": [top],
        "#topframe": [topframe],
        "#sibling": [sibling],
    }


@pytest.fixture
def driver():
    return FakeDriver({"main": frame_page()})


@pytest.fixture
def run(driver, waiter):
    return RunContext(driver, RunConfig(base_url="https://host:8080/app", action_wait_ms=0), waiter=waiter)


@pytest.fixture
def browser(run):
    return run.browser()
