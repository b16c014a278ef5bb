"""
Scope Context - Window/iframe activation for one test run.

A scope is one browsing context: the top document of a window or a
(possibly nested) iframe. The driver can only look at one scope at a
time, so every query first activates the scope its references live in.

The run keeps a marker with the id of the scope the driver is focused
on. Activating the already-active scope is a no-op; anything else
replays the switch chain from the outermost context inwards.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional, TYPE_CHECKING

from selenium.common.exceptions import (
    NoSuchFrameException,
    NoSuchWindowException,
    StaleElementReferenceException,
)
from selenium.webdriver.common.by import By

from framescope.core.config import RunConfig
from framescope.core.errors import ScopeActivationError
from framescope.layers.action.waiter import PollingWaiter
from framescope.layers.elements.arena import ReferenceArena

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

_SWITCH_ERRORS = (NoSuchFrameException, NoSuchWindowException, StaleElementReferenceException)


@dataclass(frozen=True)
class ScopeDescriptor:
    """Identity and location of one browsing context."""
    parent: Optional["ScopeDescriptor"] = None
    frame_selector: Optional[str] = None
    frame_by: str = By.CSS_SELECTOR
    window_handle: Optional[str] = None
    scope_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if self.frame_selector is not None and self.parent is None:
            raise ValueError(
                f"Frame scope '{self.frame_selector}' must be nested in a parent scope."
            )

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def frame_path(self) -> str:
        """Frame selectors from the top document down to this scope."""
        selectors: List[str] = []
        scope: Optional[ScopeDescriptor] = self
        while scope is not None:
            if scope.frame_selector:
                selectors.append(scope.frame_selector)
            scope = scope.parent
        return " > ".join(reversed(selectors))


class RunContext:
    """
    State owned by a single test run.

    Holds the driver, the active scope marker, the reference arena and the
    waiter. A run context must only be used from the thread that owns it;
    parallel runs each create their own.

    Example:
        >>> run = RunContext(driver, RunConfig(base_url="https://localhost:5000"))
        >>> browser = run.browser()
        >>> browser.navigate_to_url("/login")
    """

    def __init__(
        self,
        driver: "WebDriver",
        config: Optional[RunConfig] = None,
        waiter: Optional[PollingWaiter] = None,
    ):
        self.driver = driver
        self.config = config or RunConfig()
        self.waiter = waiter or PollingWaiter(interval_ms=self.config.wait_interval_ms)
        self.arena = ReferenceArena()
        self.current_scope: Optional[uuid.UUID] = None
        self.root_scope = ScopeDescriptor()
        self._owner_thread = threading.get_ident()

    def browser(self):
        """Return a browser scope for the top-level document."""
        from framescope.core.browser import BrowserScope
        return BrowserScope(self, self.root_scope)

    def log_prefix(self) -> str:
        return f"(#{threading.get_ident()})"

    def is_active(self, scope: ScopeDescriptor) -> bool:
        return self.current_scope == scope.scope_id

    def activate(self, scope: ScopeDescriptor) -> None:
        """
        Focus the driver on ``scope``.

        Returns immediately when the scope is already active. A frame scope
        first returns to the window it was entered in, then activates its
        parent (a no-op when the parent is the active scope) and switches
        into its frame. The marker is cleared while switching and set to
        ``scope`` once the driver is there.

        Raises:
            ScopeActivationError: if a window or frame in the chain is gone.
                The marker is left cleared, so the next activation starts
                from scratch.
        """
        if self.current_scope == scope.scope_id:
            return

        if threading.get_ident() != self._owner_thread:
            logger.warning(
                "%s Scope activated outside the thread that owns this run.",
                self.log_prefix(),
            )

        try:
            if scope.parent is not None:
                if self._switch_window(scope.window_handle):
                    # the marker described a context of another window
                    self.current_scope = None
                self.activate(scope.parent)
                self.current_scope = None
                self._switch_to_frame(scope)
            else:
                self.current_scope = None
                self._switch_root(scope)
        except ScopeActivationError:
            self.current_scope = None
            raise

        self.current_scope = scope.scope_id

    def invalidate(self) -> None:
        """Forget the active scope; the next activation does a full switch."""
        self.current_scope = None

    def get_internal_driver(self) -> "WebDriver":
        """
        Return the raw driver without activating any scope.

        Unsafe: callers may switch windows/frames behind the run's back,
        so the marker is invalidated.
        """
        self.invalidate()
        return self.driver

    def _switch_window(self, handle: Optional[str]) -> bool:
        """Switch to window ``handle`` unless it is already focused."""
        driver = self.driver
        if handle is None:
            return False
        try:
            if driver.current_window_handle == handle:
                return False
            logger.debug("%s Switching to window %s", self.log_prefix(), handle)
            driver.switch_to.window(handle)
        except _SWITCH_ERRORS as e:
            logger.warning("%s Window %s is no longer available: %s", self.log_prefix(), handle, e)
            raise ScopeActivationError(
                f"Cannot activate window '{handle}'.",
                window_handle=handle,
            ) from e
        return True

    def _switch_root(self, scope: ScopeDescriptor) -> None:
        self._switch_window(scope.window_handle)
        try:
            self.driver.switch_to.default_content()
        except _SWITCH_ERRORS as e:
            logger.warning("%s Window %s is no longer available: %s", self.log_prefix(), scope.window_handle, e)
            raise ScopeActivationError(
                f"Cannot activate window '{scope.window_handle}'.",
                window_handle=scope.window_handle,
            ) from e

    def _switch_to_frame(self, scope: ScopeDescriptor) -> None:
        if scope.frame_selector is None:
            return

        driver = self.driver
        logger.debug("%s Switching to frame '%s'", self.log_prefix(), scope.frame_path)
        try:
            frames: List[Any] = driver.find_elements(scope.frame_by, scope.frame_selector)
            if not frames:
                raise ScopeActivationError(
                    f"Frame element not found. Selector: '{scope.frame_selector}', "
                    f"Frame: '{scope.frame_path}'",
                    frame_path=scope.frame_path,
                    window_handle=scope.window_handle,
                )
            driver.switch_to.frame(frames[0])
        except _SWITCH_ERRORS as e:
            logger.warning("%s Frame '%s' is no longer available: %s", self.log_prefix(), scope.frame_path, e)
            raise ScopeActivationError(
                f"Cannot activate frame. Frame: '{scope.frame_path}'",
                frame_path=scope.frame_path,
                window_handle=scope.window_handle,
            ) from e
