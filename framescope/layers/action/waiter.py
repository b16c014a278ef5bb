"""
Polling Waiter - Retry conditions and actions until a deadline.

Every attempt ("tick") produces an explicit ``TickResult``:

- SATISFIED: the condition held / the action completed; stop.
- PENDING: not yet; try again after the interval if time remains.
- FATAL: an error that must reach the caller immediately.

The deadline is checked after each attempt against wall-clock time, so
at least one attempt always runs and slow attempts use up the budget.
A hung driver call cannot be interrupted and may overrun the timeout.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Type

from selenium.common.exceptions import (
    InvalidElementStateException,
    StaleElementReferenceException,
)

from framescope.core.errors import WaitTimeoutError

logger = logging.getLogger(__name__)

# Driver errors that usually clear up on their own (re-render, overlay).
# ElementNotInteractableException derives from InvalidElementStateException.
TRANSIENT_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    StaleElementReferenceException,
    InvalidElementStateException,
)


class TickOutcome(Enum):
    SATISFIED = "satisfied"
    PENDING = "pending"
    FATAL = "fatal"


@dataclass
class TickResult:
    """Outcome of a single attempt."""
    outcome: TickOutcome
    value: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def satisfied(cls, value: Any = None) -> "TickResult":
        return cls(TickOutcome.SATISFIED, value=value)

    @classmethod
    def pending(cls, error: Optional[BaseException] = None) -> "TickResult":
        return cls(TickOutcome.PENDING, error=error)

    @classmethod
    def fatal(cls, error: BaseException) -> "TickResult":
        return cls(TickOutcome.FATAL, error=error)


class PollingWaiter:
    """
    Repeat a condition or an action at a fixed interval.

    Args:
        interval_ms: Default pause between attempts. Keep it >= 250 ms to
            avoid hammering the driver.
        clock: Monotonic clock in seconds (injectable for tests).
        sleep: Sleep function taking seconds (injectable for tests).

    Example:
        >>> waiter = PollingWaiter()
        >>> waiter.wait_for(lambda: browser.first("#status").get_text() == "Done",
        ...                 timeout_ms=5000, message="Status never became 'Done'.")
    """

    def __init__(
        self,
        interval_ms: int = 500,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.interval_ms = interval_ms
        self.clock = clock
        self._sleep = sleep

    def sleep(self, milliseconds: int) -> None:
        if milliseconds > 0:
            self._sleep(milliseconds / 1000)

    def wait_for(
        self,
        predicate: Callable[[], bool],
        timeout_ms: int,
        message: Optional[str] = None,
        ignore_transient: bool = True,
        interval_ms: Optional[int] = None,
    ) -> None:
        """
        Wait until ``predicate()`` returns a truthy value.

        Stale-element and invalid-element-state errors count as "not yet"
        when ``ignore_transient`` is set and are re-raised otherwise. Any
        other exception from the predicate is re-raised immediately.

        Raises:
            WaitTimeoutError: if the predicate is still false at the deadline.
        """
        if predicate is None:
            raise ValueError("Condition cannot be None.")

        def tick() -> TickResult:
            try:
                return TickResult.satisfied() if predicate() else TickResult.pending()
            except TRANSIENT_EXCEPTIONS as e:
                if not ignore_transient:
                    return TickResult.fatal(e)
                return TickResult.pending(e)
            except Exception as e:
                return TickResult.fatal(e)

        result, attempts = self._poll(tick, timeout_ms, interval_ms)
        if result.outcome is TickOutcome.FATAL:
            raise result.error
        if result.outcome is TickOutcome.PENDING:
            raise WaitTimeoutError(message, timeout_ms, attempts) from result.error

    def wait_until(
        self,
        check: Callable[[], Any],
        timeout_ms: int,
        message: Optional[str] = None,
        interval_ms: Optional[int] = None,
    ) -> None:
        """
        Wait until ``check()`` returns a truthy value.

        Unlike ``wait_for`` every exception raised by ``check`` counts as
        "not yet satisfied"; the last one is chained to the timeout error.

        Raises:
            WaitTimeoutError: if the check never passes before the deadline.
        """
        if check is None:
            raise ValueError("Check cannot be None.")

        def tick() -> TickResult:
            try:
                return TickResult.satisfied() if check() else TickResult.pending()
            except Exception as e:
                return TickResult.pending(e)

        result, attempts = self._poll(tick, timeout_ms, interval_ms)
        if result.outcome is not TickOutcome.SATISFIED:
            raise WaitTimeoutError(message, timeout_ms, attempts) from result.error

    def retry_until_success(
        self,
        action: Callable[[], Any],
        timeout_ms: int,
        interval_ms: Optional[int] = None,
        message: Optional[str] = None,
    ) -> Any:
        """
        Run ``action`` until it completes without raising.

        Returns:
            Whatever the successful call returned.

        Raises:
            WaitTimeoutError: at the deadline, when ``message`` is given;
                the last exception is its ``__cause__``.
            Exception: the last exception itself when no message is given.
        """
        if action is None:
            raise ValueError("Action cannot be None.")

        def tick() -> TickResult:
            try:
                return TickResult.satisfied(action())
            except Exception as e:
                return TickResult.pending(e)

        result, attempts = self._poll(tick, timeout_ms, interval_ms)
        if result.outcome is TickOutcome.SATISFIED:
            return result.value
        if message is not None:
            raise WaitTimeoutError(message, timeout_ms, attempts) from result.error
        raise result.error

    def _poll(
        self,
        tick: Callable[[], TickResult],
        timeout_ms: int,
        interval_ms: Optional[int],
    ) -> Tuple[TickResult, int]:
        """Run ticks until one is conclusive or time runs out."""
        interval = self.interval_ms if interval_ms is None else interval_ms
        start = self.clock()
        attempts = 0

        while True:
            result = tick()
            attempts += 1
            if result.outcome is not TickOutcome.PENDING:
                return result, attempts

            elapsed_ms = (self.clock() - start) * 1000
            # no further tick if it would start past the deadline
            if elapsed_ms + interval > timeout_ms:
                logger.debug(
                    "Gave up after %d attempts in %.0f ms (timeout %d ms): %s",
                    attempts, elapsed_ms, timeout_ms, result.error,
                )
                return result, attempts

            self.sleep(interval)
