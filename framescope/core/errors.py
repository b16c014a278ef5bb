"""
Errors - Self-describing failures for element queries, scopes and waits.

Every selector-related error carries the reconstructed full selector and
the frame path it was evaluated in, so a failing test explains itself
without being re-run.
"""

from typing import Optional


class FrameScopeError(Exception):
    """Base class for all framescope errors."""


class SelectorError(FrameScopeError):
    """An element query did not match the expected shape."""

    def __init__(self, message: str, selector: str = "", frame_path: str = ""):
        self.selector = selector
        self.frame_path = frame_path
        if frame_path:
            message = f"{message} Frame: '{frame_path}'"
        super().__init__(message)


class ElementNotFoundError(SelectorError):
    """A required first/single/last query matched zero elements."""

    def __init__(self, selector: str, frame_path: str = "", message: Optional[str] = None):
        super().__init__(
            message or f"Sequence contains no elements. Selector: '{selector}'",
            selector,
            frame_path,
        )


class MultipleElementsError(SelectorError):
    """A query allowing at most one match found more."""

    def __init__(self, selector: str, actual: int, frame_path: str = ""):
        self.actual = actual
        super().__init__(
            f"Sequence contains more than one element. Selector: '{selector}', "
            f"Actual count: '{actual}'.",
            selector,
            frame_path,
        )


class SequenceCountError(SelectorError):
    """An exact-count or index-bound check failed."""

    def __init__(
        self,
        message: str,
        selector: str,
        actual: int,
        expected: Optional[int] = None,
        index: Optional[int] = None,
        frame_path: str = "",
    ):
        self.actual = actual
        self.expected = expected
        self.index = index
        super().__init__(message, selector, frame_path)

    @classmethod
    def count_mismatch(cls, selector: str, expected: int, actual: int, frame_path: str = "") -> "SequenceCountError":
        return cls(
            f"Element count in sequence is different from the expected value. "
            f"Selector: '{selector}', Expected value: '{expected}', Actual value: '{actual}'.",
            selector,
            actual,
            expected=expected,
            frame_path=frame_path,
        )

    @classmethod
    def index_out_of_range(cls, selector: str, index: int, actual: int, frame_path: str = "") -> "SequenceCountError":
        return cls(
            f"Index is out of range. Selector: '{selector}', "
            f"Sequence contains {actual} elements, Current index: '{index}'.",
            selector,
            actual,
            index=index,
            frame_path=frame_path,
        )


class UnexpectedTagError(SelectorError):
    """The located element has a different tag than required."""

    def __init__(self, message: str, selector: str, tag_name: str, frame_path: str = ""):
        self.tag_name = tag_name
        super().__init__(message, selector, frame_path)


class ScopeActivationError(FrameScopeError):
    """Switching the driver to a window or frame failed."""

    def __init__(self, message: str, frame_path: str = "", window_handle: Optional[str] = None):
        self.frame_path = frame_path
        self.window_handle = window_handle
        super().__init__(message)


class WaitTimeoutError(FrameScopeError):
    """A condition or action did not succeed within the allotted time.

    The last observed failure, if any, is available as ``__cause__``.
    """

    def __init__(self, message: Optional[str], timeout_ms: int, attempts: int):
        self.timeout_ms = timeout_ms
        self.attempts = attempts
        super().__init__(message or f"Condition not met within {timeout_ms} ms ({attempts} attempts).")


class InvalidRedirectError(FrameScopeError):
    """Navigation was requested without any usable URL."""

    def __init__(self, message: str = "Cannot navigate: no URL given and no base URL configured."):
        super().__init__(message)


class AlertNotVisibleError(FrameScopeError):
    """An alert operation was attempted while no alert is open."""

    def __init__(self, message: str = "Alert not visible."):
        super().__init__(message)


class TestDroppedError(FrameScopeError):
    """The test was dropped on purpose by the test author."""

    __test__ = False

    def __init__(self, message: str):
        super().__init__(f"Test forcibly dropped: {message}")
