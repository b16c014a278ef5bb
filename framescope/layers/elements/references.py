"""
Element References - Hierarchical element lookup with scope tracking.

Three kinds of wrapper share one interface (activate the owning scope,
report the full selector, find descendants):

- ``BrowserScope``: the top document or an entered iframe
  (see ``framescope.core.browser``)
- ``ElementCollection``: the read-only result of one find call
- ``ElementReference``: a single element of a collection

Each find registers a node in the run's reference arena whose parent is
the node of the wrapper that was queried. Elements share the node of
their collection, so every element knows the selector path it was
located by and the scope it must activate before it is touched.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from selenium.webdriver.common.by import By

from framescope.core.errors import (
    ElementNotFoundError,
    MultipleElementsError,
    SequenceCountError,
    UnexpectedTagError,
)

if TYPE_CHECKING:
    from selenium.webdriver.remote.webelement import WebElement
    from framescope.core.browser import BrowserScope
    from framescope.core.scope import RunContext, ScopeDescriptor
    from framescope.layers.elements.arena import ReferenceNode

logger = logging.getLogger(__name__)

# Turns a selector string into a (By strategy, value) locator.
SelectMethod = Callable[[str], Tuple[str, str]]


class SelectBy:
    """Selector methods usable as ``select_method`` overrides."""

    @staticmethod
    def css_selector(selector: str) -> Tuple[str, str]:
        return By.CSS_SELECTOR, selector

    @staticmethod
    def xpath(selector: str) -> Tuple[str, str]:
        return By.XPATH, selector

    @staticmethod
    def id(selector: str) -> Tuple[str, str]:
        return By.ID, selector

    @staticmethod
    def name(selector: str) -> Tuple[str, str]:
        return By.NAME, selector

    @staticmethod
    def class_name(selector: str) -> Tuple[str, str]:
        return By.CLASS_NAME, selector

    @staticmethod
    def tag_name(selector: str) -> Tuple[str, str]:
        return By.TAG_NAME, selector

    @staticmethod
    def link_text(selector: str) -> Tuple[str, str]:
        return By.LINK_TEXT, selector

    @staticmethod
    def partial_link_text(selector: str) -> Tuple[str, str]:
        return By.PARTIAL_LINK_TEXT, selector


class WrapperKind(Enum):
    ELEMENT = "element"
    COLLECTION = "collection"
    FRAME_SCOPE = "frame_scope"


class SeleniumWrapper(ABC):
    """
    Common base of browser scopes, collections and elements.

    Provides the selector-keyed shortcut queries on top of
    ``find_elements``.
    """

    kind: WrapperKind

    def __init__(self, browser: "BrowserScope", node: "ReferenceNode"):
        self.browser = browser
        self._node = node

    @property
    def run(self) -> "RunContext":
        return self.browser.run

    @property
    def node(self) -> "ReferenceNode":
        return self._node

    @property
    def node_id(self) -> int:
        return self._node.node_id

    @property
    def selector(self) -> str:
        return self.node.selector

    @property
    def scope(self) -> "ScopeDescriptor":
        return self.node.scope

    @property
    def full_selector(self) -> str:
        return self.run.arena.full_selector(self.node_id)

    @property
    def frame_path(self) -> str:
        return self.scope.frame_path

    def activate_scope(self) -> None:
        """Focus the driver on the scope this wrapper's elements live in."""
        self.run.activate(self.scope)

    @abstractmethod
    def find_elements(self, selector: str, select_method: Optional[SelectMethod] = None) -> "ElementCollection":
        """Find all descendants matching ``selector``."""

    def _locator(self, selector: str, select_method: Optional[SelectMethod]) -> Tuple[str, str]:
        return (select_method or self.browser.select_method)(selector)

    def first(self, selector: str, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        return self.find_elements(selector, select_method).first()

    def first_or_default(self, selector: str, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        return self.find_elements(selector, select_method).first_or_default()

    def single(self, selector: str, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        """Return the only match; raise when there are none or several."""
        return self.find_elements(selector, select_method).single()

    def single_or_default(self, selector: str, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        return self.find_elements(selector, select_method).single_or_default()

    def element_at(self, selector: str, index: int, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        return self.find_elements(selector, select_method).element_at(index)

    def last(self, selector: str, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        return self.find_elements(selector, select_method).last()

    def last_or_default(self, selector: str, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        return self.find_elements(selector, select_method).last_or_default()

    def for_each(
        self,
        selector: str,
        action: Callable[["ElementReference"], Any],
        select_method: Optional[SelectMethod] = None,
    ) -> "SeleniumWrapper":
        """Perform ``action`` on every match of ``selector``."""
        self.find_elements(selector, select_method).for_each(action)
        return self

    def is_displayed(self, selector: str, select_method: Optional[SelectMethod] = None) -> bool:
        """True when every match of ``selector`` is displayed."""
        return all(element.is_displayed() for element in self.find_elements(selector, select_method))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self.full_selector}'>"


class ElementCollection(SeleniumWrapper):
    """
    Read-only, ordered result of a single find call.

    Example:
        >>> rows = browser.find_elements("table tr")
        >>> rows.ensure_count(3)
        >>> rows.element_at(1).first("td").get_text()
    """

    kind = WrapperKind.COLLECTION

    def __init__(self, browser: "BrowserScope", node: "ReferenceNode", elements: Sequence["ElementReference"]):
        super().__init__(browser, node)
        self._elements = tuple(elements)

    @classmethod
    def create(
        cls,
        browser: "BrowserScope",
        parent: "ReferenceNode",
        selector: str,
        web_elements: Sequence["WebElement"],
        scope: "ScopeDescriptor",
    ) -> "ElementCollection":
        """Register one collection node; its elements share it."""
        node = browser.run.arena.add(selector, parent, scope)
        elements = [
            ElementReference(browser, node, web_element, position)
            for position, web_element in enumerate(web_elements)
        ]
        logger.debug("%s '%s' matched %d element(s)", browser.run.log_prefix(), browser.run.arena.full_selector(node.node_id), len(elements))
        return cls(browser, node, elements)

    def find_elements(self, selector: str, select_method: Optional[SelectMethod] = None) -> "ElementCollection":
        """Find descendants of every element, in element order."""
        by, value = self._locator(selector, select_method)
        found: List["WebElement"] = []
        for element in self._elements:
            found.extend(element.find_web_elements(by, value))
        return ElementCollection.create(self.browser, self.node, selector, found, self.scope)

    # Sequence protocol (read-only)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator["ElementReference"]:
        return iter(self._elements)

    def __getitem__(self, index: int) -> "ElementReference":
        if not isinstance(index, int):
            raise TypeError(f"Collection indices must be integers, not {type(index).__name__}")
        return self.element_at(index)

    def __contains__(self, item: object) -> bool:
        return item in self._elements

    @property
    def count(self) -> int:
        return len(self._elements)

    def index(self, element: "ElementReference") -> int:
        return self._elements.index(element)

    def select(self, fn: Callable[["ElementReference"], Any]) -> List[Any]:
        return [fn(element) for element in self._elements]

    def for_each(
        self,
        selector_or_action: Union[str, Callable[["ElementReference"], Any]],
        action: Optional[Callable[["ElementReference"], Any]] = None,
        select_method: Optional[SelectMethod] = None,
    ) -> "ElementCollection":
        """
        ``for_each(action)`` runs ``action`` on each element of this
        collection; ``for_each(selector, action)`` runs it on each match of
        ``selector`` below these elements.
        """
        if isinstance(selector_or_action, str):
            if action is None:
                raise TypeError("for_each(selector, action) requires an action.")
            super().for_each(selector_or_action, action, select_method)
            return self
        for element in self._elements:
            selector_or_action(element)
        return self

    # Guards

    def ensure_not_empty(self) -> "ElementCollection":
        if not self._elements:
            raise ElementNotFoundError(self.full_selector, self.frame_path)
        return self

    def ensure_at_most_one(self) -> "ElementCollection":
        if len(self._elements) > 1:
            raise MultipleElementsError(self.full_selector, len(self._elements), self.frame_path)
        return self

    def ensure_single(self) -> "ElementCollection":
        return self.ensure_not_empty().ensure_at_most_one()

    def ensure_count(self, count: int) -> "ElementCollection":
        """Raise ``SequenceCountError`` unless exactly ``count`` elements were found."""
        if len(self._elements) != count:
            raise SequenceCountError.count_mismatch(
                self.full_selector, count, len(self._elements), self.frame_path
            )
        return self

    # Accessors. With a selector they query below this collection first.

    def first(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        if selector is not None:
            return super().first(selector, select_method)
        return self.ensure_not_empty()._elements[0]

    def first_or_default(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        if selector is not None:
            return super().first_or_default(selector, select_method)
        return self._elements[0] if self._elements else None

    def single(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        if selector is not None:
            return super().single(selector, select_method)
        return self.ensure_single()._elements[0]

    def single_or_default(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        if selector is not None:
            return super().single_or_default(selector, select_method)
        self.ensure_at_most_one()
        return self._elements[0] if self._elements else None

    def element_at(
        self,
        index_or_selector: Union[int, str, None] = None,
        index: Optional[int] = None,
        select_method: Optional[SelectMethod] = None,
    ) -> "ElementReference":
        """``element_at(index)`` or ``element_at(selector, index)``."""
        if isinstance(index_or_selector, str):
            if index is None:
                raise TypeError("element_at(selector, index) requires an index.")
            return super().element_at(index_or_selector, index, select_method)
        position = index if index_or_selector is None else index_or_selector
        if position is None:
            raise TypeError("element_at() requires an index.")
        if position < 0 or position >= len(self._elements):
            raise SequenceCountError.index_out_of_range(
                self.full_selector, position, len(self._elements), self.frame_path
            )
        return self._elements[position]

    def last(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> "ElementReference":
        if selector is not None:
            return super().last(selector, select_method)
        return self.ensure_not_empty()._elements[-1]

    def last_or_default(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> Optional["ElementReference"]:
        if selector is not None:
            return super().last_or_default(selector, select_method)
        return self._elements[-1] if self._elements else None


class ElementReference(SeleniumWrapper):
    """A single located element."""

    kind = WrapperKind.ELEMENT

    def __init__(self, browser: "BrowserScope", node: "ReferenceNode", web_element: "WebElement", position: int = 0):
        super().__init__(browser, node)
        self._web_element = web_element
        self.position = position

    @property
    def web_element(self) -> "WebElement":
        """The underlying element, with its scope activated."""
        self.activate_scope()
        return self._web_element

    def find_web_elements(self, by: str, value: str) -> List["WebElement"]:
        return list(self.web_element.find_elements(by, value))

    def find_elements(self, selector: str, select_method: Optional[SelectMethod] = None) -> ElementCollection:
        by, value = self._locator(selector, select_method)
        found = self.find_web_elements(by, value)
        return ElementCollection.create(self.browser, self.node, selector, found, self.scope)

    # Element state

    @property
    def tag_name(self) -> str:
        return (self.web_element.tag_name or "").lower()

    def get_text(self) -> str:
        return self.web_element.text

    def get_attribute(self, name: str) -> Optional[str]:
        return self.web_element.get_attribute(name)

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def is_displayed(self, selector: Optional[str] = None, select_method: Optional[SelectMethod] = None) -> bool:
        if selector is not None:
            return super().is_displayed(selector, select_method)
        return self.web_element.is_displayed()

    def is_enabled(self) -> bool:
        return self.web_element.is_enabled()

    def check_tag_name(self, expected: Sequence[str], message: Optional[str] = None) -> "ElementReference":
        """Raise ``UnexpectedTagError`` unless the tag is one of ``expected``."""
        tag = self.tag_name
        allowed = [name.lower() for name in expected]
        if tag not in allowed:
            raise UnexpectedTagError(
                message or f"Element has tag '{tag}', expected one of {allowed}. Selector: '{self.full_selector}'",
                self.full_selector,
                tag,
                self.frame_path,
            )
        return self

    # Actions

    def click(self) -> "ElementReference":
        self.web_element.click()
        return self

    def submit(self) -> "ElementReference":
        self.web_element.submit()
        return self

    def send_keys(self, text: str) -> "ElementReference":
        self.web_element.send_keys(text)
        return self

    def clear(self) -> "ElementReference":
        self.web_element.clear()
        return self

    def wait(self, milliseconds: Optional[int] = None) -> "ElementReference":
        self.browser.wait(milliseconds)
        return self
