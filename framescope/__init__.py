"""
framescope - Scope-aware element queries for Selenium tests.

Keeps track of which window and (nested) iframe the driver is focused on,
resolves element references hierarchically and retries timing-dependent
conditions until they settle.
"""

__version__ = "0.1.0"

from framescope.core.browser import BrowserScope
from framescope.core.config import RunConfig
from framescope.core.scope import RunContext, ScopeDescriptor
from framescope.layers.action.waiter import PollingWaiter
from framescope.layers.elements.references import ElementCollection, ElementReference, SelectBy

__all__ = [
    "BrowserScope",
    "ElementCollection",
    "ElementReference",
    "PollingWaiter",
    "RunConfig",
    "RunContext",
    "ScopeDescriptor",
    "SelectBy",
    "__version__",
]
