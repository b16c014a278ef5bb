"""Core module - Run context, scopes and driver management."""

from framescope.core.scope import RunContext, ScopeDescriptor
from framescope.core.browser import BrowserScope
from framescope.core.driver_factory import create_driver, open_run

__all__ = ["RunContext", "ScopeDescriptor", "BrowserScope", "create_driver", "open_run"]
