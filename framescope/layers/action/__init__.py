"""Action Layer - Waiting and navigation."""

from framescope.layers.action.waiter import PollingWaiter, TickOutcome, TickResult
from framescope.layers.action import navigator

__all__ = ["PollingWaiter", "TickOutcome", "TickResult", "navigator"]
