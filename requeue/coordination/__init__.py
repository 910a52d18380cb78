"""Retry coordination for requests failing on a shared, refreshable cause.

This module provides:
- Single-flight retry coordinator with a FIFO waiter queue
- Strategy protocol and a callable-based strategy
- Adapters for callback-style and time-bounded refresh actions
"""

from .coordinator import (
    CoordinatorStats,
    RetryCoordinator,
    get_all_coordinators,
    get_coordinator,
)
from .strategy import (
    CallableStrategy,
    RefreshStrategy,
    callback_refresh,
    timeout_refresh,
)

__all__ = [
    "RetryCoordinator",
    "CoordinatorStats",
    "get_coordinator",
    "get_all_coordinators",
    "RefreshStrategy",
    "CallableStrategy",
    "callback_refresh",
    "timeout_refresh",
]
