"""Refresh strategies consumed by the retry coordinator.

A strategy supplies the four behaviours a coordinator needs:

- ``tag``: identifies the retry reason
- ``is_applicable``: decides whether an error is one the coordinator handles
- ``refresh``: obtains updated values (e.g. a new access token)
- ``apply_updated_values``: rebuilds and re-sends a failed request
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Protocol, TypeVar

from requeue.core.config import get_config
from requeue.core.exceptions import (
    ConfigurationError,
    QueueProcessingError,
    RefreshTimeoutError,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")
Req = TypeVar("Req")
Resp = TypeVar("Resp")

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Optional[BaseException]], None]


class RefreshStrategy(Protocol[V, Req, Resp]):
    """Capabilities a retry coordinator is configured with."""

    @property
    def tag(self) -> str:
        """Stable identifier unique to this retry reason."""
        ...

    def is_applicable(self, error: BaseException) -> bool:
        """Check if error should trigger a refresh and retry. Must not mutate state."""
        ...

    async def refresh(self) -> V:
        """Obtain updated values for the next attempt."""
        ...

    async def apply_updated_values(self, request: Req, values: V) -> Resp:
        """Apply values to the original request and perform the retry."""
        ...


@dataclass
class CallableStrategy(Generic[V, Req, Resp]):
    """Strategy assembled from plain callables.

    Example:
        ```python
        strategy = CallableStrategy(
            tag="auth",
            is_applicable=lambda e: getattr(e, "status_code", None) == 401,
            refresh=auth_client.refresh_token,
            apply_updated_values=resend_with_token,
        )
        coordinator = RetryCoordinator(strategy)
        ```
    """

    tag: str
    is_applicable: Callable[[BaseException], bool]
    refresh: Callable[[], Awaitable[V]]
    apply_updated_values: Callable[[Req, V], Awaitable[Resp]]

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str) or not self.tag:
            raise ConfigurationError("Strategy tag must be a non-empty string")


def callback_refresh(
    action: Callable[[SuccessCallback, ErrorCallback], None],
) -> Callable[[], Awaitable[Any]]:
    """Adapt a callback-style refresh action to an awaitable one.

    ``action`` receives ``on_success(values)`` and ``on_error(error)``. The
    first callback invoked settles the refresh; later invocations are ignored.
    ``on_error(None)`` fails the refresh with a QueueProcessingError.

    Args:
        action: Callable that starts the refresh and reports back via callbacks

    Returns:
        Async function performing one refresh per call
    """

    async def refresh() -> Any:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def on_success(values: Any) -> None:
            if future.done():
                logger.warning("Refresh already settled, ignoring late success callback")
                return
            future.set_result(values)

        def on_error(error: Optional[BaseException] = None) -> None:
            if future.done():
                logger.warning("Refresh already settled, ignoring late error callback")
                return
            future.set_exception(error if error is not None else QueueProcessingError())

        action(on_success, on_error)
        return await future

    return refresh


def timeout_refresh(
    refresh: Callable[[], Awaitable[V]], timeout: Optional[float] = None
) -> Callable[[], Awaitable[V]]:
    """Bound a refresh with a timeout.

    Args:
        refresh: Async refresh function
        timeout: Seconds to wait, or use the configured default

    Returns:
        Async function raising RefreshTimeoutError when the timeout expires
    """

    async def bounded() -> V:
        limit = timeout if timeout is not None else get_config().refresh_timeout
        try:
            return await asyncio.wait_for(refresh(), timeout=limit)
        except asyncio.TimeoutError:
            logger.warning(f"Refresh timed out after {limit}s")
            raise RefreshTimeoutError(f"Refresh timed out after {limit}s")

    return bounded
