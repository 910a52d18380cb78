"""Retry coordinator with single-flight refresh.

When many requests fail for the same reason at once (typically an expired
access token), only the first one triggers a refresh. The rest are queued
and resumed with the refreshed values once it completes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from requeue.core.exceptions import QueueProcessingError, RequeueError
from requeue.core.markers import is_retried, mark_retried, marker_key
from requeue.core.types import CoordinatorState

from .strategy import RefreshStrategy

logger = logging.getLogger(__name__)

V = TypeVar("V")
Req = TypeVar("Req")
Resp = TypeVar("Resp")


@dataclass
class CoordinatorStats:
    """Statistics for retry coordinator monitoring."""

    failures_seen: int = 0
    passthrough_failures: int = 0
    already_retried: int = 0
    refresh_cycles: int = 0
    refresh_failures: int = 0
    waiters_queued: int = 0
    waiters_resolved: int = 0
    waiters_rejected: int = 0

    def record_failure(self) -> None:
        """Record failure handed to the coordinator."""
        self.failures_seen += 1

    def record_passthrough(self) -> None:
        """Record failure the strategy does not handle."""
        self.passthrough_failures += 1

    def record_already_retried(self) -> None:
        """Record failure of a request that was already retried."""
        self.already_retried += 1

    def record_refresh(self) -> None:
        """Record start of a refresh cycle."""
        self.refresh_cycles += 1

    def record_refresh_failure(self) -> None:
        """Record failed refresh cycle."""
        self.refresh_failures += 1

    def record_queued(self) -> None:
        """Record waiter added to the queue."""
        self.waiters_queued += 1


class RetryCoordinator(Generic[V, Req, Resp]):
    """Coordinates retries of failed requests around a single in-flight refresh.

    Example:
        ```python
        coordinator = RetryCoordinator(TokenStrategy(auth_client))

        async def send(request):
            try:
                return await transport.send(request)
            except HTTPError as e:
                return await coordinator.on_failure(e, request)
        ```
    """

    def __init__(self, strategy: RefreshStrategy[V, Req, Resp]):
        """Initialize retry coordinator.

        Args:
            strategy: Applicability test, refresh and retry behaviour

        Raises:
            ConfigurationError: If strategy tag is empty
        """
        self.strategy = strategy
        self.tag = strategy.tag
        self.marker = marker_key(self.tag)
        self.stats = CoordinatorStats()
        self._refreshing = False
        self._waiters: List[asyncio.Future] = []

        logger.info(f"Retry coordinator '{self.tag}' initialized: marker={self.marker}")

    @property
    def state(self) -> CoordinatorState:
        """Current coordinator state."""
        return CoordinatorState.REFRESHING if self._refreshing else CoordinatorState.IDLE

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    @property
    def pending_waiters(self) -> int:
        """Number of requests waiting for the current refresh."""
        return len(self._waiters)

    def get_stats(self) -> CoordinatorStats:
        """Get coordinator statistics."""
        return self.stats

    def has_been_retried(self, request: Req) -> bool:
        """Check whether request was already retried by this coordinator."""
        return is_retried(request, self.tag)

    async def on_failure(self, error: BaseException, request: Optional[Req] = None) -> Resp:
        """Handle a failed request, retrying it once updated values are available.

        Args:
            error: Exception raised by the failed request
            request: Descriptor of the failed request, or taken from ``error.request``

        Returns:
            Response of the retried request

        Raises:
            The original error if it is not applicable or the request was
            already retried, the refresh error if the refresh failed, or the
            retried request's own error.
        """
        self.stats.record_failure()

        if not self.strategy.is_applicable(error):
            self.stats.record_passthrough()
            raise error

        if request is None:
            request = getattr(error, "request", None)
            if request is None:
                raise RequeueError(
                    f"Coordinator '{self.tag}': failed request has no descriptor"
                ) from error

        if self.has_been_retried(request):
            self.stats.record_already_retried()
            logger.debug(f"Coordinator '{self.tag}': request already retried, failing")
            raise error

        mark_retried(request, self.tag)

        if self._refreshing:
            return await self._wait_for_refresh(request)

        return await self._refresh_and_retry(request)

    async def call(
        self, send: Callable[..., Awaitable[Resp]], request: Req, *args: Any, **kwargs: Any
    ) -> Resp:
        """Send request, routing any failure through on_failure.

        Args:
            send: Async function performing the request
            request: Request descriptor passed as first argument to send
            *args: Extra positional arguments for send
            **kwargs: Keyword arguments for send

        Returns:
            Response of the original or retried request
        """
        try:
            return await send(request, *args, **kwargs)
        except Exception as e:
            return await self.on_failure(e, request)

    async def _wait_for_refresh(self, request: Req) -> Resp:
        """Queue request until the in-flight refresh concludes, then retry it."""
        waiter: asyncio.Future = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        self.stats.record_queued()

        logger.debug(
            f"Coordinator '{self.tag}': refresh in progress, "
            f"queued request ({len(self._waiters)} waiting)"
        )

        values = await waiter
        return await self.strategy.apply_updated_values(request, values)

    async def _refresh_and_retry(self, request: Req) -> Resp:
        """Run one refresh cycle and retry the request that triggered it."""
        self._refreshing = True
        self.stats.record_refresh()

        logger.info(f"Coordinator '{self.tag}': starting refresh cycle")

        try:
            values = await self.strategy.refresh()
            if values is None:
                raise QueueProcessingError()
        except Exception as e:
            self.stats.record_refresh_failure()
            logger.warning(
                f"Coordinator '{self.tag}': refresh failed, rejecting "
                f"{len(self._waiters)} queued request(s): {type(e).__name__}: {e}"
            )
            self._process_queue(error=e)
            raise
        else:
            logger.info(
                f"Coordinator '{self.tag}': refresh succeeded, resuming "
                f"{len(self._waiters)} queued request(s)"
            )
            self._process_queue(values=values)
        finally:
            # Reached with waiters still queued only if the refresh was cancelled
            if self._waiters:
                self._process_queue(error=QueueProcessingError("Refresh cycle was cancelled"))
            self._refreshing = False

        return await self.strategy.apply_updated_values(request, values)

    def _process_queue(
        self, error: Optional[BaseException] = None, values: Optional[V] = None
    ) -> None:
        """Settle every queued waiter with the same outcome and clear the queue."""
        waiters, self._waiters = self._waiters, []

        for waiter in waiters:
            if waiter.done():
                # Waiting request was cancelled
                continue
            if error is not None:
                waiter.set_exception(error)
                self.stats.waiters_rejected += 1
            else:
                waiter.set_result(values)
                self.stats.waiters_resolved += 1


# Global coordinator registry, one coordinator per retry reason
_coordinators: dict[str, RetryCoordinator] = {}


def get_coordinator(strategy: RefreshStrategy) -> RetryCoordinator:
    """Get or create the coordinator for a strategy's tag.

    Args:
        strategy: Strategy used if the coordinator does not exist yet

    Returns:
        Existing or new coordinator
    """
    if strategy.tag not in _coordinators:
        _coordinators[strategy.tag] = RetryCoordinator(strategy)
    return _coordinators[strategy.tag]


def get_all_coordinators() -> dict[str, RetryCoordinator]:
    """Get all registered coordinators.

    Returns:
        Dictionary of coordinators by tag
    """
    return _coordinators.copy()
