"""In-memory API and token endpoint used to exercise a coordinator."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, Optional

from requeue.coordination.strategy import (
    ErrorCallback,
    SuccessCallback,
    callback_refresh,
    timeout_refresh,
)
from requeue.core.exceptions import RefreshError, RequestFailedError
from requeue.core.models import RequestDescriptor
from requeue.core.types import RefreshOutcome

logger = logging.getLogger(__name__)


@dataclass
class SimulatedResponse:
    """Response returned by the simulated API."""

    status_code: int
    url: str
    token: str


def bearer_token(request: RequestDescriptor) -> Optional[str]:
    """Extract the bearer token from a request's Authorization header."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):]


class SimulatedTokenEndpoint:
    """Callback-style token endpoint answering after a fixed delay."""

    def __init__(
        self,
        token: str,
        delay: float = 0.0,
        outcome: RefreshOutcome = RefreshOutcome.SUCCESS,
    ):
        self.token = token
        self.delay = delay
        self.outcome = outcome
        self.fetch_count = 0

    def fetch(self, on_success: SuccessCallback, on_error: ErrorCallback) -> None:
        """Request a new token, answering through one of the callbacks."""
        self.fetch_count += 1
        logger.debug(f"Token fetch #{self.fetch_count}: outcome={self.outcome.value}")

        loop = asyncio.get_running_loop()
        if self.outcome == RefreshOutcome.SUCCESS:
            loop.call_later(self.delay, on_success, {"token": self.token})
        elif self.outcome == RefreshOutcome.ERROR:
            loop.call_later(self.delay, on_error, RefreshError("expired"))
        else:
            loop.call_later(self.delay, on_error, None)


class SimulatedApi:
    """API accepting only requests that carry the valid bearer token."""

    def __init__(self, valid_token: str, server_error_urls: Iterable[str] = ()):
        self.valid_token = valid_token
        self.server_error_urls = set(server_error_urls)
        self.sent: list[RequestDescriptor] = []

    async def send(self, request: RequestDescriptor) -> SimulatedResponse:
        """Send request.

        Raises:
            RequestFailedError: 500 for server error URLs, 401 for a wrong token
        """
        self.sent.append(request)
        await asyncio.sleep(0)

        if request.url in self.server_error_urls:
            raise RequestFailedError(
                f"Server error for {request.url}", request=request, status_code=500
            )

        token = bearer_token(request)
        if token != self.valid_token:
            raise RequestFailedError(
                f"Unauthorized request to {request.url}", request=request, status_code=401
            )

        return SimulatedResponse(status_code=200, url=request.url, token=token)


class SimulatedTokenStrategy:
    """Refresh strategy renewing a bearer token on 401 responses."""

    def __init__(
        self,
        api: SimulatedApi,
        endpoint: SimulatedTokenEndpoint,
        tag: str = "auth",
        timeout: Optional[float] = None,
    ):
        self.api = api
        self.endpoint = endpoint
        self._tag = tag
        refresh = callback_refresh(endpoint.fetch)
        self._refresh: Callable[[], Awaitable[Dict[str, str]]] = (
            timeout_refresh(refresh, timeout) if timeout is not None else refresh
        )

    @property
    def tag(self) -> str:
        return self._tag

    def is_applicable(self, error: BaseException) -> bool:
        return isinstance(error, RequestFailedError) and error.status_code == 401

    async def refresh(self) -> Dict[str, str]:
        return await self._refresh()

    async def apply_updated_values(
        self, request: RequestDescriptor, values: Dict[str, str]
    ) -> SimulatedResponse:
        """Resend request with the refreshed bearer token."""
        request.headers["Authorization"] = f"Bearer {values['token']}"
        return await self.api.send(request)
