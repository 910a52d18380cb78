"""Custom exceptions for requeue."""

from typing import Any, Optional


class RequeueError(Exception):
    """Base exception for all requeue errors."""

    pass


class ConfigurationError(RequeueError):
    """Raised when coordinator or scenario configuration is invalid."""

    pass


class ValidationError(RequeueError):
    """Raised when a scenario definition fails validation."""

    pass


class QueueProcessingError(RequeueError):
    """Raised to queued requests when a refresh cycle ends without values."""

    def __init__(self, message: str = "Queue processing failed"):
        super().__init__(message)


class RefreshError(RequeueError):
    """Raised when a refresh mechanism reports failure."""

    pass


class RefreshTimeoutError(RefreshError):
    """Raised when a refresh exceeds its timeout."""

    pass


class RequestFailedError(RequeueError):
    """Raised by a transport when a request fails.

    Carries the request descriptor so that a coordinator can retry it.
    """

    def __init__(
        self,
        message: str,
        request: Any = None,
        status_code: Optional[int] = None,
    ):
        self.request = request
        self.status_code = status_code
        super().__init__(message)


class ScenarioError(RequeueError):
    """Raised when scenario execution fails."""

    pass
