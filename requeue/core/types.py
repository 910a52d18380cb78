"""Core type definitions and enums for requeue."""

from enum import Enum


class CoordinatorState(str, Enum):
    """Retry coordinator states."""

    IDLE = "idle"
    REFRESHING = "refreshing"  # One refresh cycle in flight


class RefreshOutcome(str, Enum):
    """How a simulated token endpoint answers."""

    SUCCESS = "success"
    ERROR = "error"
    EMPTY = "empty"  # Reports failure without an error value


class RequestOutcome(str, Enum):
    """Final outcome of a single request in a scenario."""

    SUCCEEDED = "succeeded"  # Never failed
    RETRIED = "retried"  # Failed, refreshed, retry succeeded
    PASSTHROUGH = "passthrough"  # Failure not handled by the coordinator
    REFRESH_FAILED = "refresh_failed"
    RETRY_FAILED = "retry_failed"


class ScenarioStatus(str, Enum):
    """Scenario execution status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIAL = "partial"  # Some requests failed
