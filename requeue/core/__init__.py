"""Core infrastructure for requeue."""

from .config import GlobalConfig, config, get_config, reload_config, setup_logging
from .exceptions import (
    ConfigurationError,
    QueueProcessingError,
    RefreshError,
    RefreshTimeoutError,
    RequestFailedError,
    RequeueError,
    ScenarioError,
    ValidationError,
)
from .markers import is_retried, mark_retried, marker_key
from .models import (
    RequestDescriptor,
    RequestResult,
    ScenarioConfig,
    ScenarioRun,
    ScenarioRunMetrics,
)
from .types import CoordinatorState, RefreshOutcome, RequestOutcome, ScenarioStatus

__all__ = [
    # Types
    "CoordinatorState",
    "RefreshOutcome",
    "RequestOutcome",
    "ScenarioStatus",
    # Exceptions
    "RequeueError",
    "ConfigurationError",
    "ValidationError",
    "QueueProcessingError",
    "RefreshError",
    "RefreshTimeoutError",
    "RequestFailedError",
    "ScenarioError",
    # Markers
    "marker_key",
    "mark_retried",
    "is_retried",
    # Models
    "RequestDescriptor",
    "ScenarioConfig",
    "RequestResult",
    "ScenarioRunMetrics",
    "ScenarioRun",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
    "setup_logging",
]
