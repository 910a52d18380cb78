"""requeue - Single-flight refresh and retry for failed requests."""

from .coordination import (
    CallableStrategy,
    CoordinatorStats,
    RefreshStrategy,
    RetryCoordinator,
    callback_refresh,
    get_all_coordinators,
    get_coordinator,
    timeout_refresh,
)
from .core import (
    ConfigurationError,
    # Types
    CoordinatorState,
    # Config
    GlobalConfig,
    QueueProcessingError,
    RefreshError,
    RefreshOutcome,
    RefreshTimeoutError,
    # Models
    RequestDescriptor,
    RequestFailedError,
    RequestOutcome,
    RequestResult,
    # Exceptions
    RequeueError,
    ScenarioConfig,
    ScenarioError,
    ScenarioRun,
    ScenarioRunMetrics,
    ScenarioStatus,
    ValidationError,
    config,
    get_config,
    is_retried,
    mark_retried,
    marker_key,
    reload_config,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Coordination
    "RetryCoordinator",
    "CoordinatorStats",
    "get_coordinator",
    "get_all_coordinators",
    "RefreshStrategy",
    "CallableStrategy",
    "callback_refresh",
    "timeout_refresh",
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
]
