"""Core Pydantic data models for requeue."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .types import RefreshOutcome, RequestOutcome, ScenarioStatus


class RequestDescriptor(BaseModel):
    """Outgoing request configuration.

    Extra attributes are allowed so retry markers can be stored on it.
    """

    model_config = ConfigDict(frozen=False, extra="allow")

    method: str = Field(default="GET", description="HTTP method")
    url: str = Field(..., description="Request URL or path")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    params: Dict[str, Any] = Field(
        default_factory=dict, description="Query parameters"
    )
    body: Optional[Any] = Field(default=None, description="Request payload")


class ScenarioConfig(BaseModel):
    """Concurrent failure scenario definition."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Scenario name")
    version: str = Field(default="1.0.0", description="Scenario version")
    description: Optional[str] = Field(default=None, description="Scenario description")
    tag: str = Field(default="auth", min_length=1, description="Coordinator tag")
    requests: int = Field(default=3, gt=0, description="Concurrent requests in first wave")
    late_requests: int = Field(
        default=0, ge=0, description="Requests sent after the first wave settles"
    )
    passthrough_requests: int = Field(
        default=0, ge=0, description="First-wave requests that hit a server error"
    )
    stagger: float = Field(
        default=0.0, ge=0.0, description="Seconds between first-wave requests"
    )
    stale_token: str = Field(default="t1", description="Token requests start with")
    refreshed_token: str = Field(default="t2", description="Token the endpoint issues")
    refresh_delay: float = Field(
        default=0.1, ge=0.0, description="Seconds the token endpoint takes"
    )
    refresh_outcome: RefreshOutcome = Field(
        default=RefreshOutcome.SUCCESS, description="Token endpoint behaviour"
    )
    refresh_timeout: Optional[float] = Field(
        default=None, gt=0.0, description="Timeout in seconds per refresh"
    )


class RequestResult(BaseModel):
    """Outcome of a single scenario request."""

    model_config = ConfigDict(frozen=False)

    request_id: str = Field(..., description="Request identifier")
    outcome: RequestOutcome = Field(..., description="Final outcome")
    token: Optional[str] = Field(
        default=None, description="Token used by the successful attempt"
    )
    error: Optional[str] = Field(default=None, description="Error message if failed")


class ScenarioRunMetrics(BaseModel):
    """Metrics for a scenario run."""

    model_config = ConfigDict(frozen=False)

    total_requests: int = Field(default=0, description="Total requests sent")
    succeeded_requests: int = Field(default=0, description="Succeeded first time")
    retried_requests: int = Field(default=0, description="Succeeded after refresh")
    passthrough_requests: int = Field(default=0, description="Failed, not handled")
    failed_requests: int = Field(default=0, description="Failed after handling")
    refresh_cycles: int = Field(default=0, description="Refresh cycles started")
    total_time: float = Field(default=0.0, description="Total scenario duration (s)")


class ScenarioRun(BaseModel):
    """Scenario execution run metadata."""

    model_config = ConfigDict(frozen=False)

    run_id: str = Field(..., description="Unique run identifier")
    scenario_name: str = Field(..., description="Scenario name")
    scenario_version: str = Field(..., description="Scenario version")
    status: ScenarioStatus = Field(
        default=ScenarioStatus.PENDING, description="Execution status"
    )
    started_at: Optional[datetime] = Field(default=None, description="Start timestamp")
    completed_at: Optional[datetime] = Field(
        default=None, description="Completion timestamp"
    )
    metrics: ScenarioRunMetrics = Field(
        default_factory=ScenarioRunMetrics, description="Run metrics"
    )
    results: List[RequestResult] = Field(
        default_factory=list, description="Per-request results"
    )
    error_message: Optional[str] = Field(
        default=None, description="Error message if failed"
    )
