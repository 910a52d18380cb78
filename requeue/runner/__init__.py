"""Scenario execution against a simulated API."""

from .scenario_runner import ScenarioRunner
from .simulated_api import (
    SimulatedApi,
    SimulatedResponse,
    SimulatedTokenEndpoint,
    SimulatedTokenStrategy,
)

__all__ = [
    "ScenarioRunner",
    "SimulatedApi",
    "SimulatedResponse",
    "SimulatedTokenEndpoint",
    "SimulatedTokenStrategy",
]
