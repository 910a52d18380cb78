"""Scenario definition parsers."""

from .yaml_parser import parse_scenario, parse_scenario_from_dict, validate_scenario

__all__ = [
    "parse_scenario",
    "validate_scenario",
    "parse_scenario_from_dict",
]
