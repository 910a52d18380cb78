"""YAML scenario definition parser."""

from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from requeue.core.exceptions import ConfigurationError, ValidationError
from requeue.core.models import ScenarioConfig


def parse_scenario(scenario_path: Union[str, Path]) -> ScenarioConfig:
    """Parse scenario definition from YAML file.

    Args:
        scenario_path: Path to scenario YAML file

    Returns:
        Validated ScenarioConfig

    Raises:
        ConfigurationError: If file not found or invalid YAML
        ValidationError: If scenario definition is invalid

    Example:
        >>> config = parse_scenario("scenarios/token_expiry.yaml")
        >>> print(config.name)
        token_expiry
    """
    path = Path(scenario_path)

    if not path.exists():
        raise ConfigurationError(f"Scenario file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}")

    if not isinstance(data, dict):
        raise ValidationError(f"Scenario definition in {path} must be a mapping")

    try:
        return ScenarioConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid scenario definition in {path}:\n{e}")


def validate_scenario(scenario_path: Union[str, Path]) -> bool:
    """Validate scenario definition without raising exceptions.

    Args:
        scenario_path: Path to scenario YAML file

    Returns:
        True if valid, False otherwise
    """
    try:
        parse_scenario(scenario_path)
        return True
    except (ConfigurationError, ValidationError):
        return False


def parse_scenario_from_dict(data: Dict[str, Any]) -> ScenarioConfig:
    """Parse scenario configuration from dictionary.

    Raises:
        ValidationError: If scenario definition is invalid
    """
    try:
        return ScenarioConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid scenario definition:\n{e}")
