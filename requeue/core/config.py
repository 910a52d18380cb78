"""Configuration management for requeue."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


class GlobalConfig(BaseModel):
    """Global runtime configuration."""

    # Request markers
    marker_prefix: str = Field(
        default_factory=lambda: os.getenv("REQUEUE_MARKER_PREFIX", "_retry")
    )

    # Refresh defaults
    refresh_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEUE_REFRESH_TIMEOUT", "30.0"))
    )

    # Paths
    scenarios_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("REQUEUE_SCENARIOS_DIR", "scenarios"))
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("REQUEUE_LOG_LEVEL", "INFO")
    )
    log_format: str = Field(
        default_factory=lambda: os.getenv(
            "REQUEUE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


# Global configuration instance
config = GlobalConfig()


def get_config() -> GlobalConfig:
    """Get global configuration instance."""
    return config


def reload_config() -> GlobalConfig:
    """Reload configuration from environment."""
    load_dotenv(override=True)
    global config
    config = GlobalConfig()
    return config


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging from the global configuration.

    Args:
        level: Log level name, or use the configured default
    """
    cfg = get_config()
    logging.basicConfig(
        level=(level or cfg.log_level).upper(),
        format=cfg.log_format,
    )
