"""
Configuration module for loading planner settings from the environment.
"""

import logging
import math
from typing import Optional

from pydantic_settings import BaseSettings


class PlannerSettings(BaseSettings):
    """Planner settings loaded from environment variables (REPLANNER_*)."""

    # Search Configuration
    heuristic: str = "euclidean"
    infinity: float = math.inf
    max_iterations: Optional[int] = None  # queue pops per search run, None = unbounded
    check_heuristic: bool = False

    # Grid Configuration
    exploration_setting: str = "8N"

    # Logging Configuration
    debug: bool = False
    log_level: Optional[str] = None

    class Config:
        env_prefix = "REPLANNER_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env


def configure_logging(level: Optional[str] = None, config: Optional[PlannerSettings] = None):
    """
    Configure root logging for applications embedding the planner.

    Args:
        level: Explicit level name, overrides the settings
        config: Settings to read log_level/debug from (defaults to global settings)
    """
    config = config or settings
    if level is None:
        level = config.log_level or ("DEBUG" if config.debug else "INFO")
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


# Global settings instance
settings = PlannerSettings()
