"""Configuration management for polyroute.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- NormalizeConfig: Polyline cleanup settings
- RoutingConfig: Obstacle detour settings
- SmoothingConfig: Final path smoothing settings
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- PolyrouteSettings: Main application settings
"""

from polyroute.config.settings import (
    LoggingConfig,
    NormalizeConfig,
    PolyrouteSettings,
    ProcessingConfig,
    RoutingConfig,
    SmoothingConfig,
    get_default_settings,
)

__all__ = [
    "LoggingConfig",
    "NormalizeConfig",
    "PolyrouteSettings",
    "ProcessingConfig",
    "RoutingConfig",
    "SmoothingConfig",
    "get_default_settings",
]
