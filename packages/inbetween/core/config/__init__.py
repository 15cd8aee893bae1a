"""Configuration management for Inbetween."""

from inbetween.core.config.loader import (
    clear_app_config_cache,
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from inbetween.core.config.models import (
    AppConfig,
    ConfigBase,
    InterpolationConfig,
    LoggingConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "clear_app_config_cache",
    "configure_logging",
    "detect_format",
    # Models
    "AppConfig",
    "ConfigBase",
    "InterpolationConfig",
    "LoggingConfig",
]
