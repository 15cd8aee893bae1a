"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from inbetween.core.config.models import AppConfig
from inbetween.core.utils.json import read_json
from inbetween.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "INBETWEEN_LOG_LEVEL"

_DEFAULT_APP_CONFIG_PATH = Path("inbetween.yaml")
_app_config_cache: AppConfig | None = None


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("inbetween.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    if fmt == "json":
        try:
            content = read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping, got {type(content).__name__}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file at the default path yields all defaults. The
    ``INBETWEEN_LOG_LEVEL`` environment variable overrides the logging level.

    Args:
        path: Path to app config file. Defaults to ``inbetween.yaml``.

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValidationError: If config is invalid
    """
    global _app_config_cache

    use_default = path is None or Path(path) == _DEFAULT_APP_CONFIG_PATH
    if use_default and _app_config_cache is not None:
        return _app_config_cache

    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if use_default and not Path(path).exists():
        config = AppConfig()
    else:
        config = AppConfig.model_validate(load_config(path))

    config = _apply_env_overrides(config)

    if use_default:
        _app_config_cache = config
    return config


def clear_app_config_cache() -> None:
    """Forget the cached default app config."""
    global _app_config_cache
    _app_config_cache = None


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()
    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    level = os.getenv(LOG_LEVEL_ENV_VAR)
    if not level:
        return config
    logger.debug(f"Loaded {LOG_LEVEL_ENV_VAR}={level} from environment")
    logging_config = config.logging.model_validate(
        {**config.logging.model_dump(), "level": level.upper()}
    )
    return config.model_copy(update={"logging": logging_config})
