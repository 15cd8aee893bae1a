"""Shared utilities for Inbetween."""

from inbetween.core.utils.json import read_json, write_json
from inbetween.core.utils.logging import configure_logging, get_logger, log_performance

__all__ = [
    "configure_logging",
    "get_logger",
    "log_performance",
    "read_json",
    "write_json",
]
