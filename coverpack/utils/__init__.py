"""Utility helpers: logging setup and in-memory caching."""

from .cache import Cache
from .logger import configure_logging, get_logger, set_log_level

__all__ = ["Cache", "configure_logging", "get_logger", "set_log_level"]
