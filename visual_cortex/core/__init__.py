"""Core infrastructure: settings, logging, validation, process gateway."""

from .config import CortexSettings, get_settings
from .logging_config import configure_logging, get_logger

__all__ = [
    "CortexSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
