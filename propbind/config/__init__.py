"""Configuration loading utilities."""

from propbind.config.loader import get_config, load_config_from_files, reload_config
from propbind.config.schemas import (
    LoggingConfig,
    PlaceholderConfig,
    PropBindConfig,
    ResourcesConfig,
)


__all__ = [
    "LoggingConfig",
    "PlaceholderConfig",
    "PropBindConfig",
    "ResourcesConfig",
    "get_config",
    "load_config_from_files",
    "reload_config",
]
