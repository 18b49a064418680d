"""Pixelsorter Utilities - Settings loading and validation."""

from pixelsorter.utils.config import (
    CONFIG_SCHEMA,
    ConfigError,
    Settings,
    get_default_config,
    load_config_with_validation,
    load_settings,
    print_config_summary,
    validate_config,
    write_default_settings,
)

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigError",
    "Settings",
    "get_default_config",
    "load_config_with_validation",
    "load_settings",
    "print_config_summary",
    "validate_config",
    "write_default_settings",
]
