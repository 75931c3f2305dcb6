"""
Configuration management for Permit Setup.

Handles loading and validation of connection settings and shared presets.
"""

from permit_setup.config.settings import (
    LoggingConfig,
    PermitConfig,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "PermitConfig",
    "get_default_config_path",
    "load_config",
]
