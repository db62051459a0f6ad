"""Unified configuration management for the rotator.

This module provides process-level settings (environment variables, .env
files and defaults) and the shared YAML helpers used by the rotation config
store.
"""

from log_rotator.config.env_loader import Environment, get_environment
from log_rotator.config.loader import ConfigLoadError, load_yaml_file, write_yaml_file
from log_rotator.config.settings import AppConfig, get_settings, load_app_config, reset_settings

__all__ = [
    # App-level settings
    "AppConfig",
    "get_settings",
    "load_app_config",
    "reset_settings",
    "Environment",
    "get_environment",
    # YAML helpers
    "load_yaml_file",
    "write_yaml_file",
    # Exception classes
    "ConfigLoadError",
]
