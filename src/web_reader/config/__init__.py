"""
Configuration module for web-reader.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from web_reader.config.settings import (
    Settings,
    BrowserSettings,
    InstallSettings,
    ProfileSettings,
    FrameworkSettings,
    WaitSettings,
    OutputSettings,
    LoggingSettings,
)
from web_reader.config.loader import load_config, get_default_config_path

__all__ = [
    "Settings",
    "BrowserSettings",
    "InstallSettings",
    "ProfileSettings",
    "FrameworkSettings",
    "WaitSettings",
    "OutputSettings",
    "LoggingSettings",
    "load_config",
    "get_default_config_path",
]
