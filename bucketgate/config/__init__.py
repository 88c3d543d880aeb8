"""
Application configuration using Pydantic settings.

Configuration comes from a TOML file plus environment overrides.
"""

from .settings import BucketConfig, ConfigError, Settings, get_settings, load_settings

__all__ = ["BucketConfig", "ConfigError", "Settings", "get_settings", "load_settings"]
