"""
Application configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
"""

from .settings import ConfigError, Settings, get_settings, load_settings

__all__ = ["ConfigError", "Settings", "get_settings", "load_settings"]
