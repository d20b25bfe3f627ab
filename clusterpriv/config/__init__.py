"""Configuration package."""

from .settings import Environment, LogLevel, Settings, get_settings, settings

__all__ = ["Environment", "LogLevel", "Settings", "get_settings", "settings"]
