"""Configuration module for neo-meting."""

from .settings import NeteaseSettings, ObservabilitySettings, Settings, get_settings

__all__ = ["NeteaseSettings", "ObservabilitySettings", "Settings", "get_settings"]
