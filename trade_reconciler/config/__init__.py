"""Configuration package for runtime settings and startup validation."""

from .settings import ReconcilerSettings, SettingsLoadError, config_load_settings

__all__ = ["ReconcilerSettings", "SettingsLoadError", "config_load_settings"]
