"""Configuration - Settings and notification preferences from the environment."""

from deskwatch.config.exceptions import ConfigError
from deskwatch.config.settings import (
    EnvPreferences,
    PreferencesSource,
    Settings,
    StaticPreferences,
    parse_bool,
    preferences_from_env,
)

__all__ = [
    "ConfigError",
    "EnvPreferences",
    "PreferencesSource",
    "Settings",
    "StaticPreferences",
    "parse_bool",
    "preferences_from_env",
]
