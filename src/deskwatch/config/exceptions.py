"""Custom exceptions for configuration."""


class ConfigError(Exception):
    """Configuration value is missing or invalid."""
