"""Custom exceptions for configuration management."""


class ConfigError(Exception):
    """Raised when configuration data or strategy options cannot be processed."""
