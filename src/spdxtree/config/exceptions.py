"""Exceptions raised by the spdxtree configuration layer."""


class ConfigError(Exception):
    """Raised when configuration files, overrides, or values are invalid."""
