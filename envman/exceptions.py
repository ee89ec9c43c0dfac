from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration cannot be loaded from the environment or the env file."""


class MissingValueError(ConfigError):
    """Raised when a required value is found in neither the environment nor the env file."""


class CoercionFailedError(ConfigError):
    """Raised when a raw value is rejected by its field's coercer."""


class DerivedValueError(ConfigError):
    """Raised when a derived entry fails to compute."""


class InterpolationError(ConfigError):
    """Raised for undefined or circular references inside the env file."""


class ConfigSourceError(ConfigError):
    """Raised when the env file exists but cannot be read."""


class ValidationError(ConfigError):
    """Raised when a structured value does not match its JSON Schema."""


class CoercionError(ValueError):
    """Raised by the built-in coercers on malformed input."""


class EnvironmentGuardError(Exception):
    """Raised when an already-read environment variable is set or deleted."""
