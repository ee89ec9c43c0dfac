from __future__ import annotations

"""
envman - Typed configuration from environment variables and .env files.

This package provides:
- load / ConfigManager: resolve a schema of fields into a read-only Config.
- Field builders: string, number, boolean, array, json, secret, one_of, custom.
- ephemeral / derived: intermediate inputs and computed values.
- Environment: read-tracking guard around the process environment.
"""

from .builders import Secret, array, boolean, custom, json, number, one_of, secret, string
from .exceptions import (
    CoercionError,
    CoercionFailedError,
    ConfigError,
    ConfigSourceError,
    DerivedValueError,
    EnvironmentGuardError,
    InterpolationError,
    MissingValueError,
    ValidationError,
)
from .fields import MISSING, Derived, Ephemeral, Field, derived, ephemeral
from .interpolation import InterpolationOptions
from .manager import Config, ConfigManager, generate_env_sample, load
from .sources import Environment, environment, read_env_file

__all__ = [
    "load",
    "ConfigManager",
    "Config",
    "generate_env_sample",
    "Field",
    "Ephemeral",
    "Derived",
    "MISSING",
    "ephemeral",
    "derived",
    "custom",
    "string",
    "number",
    "boolean",
    "array",
    "json",
    "secret",
    "one_of",
    "Secret",
    "InterpolationOptions",
    "Environment",
    "environment",
    "read_env_file",
    "ConfigError",
    "MissingValueError",
    "CoercionFailedError",
    "DerivedValueError",
    "InterpolationError",
    "ConfigSourceError",
    "ValidationError",
    "CoercionError",
    "EnvironmentGuardError",
]
