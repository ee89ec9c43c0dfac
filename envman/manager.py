from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from . import sources
from .exceptions import CoercionFailedError, DerivedValueError, MissingValueError
from .fields import Derived, Ephemeral, Field
from .interpolation import InterpolationOptions, expand_env_map
from .sources import Environment, read_env_file
from .utils import resolve_env_name

logger = logging.getLogger(__name__)


class Config(Mapping[str, Any]):
    """
    Read-only configuration object.

    Provides both mapping access (cfg["DATABASE_URL"]) and
    attribute-style access (cfg.DATABASE_URL). Nested mappings, such as the
    result of a ``json()`` field, are wrapped as well.
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data: Dict[str, Any] = dict(data)

    def __getitem__(self, key: str) -> Any:
        return _wrap_nested(self._data[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        # Internal and dunder lookups (copy, pickle) must not reach _data
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            value = self._data[name]
        except KeyError as exc:
            raise AttributeError(name) from exc
        return _wrap_nested(value)

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the underlying data."""
        from copy import deepcopy

        return deepcopy(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return value for key if present, else default."""
        if key in self._data:
            return _wrap_nested(self._data[key])
        return default

    def __repr__(self) -> str:
        # Values may be secrets, so only key names are shown
        keys_preview = ", ".join(list(self._data.keys())[:5])
        more = "..." if len(self._data) > 5 else ""
        return f"<Config keys=[{keys_preview}{more}]>"


def _wrap_nested(value: Any) -> Any:
    """
    Wrap nested mappings in Config so attribute access works recursively.
    """
    if isinstance(value, Mapping) and not isinstance(value, Config):
        return Config(value)
    return value


class ConfigManager:
    """
    Resolves a schema of fields against the environment and an optional env file.

    Typical usage:

        from envman import ConfigManager, string, number, boolean

        manager = ConfigManager(
            {
                "DATABASE_URL": string(),
                "PORT": number().default(3000),
                "DEBUG": boolean().default(False),
            },
            env_file=".env",
            env_prefix="APP_",
        )

        cfg = manager.load()
        port = cfg.PORT

    Environment variables always win over values from the env file.
    """

    def __init__(
        self,
        schema: Mapping[str, Any],
        *,
        env_file: str | Path | None = None,
        env_prefix: str = "",
        encoding: str = "utf-8",
        env: MutableMapping[str, str] | None = None,
        environment: Environment | None = None,
        interpolate: Any = None,
        skip_missing: bool = False,
    ):
        for key, entry in schema.items():
            if not isinstance(entry, (Field, Ephemeral, Derived)):
                raise TypeError(
                    f"Schema entry {key!r} must be a Field, Ephemeral or Derived, "
                    f"got {type(entry).__name__}."
                )
        self._schema = dict(schema)
        self._env_file = env_file
        self._env_prefix = env_prefix
        self._encoding = encoding
        self._env = env
        self._environment = environment
        self._interpolation = InterpolationOptions.coerce(interpolate)
        self._skip_missing = skip_missing

    def load(self) -> Config:
        """
        Resolve every schema entry and return the stored and derived values.

        Ephemeral fields are resolved first, then stored fields, both in
        schema order; derived entries are computed last from a read-only
        snapshot of the two. The first failure aborts the load.
        """
        env_source = self._acquire_environment()
        file_values: Mapping[str, str] = (
            read_env_file(self._env_file, self._encoding) if self._env_file else {}
        )

        if self._interpolation is not None:
            file_values = expand_env_map(file_values, env_source.get, self._interpolation)

        ephemerals: Dict[str, Any] = {}
        stored: Dict[str, Any] = {}
        deriveds: List[Tuple[str, Derived[Any]]] = []

        for key, entry in self._schema.items():
            if isinstance(entry, Ephemeral):
                ephemerals[key] = self._read_field(key, entry.inner, env_source, file_values)

        for key, entry in self._schema.items():
            if isinstance(entry, Field):
                stored[key] = self._read_field(key, entry, env_source, file_values)
            elif isinstance(entry, Derived):
                deriveds.append((key, entry))

        snapshot = Config({**stored, **ephemerals})
        for key, entry in deriveds:
            try:
                stored[key] = entry.compute(snapshot)
            except Exception as exc:
                raise DerivedValueError(
                    f"Derived config '{key}' failed to compute. {exc}".rstrip()
                ) from exc

        logger.debug(
            "Loaded %d config value(s) (%d ephemeral) with prefix %r from %s.",
            len(stored),
            len(ephemerals),
            self._env_prefix,
            self._env_file or "environment only",
        )
        return Config(stored)

    def sample(self) -> str:
        """Return a commented ``.env`` template for this manager's schema."""
        return generate_env_sample(self._schema, env_prefix=self._env_prefix)

    def _acquire_environment(self) -> Environment:
        if self._environment is not None:
            return self._environment
        if self._env is not None:
            return Environment(self._env)
        return sources.environment

    def _read_field(
        self,
        key: str,
        field: Field[Any],
        env_source: Environment,
        file_values: Mapping[str, str],
    ) -> Any:
        env_key = resolve_env_name(key, field, self._env_prefix)

        raw: Optional[str] = env_source.get(env_key)
        if raw is None:
            raw = file_values.get(env_key)

        if raw is None:
            if field.has_default:
                return field.default_value
            if field.is_optional or self._skip_missing:
                return None
            raise MissingValueError(f"Config '{env_key}' is missing and has no default.")

        try:
            return field.coerce(raw)
        except Exception as exc:
            raise CoercionFailedError(
                f"Config '{env_key}' has value '{raw}'. {exc}".rstrip()
            ) from exc


def load(schema: Mapping[str, Any], **options: Any) -> Config:
    """
    Load configuration for ``schema`` in one call.

    Accepts the same keyword options as ConfigManager: env_file, env_prefix,
    encoding, env, environment, interpolate and skip_missing.
    """
    return ConfigManager(schema, **options).load()


def generate_env_sample(schema: Mapping[str, Any], env_prefix: str = "") -> str:
    """
    Render a commented ``KEY=`` template for every stored field of ``schema``.

    Ephemeral and derived entries are skipped.
    """
    lines: List[str] = []
    for key, entry in schema.items():
        if not isinstance(entry, Field):
            continue
        env_name = resolve_env_name(key, entry, env_prefix)
        description = f"(default: {entry.default_value})" if entry.has_default else "(required)"
        lines.append(f"# {description}")
        lines.append(f"{env_name}=")
        lines.append("")
    return "\n".join(lines)
