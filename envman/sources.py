from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Dict, Optional, Set

from .exceptions import ConfigSourceError, EnvironmentGuardError

logger = logging.getLogger(__name__)


class Environment:
    """
    Read-tracking view over the process environment (or any string mapping).

    Once a variable has been read through ``get()``, attempts to change or
    remove it raise EnvironmentGuardError. This catches code that mutates
    the environment after configuration has already been loaded from it.

    The module-level ``environment`` instance wraps ``os.environ`` and lives
    for the whole process. Pass your own instance (or a plain mapping via
    ``load(..., env=...)``) when you need isolation, e.g. in tests.
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None):
        # Wrapped by reference: writes through set()/delete() are visible to the owner.
        self._environ: MutableMapping[str, str] = os.environ if environ is None else environ
        self._has_been_read: Set[str] = set()

    def get(self, key: str) -> Optional[str]:
        """Return the value of ``key`` (or None) and remember that it was read."""
        self._has_been_read.add(key)
        return self._environ.get(key)

    def has(self, key: str) -> bool:
        return key in self._environ

    def __contains__(self, key: object) -> bool:
        return key in self._environ

    def set(self, key: str, value: str) -> None:
        if key in self._has_been_read:
            raise EnvironmentGuardError(
                f"Cannot set environment['{key}'], but the value has already been read."
            )
        self._environ[key] = value

    def delete(self, key: str) -> None:
        if key in self._has_been_read:
            raise EnvironmentGuardError(
                f"Cannot delete environment['{key}'], but the value has already been read."
            )
        self._environ.pop(key, None)

    def __repr__(self) -> str:
        return f"<Environment read={len(self._has_been_read)}>"


environment = Environment()


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def read_env_file(path: str | Path, encoding: str = "utf-8") -> Dict[str, str]:
    """
    Read a ``.env`` style file into a flat mapping of raw strings.

    - Blank lines, ``#`` comments and lines without ``=`` are skipped.
    - The first ``=`` separates key and value; both are stripped.
    - A value wrapped in matching single or double quotes is unquoted.

    No escape or ``$`` processing happens here. A missing file is not an
    error: a warning is logged and an empty mapping is returned.

    :raises ConfigSourceError: if the file exists but cannot be read or decoded.
    """
    file_path = Path(path).expanduser()
    if not file_path.exists():
        logger.warning("Config file '%s' not found.", file_path)
        return {}

    try:
        with file_path.open("r", encoding=encoding) as f:
            text = f.read()
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise ConfigSourceError(f"Could not read env file {file_path}: {exc}") from exc

    values: Dict[str, str] = {}
    # Only \n and \r\n end a line; other Unicode separators stay in the value
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, _, value = line.partition("=")
        values[key.strip()] = _strip_quotes(value.strip())

    return values
