from __future__ import annotations

import re

from .fields import Field

_WORD_START = re.compile(r"(?<!_)([A-Z])")


def camel_to_screaming_snake(name: str) -> str:
    """
    Convert a schema key into an environment variable name.

    Keys that are already upper-case are returned unchanged. Otherwise every
    upper-case letter starts a new word:

      myApiKeyValue -> MY_API_KEY_VALUE
      pg_host       -> PG_HOST
      myAPIKey      -> MY_A_P_I_KEY
    """
    if name == name.upper():
        return name
    converted = _WORD_START.sub(r"_\1", name)
    if converted.startswith("_"):
        converted = converted[1:]
    return converted.upper()


def resolve_env_name(key: str, field: Field, prefix: str = "") -> str:
    """Return the external lookup key for a schema entry."""
    if field.env_name is not None:
        return prefix + field.env_name
    return prefix + camel_to_screaming_snake(key)
