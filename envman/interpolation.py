from __future__ import annotations

"""
Expansion of ``$NAME`` and ``${NAME}`` references inside env file values.

Only values read from the env file are expanded. Values that come from the
process environment are substituted verbatim and never expanded themselves,
so an env file cannot be used to rewrite what the environment provides.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .exceptions import InterpolationError

MISSING_POLICIES = ("error", "leave", "empty")
LOOKUP_POLICIES = ("env-first", "file-first", "file-only", "env-only")

# Stands in for escaped dollars (\$) while scanning.
_ESCAPED_DOLLAR = "\x00"

_REFERENCE = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)


@dataclass(frozen=True)
class InterpolationOptions:
    """
    :param missing: What to do with a reference nothing can resolve:
                    'error' (raise), 'leave' (keep the token text) or 'empty'.
    :param lookup: Where references are looked up: 'env-first', 'file-first',
                   'file-only' or 'env-only'.
    """

    missing: str = "error"
    lookup: str = "env-first"

    def __post_init__(self) -> None:
        if self.missing not in MISSING_POLICIES:
            raise ValueError(
                f"Unknown missing policy {self.missing!r}; expected one of {', '.join(MISSING_POLICIES)}."
            )
        if self.lookup not in LOOKUP_POLICIES:
            raise ValueError(
                f"Unknown lookup policy {self.lookup!r}; expected one of {', '.join(LOOKUP_POLICIES)}."
            )

    @classmethod
    def coerce(cls, value: Any) -> Optional["InterpolationOptions"]:
        """
        Normalise the ``interpolate`` load option.

        None/False disable interpolation, True enables it with the defaults,
        a mapping or an InterpolationOptions instance enables it as given.
        """
        if value is None or value is False:
            return None
        if value is True:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"missing", "lookup"}
            if unknown:
                raise ValueError(f"Unknown interpolation option(s): {', '.join(sorted(unknown))}.")
            return cls(**{k: v for k, v in value.items() if v is not None})
        raise TypeError(
            f"'interpolate' must be a bool, a mapping or InterpolationOptions, got {type(value).__name__}."
        )


def interpolate_string(text: str, resolve: Callable[[str, str], str]) -> str:
    """
    Replace every reference in ``text`` with ``resolve(name, token)``.

    ``\\$`` escapes a dollar sign. At any position the braced form is tried
    before the bare one; substituted text is not scanned again.
    """
    protected = text.replace("\\$", _ESCAPED_DOLLAR)

    def _substitute(match: "re.Match[str]") -> str:
        name = match.group("braced") or match.group("bare")
        return resolve(name, match.group(0))

    expanded = _REFERENCE.sub(_substitute, protected)
    return expanded.replace(_ESCAPED_DOLLAR, "$")


def _handle_missing(name: str, token: str, policy: str) -> str:
    if policy == "leave":
        return token
    if policy == "empty":
        return ""
    raise InterpolationError(f".env reference '{name}' is not defined in env or file")


def expand_env_map(
    file_values: Mapping[str, str],
    env_lookup: Callable[[str], Optional[str]],
    options: InterpolationOptions,
) -> Dict[str, str]:
    """
    Return a copy of ``file_values`` with all references expanded.

    :param file_values: Raw values as read from the env file.
    :param env_lookup: Returns the environment value for a name, or None.
    :param options: Missing and lookup policies.
    :raises InterpolationError: on circular references, or on unresolved
                                references when the missing policy is 'error'.
    """
    resolved: Dict[str, str] = {}
    resolving: List[str] = []

    def resolve_var(name: str, token: str) -> str:
        in_file = name in file_values

        if options.lookup == "env-only":
            env_value = env_lookup(name)
            return env_value if env_value is not None else _handle_missing(name, token, options.missing)

        if options.lookup == "file-only":
            return resolve_key(name) if in_file else _handle_missing(name, token, options.missing)

        if options.lookup == "file-first":
            if in_file:
                return resolve_key(name)
            env_value = env_lookup(name)
            return env_value if env_value is not None else _handle_missing(name, token, options.missing)

        env_value = env_lookup(name)
        if env_value is not None:
            return env_value
        if in_file:
            return resolve_key(name)
        return _handle_missing(name, token, options.missing)

    def resolve_key(key: str) -> str:
        if key in resolved:
            return resolved[key]

        if key in resolving:
            cycle = resolving[resolving.index(key):] + [key]
            raise InterpolationError(
                f"Circular reference detected in .env: {' -> '.join(cycle)}"
            )

        resolving.append(key)
        try:
            value = interpolate_string(file_values[key], resolve_var)
        finally:
            resolving.pop()

        resolved[key] = value
        return value

    return {key: resolve_key(key) for key in file_values}
