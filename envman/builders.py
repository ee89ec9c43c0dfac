from __future__ import annotations

"""
Field constructors for the common value types.

Each builder returns a plain Field; defaults, optionality and the lookup
name are added afterwards with the Field modifiers:

    PORT = number().default(3000)
    API_KEY = string().from_env("SERVICE_API_KEY").optional()
"""

import json as _json
import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, TypeVar, Union

from .exceptions import CoercionError
from .fields import Field
from .validation import validate_value

T = TypeVar("T")

_TRUE_TOKENS = {"true", "1"}
_FALSE_TOKENS = {"false", "0"}


def custom(coerce: Callable[[str], T]) -> Field[T]:
    """Build a Field from an arbitrary coercion function."""
    if not callable(coerce):
        raise TypeError("custom() expects a callable.")
    return Field(coerce)


def _as_str(raw: str) -> str:
    return raw


def string() -> Field[str]:
    return Field(_as_str)


def _as_number(raw: str) -> Union[int, float]:
    text = raw.strip()
    if "_" in text:
        raise CoercionError("Not a valid number")

    try:
        return int(text)
    except ValueError:
        pass

    try:
        value = float(text)
    except ValueError:
        raise CoercionError("Not a valid number") from None

    if math.isnan(value):
        raise CoercionError("Not a valid number")
    return value


def number() -> Field[Union[int, float]]:
    """Integers stay ``int``; anything else ``float()`` accepts becomes ``float``."""
    return Field(_as_number)


def _as_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_TOKENS:
        return True
    if lowered in _FALSE_TOKENS:
        return False
    raise CoercionError("Not a valid boolean")


def boolean() -> Field[bool]:
    """Accepts ``true``/``1`` and ``false``/``0`` (case-insensitive)."""
    return Field(_as_bool)


def array(
    item: Union[Field[T], Callable[[str], T]],
    *,
    separator: str = ",",
) -> Field[List[T]]:
    """
    Split the raw value on ``separator`` and coerce every item.

    An empty raw value yields an empty list. Items are stripped before
    they are coerced.
    """
    if not separator:
        raise ValueError("Array separator must not be empty.")

    item_coerce: Callable[[str], T] = item.coerce if isinstance(item, Field) else item
    if not callable(item_coerce):
        raise TypeError("array() expects a Field or a callable for its items.")

    def _as_list(raw: str) -> List[T]:
        if raw == "":
            return []
        return [item_coerce(part.strip()) for part in raw.split(separator)]

    return Field(_as_list)


def json(schema: Mapping[str, Any] | None = None) -> Field[Any]:
    """
    Parse the raw value as JSON.

    :param schema: Optional JSON Schema the parsed value must satisfy
                   (requires the 'jsonschema' package).
    """

    def _as_json(raw: str) -> Any:
        try:
            value = _json.loads(raw)
        except _json.JSONDecodeError as exc:
            raise CoercionError(f"Invalid JSON: {exc}") from exc
        validate_value(value, schema)
        return value

    return Field(_as_json)


class Secret:
    """
    A string that does not reveal itself when printed, logged or formatted.

    Use ``reveal()`` to get at the actual value.
    """

    __slots__ = ("_value",)

    _MASK = "**********"

    def __init__(self, value: str):
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._MASK

    def __repr__(self) -> str:
        return f"Secret({self._MASK})"

    def __format__(self, format_spec: str) -> str:
        return format(self._MASK, format_spec)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


def secret() -> Field[Secret]:
    return Field(Secret)


def one_of(choices: Iterable[str]) -> Field[str]:
    """Accept only one of the given strings, compared exactly."""
    allowed = tuple(choices)
    if not allowed:
        raise ValueError("one_of() needs at least one choice.")

    def _as_choice(raw: str) -> str:
        if raw not in allowed:
            raise CoercionError(f"Must be one of: {', '.join(allowed)}")
        return raw

    return Field(_as_choice)
