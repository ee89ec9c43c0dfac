from __future__ import annotations

"""
Schema entries: coercing fields, ephemeral wrappers and derived values.

A schema is a plain mapping of logical keys to one of the three entry kinds
defined here. All of them are immutable; the modifier methods on Field
return new instances.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar, Union

if TYPE_CHECKING:  # pragma: no cover
    from .manager import Config

T = TypeVar("T")


class _Missing:
    """Marker type for "no default value was provided"."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class Field(Generic[T]):
    """
    Descriptor for one configuration value read from the environment.

    :param coerce: Converts the raw string into the typed value.
    :param default_value: Returned when no raw value is present. ``MISSING`` means none.
    :param is_optional: If True, a missing value resolves to None instead of failing.
    :param env_name: Explicit lookup key, bypassing the case transform of the schema key.
    """

    coerce: Callable[[str], T]
    default_value: Any = MISSING
    is_optional: bool = False
    env_name: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default_value is not MISSING

    def default(self, value: T) -> "Field[T]":
        """Return a copy that falls back to ``value`` when nothing is set."""
        return replace(self, default_value=value, is_optional=False)

    def optional(self) -> "Field[Optional[T]]":
        """Return a copy that resolves to None when nothing is set."""
        return replace(self, default_value=MISSING, is_optional=True)  # type: ignore[return-value]

    def from_env(self, name: str) -> "Field[T]":
        """Return a copy that is looked up under ``name`` (plus any prefix)."""
        if not name:
            raise ValueError("Environment variable name must not be empty.")
        return replace(self, env_name=name)


@dataclass(frozen=True)
class Ephemeral(Generic[T]):
    """
    A field that is resolved like any other but only made available to
    derived entries. It never appears in the loaded configuration.
    """

    inner: Field[T]


@dataclass(frozen=True)
class Derived(Generic[T]):
    """A value computed from the already-resolved fields and ephemerals."""

    compute: Callable[["Config"], T]


SchemaEntry = Union[Field[Any], Ephemeral[Any], Derived[Any]]


def ephemeral(field: Field[T]) -> Ephemeral[T]:
    if not isinstance(field, Field):
        raise TypeError(f"ephemeral() expects a Field, got {type(field).__name__}.")
    return Ephemeral(field)


def derived(fn: Callable[["Config"], T]) -> Derived[T]:
    if not callable(fn):
        raise TypeError("derived() expects a callable.")
    return Derived(fn)
