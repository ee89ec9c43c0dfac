from __future__ import annotations

from typing import Any, Mapping

from .exceptions import ConfigError, ValidationError


def validate_value(value: Any, schema: Mapping[str, Any] | None) -> None:
    """
    Validate a parsed structured value against a JSON Schema.

    :param value: Value produced by a structured field (e.g. ``json()``).
    :param schema: JSON Schema mapping. If None, validation is skipped.
    :raises ValidationError: if validation fails.
    :raises ConfigError: if the 'jsonschema' package is missing.
    """
    if schema is None:
        return

    try:
        import jsonschema
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ConfigError(
            "JSON Schema validation requested but 'jsonschema' package is not installed."
        ) from exc

    try:
        jsonschema.validate(instance=value, schema=schema)
    except jsonschema.ValidationError as exc:
        path_str = ".".join(str(p) for p in exc.path) if exc.path else "<root>"
        raise ValidationError(
            f"Schema validation error at '{path_str}': {exc.message}"
        ) from exc
