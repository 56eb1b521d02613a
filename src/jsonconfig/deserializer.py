"""Conversion of parsed JSON value trees into configuration trees."""

from __future__ import annotations

from typing import Any

from jsonconfig.errors import (
    InvalidFormatError,
    MaxDepthExceededError,
    TopLevelNotAnObjectError,
)
from jsonconfig.registry import BaseRegistry
from jsonconfig.sections import ConfigurationSection
from jsonconfig.values import DEFAULT_MAX_DEPTH, TAG_KEY, Value


def resolve(
    value: Value,
    registry: BaseRegistry,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Replace tagged maps with domain objects, innermost first.

    Children of a map or list are resolved before the container itself, so
    a constructor always receives already-built domain objects as fields,
    never raw tagged maps.

    Args:
        value: Parsed JSON value
        registry: Registry used to construct domain objects
        max_depth: Maximum nesting of maps and lists

    Returns:
        The value with every tagged map replaced by its domain object

    Raises:
        UnknownTypeError: If a tag names an unregistered type
        ConstructionError: If a constructor rejects its fields
        InvalidFormatError: If a tag value is not a string
        MaxDepthExceededError: If nesting exceeds max_depth

    """
    return _resolve(value, registry, max_depth, depth=1)


def _resolve(value: Value, registry: BaseRegistry, max_depth: int, depth: int) -> Any:
    if isinstance(value, dict):
        if depth > max_depth:
            raise MaxDepthExceededError(max_depth)
        fields = {
            key: _resolve(item, registry, max_depth, depth + 1)
            for key, item in value.items()
        }
        if TAG_KEY not in fields:
            return fields

        type_id = fields.pop(TAG_KEY)
        if not isinstance(type_id, str):
            msg = f"Type tag '{TAG_KEY}' must be a string, got {type(type_id).__name__}"
            raise InvalidFormatError(msg)
        return registry.construct(type_id, fields)

    if isinstance(value, list):
        if depth > max_depth:
            raise MaxDepthExceededError(max_depth)
        return [_resolve(item, registry, max_depth, depth + 1) for item in value]

    return value


def deserialize_into(
    data: Value,
    section: ConfigurationSection,
    registry: BaseRegistry,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Populate a section from a parsed JSON document.

    The document is fully resolved before the section is touched, so any
    error leaves the section in its prior state. Nested plain maps become
    nested sections; everything else is stored as is. A document that
    resolves to a single domain object is stored under the empty key.

    Raises:
        TopLevelNotAnObjectError: If data is not a dict
        UnknownTypeError: If a tag names an unregistered type
        ConstructionError: If a constructor rejects its fields
        InvalidFormatError: If a tag value is not a string
        MaxDepthExceededError: If nesting exceeds max_depth

    """
    if not isinstance(data, dict):
        raise TopLevelNotAnObjectError(type(data))

    resolved = resolve(data, registry, max_depth=max_depth)
    if isinstance(resolved, dict):
        _populate(resolved, section)
    else:
        section.set("", resolved)


def _populate(entries: dict[str, Any], section: ConfigurationSection) -> None:
    for key, value in entries.items():
        if isinstance(value, dict):
            _populate(value, section.create_section(key))
        else:
            section.set(key, value)
