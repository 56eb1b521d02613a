"""Conversion of configuration trees to JSON-compatible value trees."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from jsonconfig.errors import (
    MaxDepthExceededError,
    NotSerializableError,
    SerializationError,
)
from jsonconfig.registry import BaseRegistry
from jsonconfig.sections import ConfigurationSection
from jsonconfig.values import (
    DEFAULT_MAX_DEPTH,
    INT64_MAX,
    INT64_MIN,
    TAG_KEY,
    Value,
    is_scalar,
)

log = structlog.get_logger(__name__)


def serialize(
    entries: Mapping[Any, Any] | ConfigurationSection,
    registry: BaseRegistry,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict[str, Value]:
    """Convert a section or mapping to an ordered JSON-compatible dict.

    Domain objects are exported through the registry as tagged maps:
    {"==": "<type_id>", ...fields}. Fields are serialized recursively, so
    they may contain nested domain objects.

    Entries that cannot be serialized (unregistered types, failing tag
    functions, non-finite floats) are logged and left out; their siblings
    are still written. A failure inside a list or inside a domain
    object's fields drops the whole entry holding it, since a partial
    object could not be constructed again.

    Args:
        entries: Section or mapping to serialize
        registry: Registry used to tag domain objects
        max_depth: Maximum nesting of maps and lists

    Returns:
        Dict of JSON-compatible builtins in input order

    Raises:
        MaxDepthExceededError: If nesting exceeds max_depth

    """
    if isinstance(entries, ConfigurationSection):
        entries = entries.get_values()
    return _serialize_mapping(entries, registry, max_depth, depth=1)


def _check_depth(depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise MaxDepthExceededError(max_depth)


def _serialize_mapping(
    entries: Mapping[Any, Any],
    registry: BaseRegistry,
    max_depth: int,
    depth: int,
    *,
    recover: bool = True,
) -> dict[str, Value]:
    _check_depth(depth, max_depth)
    result: dict[str, Value] = {}
    for key, value in entries.items():
        name = str(key)
        try:
            result[name] = _serialize_value(
                value, registry, max_depth, depth, recover=recover
            )
        except SerializationError as exc:
            if not recover:
                raise
            log.warning("serialization.entry_skipped", key=name, error=str(exc))
    return result


def _check_int_text(value: int) -> None:
    try:
        str(value)
    except ValueError as exc:
        raise NotSerializableError(int, str(exc)) from exc


def _serialize_value(
    value: Any,
    registry: BaseRegistry,
    max_depth: int,
    depth: int,
    *,
    recover: bool = True,
) -> Value:
    """Serialize a value found at the given container depth.

    With recover=False a failure anywhere below propagates instead of
    dropping the failing entry.
    """
    # 1. Nested sections
    if isinstance(value, ConfigurationSection):
        return _serialize_mapping(
            value.get_values(), registry, max_depth, depth + 1, recover=recover
        )

    # 2. Registered domain objects (checked before containers so registered
    # sets, mappings or sequences keep their identity). A constructor needs
    # every field, so the object is written whole or not at all.
    if registry.is_serializable(value):
        type_id, fields = registry.tag(value)
        tagged = {TAG_KEY: type_id, **fields}
        return _serialize_mapping(tagged, registry, max_depth, depth + 1, recover=False)

    # 3. Plain mappings
    if isinstance(value, Mapping):
        return _serialize_mapping(value, registry, max_depth, depth + 1, recover=recover)

    # 4. Sequences become JSON arrays
    if isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray):
        _check_depth(depth + 1, max_depth)
        return [
            _serialize_value(item, registry, max_depth, depth + 1, recover=recover)
            for item in value
        ]

    # 5. Scalars pass through
    if isinstance(value, float) and not math.isfinite(value):
        raise NotSerializableError(float, f"{value} has no JSON representation")
    if isinstance(value, int) and not isinstance(value, bool) and not (
        INT64_MIN <= value <= INT64_MAX
    ):
        _check_int_text(value)
        # Written exactly, but read back as the nearest float
        log.warning("serialization.int_out_of_range", value=value)
    if is_scalar(value):
        return value

    raise NotSerializableError(type(value))
