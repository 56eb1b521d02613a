"""Type tag registry for serializable domain objects."""

from __future__ import annotations

import base64
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Self

import structlog

from jsonconfig.errors import (
    ConstructionError,
    DuplicateRegistrationError,
    InvalidConfigurationError,
    NotSerializableError,
    RegistryFrozenError,
    TaggingError,
    UnknownTypeError,
)
from jsonconfig.values import TAG_KEY

log = structlog.get_logger(__name__)

_MAX_IDS_IN_ERROR = 10  # Maximum number of type ids to show in error messages
_VALUE_FIELD = "value"  # Field holding the payload of builtin codecs


class Serializable(ABC):
    """Domain object that exports itself as a field map.

    Subclasses are registered with ``TypeRegistry.register_class``:

        @registry.register_class
        class Point(Serializable):
            def serialize(self) -> dict[str, Any]:
                return {"x": self.x, "y": self.y}

            @classmethod
            def deserialize(cls, fields: dict[str, Any]) -> Point:
                return cls(fields["x"], fields["y"])
    """

    @abstractmethod
    def serialize(self) -> dict[str, Any]:
        """Return the fields needed to rebuild this object."""
        ...

    @classmethod
    @abstractmethod
    def deserialize(cls, fields: dict[str, Any]) -> Self:
        """Rebuild an object from fields produced by ``serialize``."""
        ...


@dataclass(frozen=True)
class TypeCodec:
    """Registration record binding a type id to its capabilities."""

    type_id: str
    typ: type
    construct: Callable[[dict[str, Any]], Any]
    tag: Callable[[Any], Mapping[str, Any]]


class BaseRegistry:
    """Read-only lookups shared by the live registry and its snapshots."""

    _by_id: Mapping[str, TypeCodec]
    _by_type: Mapping[type, TypeCodec]

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def type_ids(self) -> list[str]:
        """Registered type ids in registration order."""
        return list(self._by_id)

    def codec_for(self, typ: type) -> TypeCodec | None:
        """Get the codec covering ``typ``, walking the MRO for subclasses."""
        for klass in typ.__mro__:
            if (codec := self._by_type.get(klass)) is not None:
                return codec
        return None

    def is_serializable(self, obj: object) -> bool:
        """Return True if ``obj`` is a registered domain object."""
        return self.codec_for(type(obj)) is not None

    def construct(self, type_id: str, fields: dict[str, Any]) -> Any:
        """Build a domain object from its resolved fields.

        Raises:
            UnknownTypeError: If type_id is not registered
            ConstructionError: If the constructor rejects the fields

        """
        codec = self._by_id.get(type_id)
        if codec is None:
            raise UnknownTypeError(type_id, self.type_ids()[:_MAX_IDS_IN_ERROR])
        try:
            return codec.construct(fields)
        except InvalidConfigurationError:
            raise
        except Exception as exc:
            raise ConstructionError(type_id, str(exc) or type(exc).__name__) from exc

    def tag(self, obj: object) -> tuple[str, dict[str, Any]]:
        """Export a domain object as ``(type_id, fields)``.

        Raises:
            NotSerializableError: If no registration covers the object's type
            TaggingError: If the tag function fails or returns bad fields

        """
        codec = self.codec_for(type(obj))
        if codec is None:
            raise NotSerializableError(type(obj), "type is not registered")
        try:
            fields = codec.tag(obj)
        except Exception as exc:
            raise TaggingError(codec.type_id, str(exc) or type(exc).__name__) from exc

        if not isinstance(fields, Mapping):
            msg = f"expected a mapping of fields, got {type(fields).__name__}"
            raise TaggingError(codec.type_id, msg)
        if TAG_KEY in fields:
            msg = f"field name '{TAG_KEY}' is reserved"
            raise TaggingError(codec.type_id, msg)
        return codec.type_id, dict(fields)


class RegistrySnapshot(BaseRegistry):
    """Immutable view of a frozen registry, safe to share across threads."""

    def __init__(
        self,
        by_id: Mapping[str, TypeCodec],
        by_type: Mapping[type, TypeCodec],
    ) -> None:
        self._by_id = MappingProxyType(dict(by_id))
        self._by_type = MappingProxyType(dict(by_type))


class TypeRegistry(BaseRegistry):
    """Registry mapping type ids to construct/tag capabilities.

    Registration happens once at startup. ``freeze()`` closes registration
    and returns a snapshot to hand to conversion calls. Registration is
    serialized by a lock; lookups are lock-free.

    Usage:
        registry = TypeRegistry.with_builtins()
        registry.register(
            "Point",
            Point,
            construct=lambda f: Point(f["x"], f["y"]),
            tag=lambda p: {"x": p.x, "y": p.y},
        )
        snapshot = registry.freeze()
    """

    def __init__(self) -> None:
        self._by_id: dict[str, TypeCodec] = {}
        self._by_type: dict[type, TypeCodec] = {}
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register[T](
        self,
        type_id: str,
        typ: type[T],
        *,
        construct: Callable[[dict[str, Any]], T],
        tag: Callable[[T], Mapping[str, Any]],
    ) -> None:
        """Register a domain type under ``type_id``.

        Args:
            type_id: Identifier written under the reserved tag key
            typ: The Python type exported by ``tag``
            construct: Builds an instance from resolved fields
            tag: Exports an instance as a field map

        Raises:
            DuplicateRegistrationError: If type_id or typ is already registered
            RegistryFrozenError: If the registry has been frozen

        """
        with self._lock:
            if self._frozen:
                msg = f"Cannot register '{type_id}': registry is frozen"
                raise RegistryFrozenError(msg)
            if (existing := self._by_id.get(type_id)) is not None:
                raise DuplicateRegistrationError(type_id, existing.typ)
            if (other := self._by_type.get(typ)) is not None:
                raise DuplicateRegistrationError(other.type_id, typ)

            codec = TypeCodec(type_id=type_id, typ=typ, construct=construct, tag=tag)
            self._by_id[type_id] = codec
            self._by_type[typ] = codec

        log.debug("registry.registered", type_id=type_id, type=typ.__qualname__)

    def register_class[S: Serializable](
        self,
        cls: type[S],
        type_id: str | None = None,
    ) -> type[S]:
        """Register a ``Serializable`` subclass; usable as a decorator.

        The type id defaults to the class name.
        """
        self.register(
            type_id if type_id is not None else cls.__name__,
            cls,
            construct=cls.deserialize,
            tag=cls.serialize,
        )
        return cls

    def freeze(self) -> RegistrySnapshot:
        """Close registration and return an immutable snapshot."""
        with self._lock:
            self._frozen = True
            snapshot = RegistrySnapshot(self._by_id, self._by_type)
        log.debug("registry.frozen", types=len(snapshot))
        return snapshot

    @classmethod
    def with_builtins(cls) -> TypeRegistry:
        """Create a registry with codecs for builtins JSON cannot express."""
        registry = cls()
        _register_builtins(registry)
        return registry


def _payload(fields: dict[str, Any]) -> Any:
    return fields[_VALUE_FIELD]


def _elements(items: set[Any] | frozenset[Any]) -> list[Any]:
    # Sorted so the written document does not depend on the hash seed
    try:
        return sorted(items)
    except TypeError:
        return list(items)


def _hashable(item: Any) -> Any:
    """Restore tuples that were written as JSON arrays."""
    if isinstance(item, list):
        return tuple(_hashable(x) for x in item)
    return item


def _set_payload(fields: dict[str, Any]) -> list[Any]:
    return [_hashable(item) for item in _payload(fields)]


def _register_builtins(registry: TypeRegistry) -> None:
    """Pre-register codecs for Python builtin types.

    Each stores its encoded payload under a single ``value`` field, except
    ``timedelta``, which keeps its exact days, seconds and microseconds.
    Set elements are written sorted when they are comparable, and arrays
    among them are read back as tuples.
    """
    registry.register(
        "set",
        set,
        construct=lambda f: set(_set_payload(f)),
        tag=lambda s: {_VALUE_FIELD: _elements(s)},
    )

    registry.register(
        "frozenset",
        frozenset,
        construct=lambda f: frozenset(_set_payload(f)),
        tag=lambda s: {_VALUE_FIELD: _elements(s)},
    )

    registry.register(
        "bytes",
        bytes,
        construct=lambda f: base64.b64decode(_payload(f), validate=True),
        tag=lambda b: {_VALUE_FIELD: base64.b64encode(b).decode("ascii")},
    )

    registry.register(
        "Decimal",
        Decimal,
        construct=lambda f: Decimal(_payload(f)),
        tag=lambda d: {_VALUE_FIELD: str(d)},
    )

    registry.register(
        "datetime",
        datetime,
        construct=lambda f: datetime.fromisoformat(_payload(f)),
        tag=lambda dt: {_VALUE_FIELD: dt.isoformat()},
    )

    registry.register(
        "date",
        date,
        construct=lambda f: date.fromisoformat(_payload(f)),
        tag=lambda d: {_VALUE_FIELD: d.isoformat()},
    )

    registry.register(
        "time",
        time,
        construct=lambda f: time.fromisoformat(_payload(f)),
        tag=lambda t: {_VALUE_FIELD: t.isoformat()},
    )

    registry.register(
        "timedelta",
        timedelta,
        construct=lambda f: timedelta(
            days=f["days"], seconds=f["seconds"], microseconds=f["microseconds"]
        ),
        tag=lambda td: {
            "days": td.days,
            "seconds": td.seconds,
            "microseconds": td.microseconds,
        },
    )
