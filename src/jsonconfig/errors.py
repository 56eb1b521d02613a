"""Exception hierarchy for JSON configuration conversion.

Errors fall into three families:

- InvalidConfigurationError: a document cannot be read back faithfully
  (syntax, structure, unknown or rejected domain types, excessive nesting).
  These abort the whole load and leave the target section untouched.
- RegistrationError: misuse of the type registry during startup.
- SerializationError: a value cannot be written. The serializer recovers
  these per entry; they surface directly only from the registry.
"""

from __future__ import annotations


class JsonConfigError(Exception):
    """Base class for all jsonconfig errors."""


# =============================================================================
# Read path
# =============================================================================


class InvalidConfigurationError(JsonConfigError, ValueError):
    """A configuration document could not be loaded."""


class InvalidFormatError(InvalidConfigurationError):
    """The text is not valid JSON."""


class TopLevelNotAnObjectError(InvalidConfigurationError):
    """The document root is not a JSON object."""

    def __init__(self, actual: type) -> None:
        self.actual = actual
        super().__init__(
            f"Top level is not a JSON object (got {actual.__name__})",
        )


class UnknownTypeError(InvalidConfigurationError):
    """A tagged object references a type id that is not registered."""

    def __init__(self, type_id: str, available: list[str] | None = None) -> None:
        self.type_id = type_id
        msg = f"Unknown type '{type_id}'"
        if available is not None:
            msg += f". Registered types: {available}"
        super().__init__(msg)


class ConstructionError(InvalidConfigurationError):
    """A registered constructor rejected its fields."""

    def __init__(self, type_id: str, reason: str) -> None:
        self.type_id = type_id
        super().__init__(f"Cannot construct '{type_id}': {reason}")


class MaxDepthExceededError(InvalidConfigurationError):
    """Nesting exceeds the configured recursion bound."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"Nesting exceeds maximum depth of {max_depth}")


# =============================================================================
# Registration
# =============================================================================


class RegistrationError(JsonConfigError):
    """Invalid use of the type registry."""


class DuplicateRegistrationError(RegistrationError):
    """A type id or Python type is registered twice."""

    def __init__(self, type_id: str, existing: type) -> None:
        self.type_id = type_id
        self.existing = existing
        super().__init__(
            f"Type id '{type_id}' already registered to {existing!r}. "
            "Choose a different type id.",
        )


class RegistryFrozenError(RegistrationError):
    """Registration attempted after the registry was frozen."""


# =============================================================================
# Write path
# =============================================================================


class SerializationError(JsonConfigError, TypeError):
    """A value cannot be written as JSON."""


class NotSerializableError(SerializationError):
    """No registration covers the value's type."""

    def __init__(self, value_type: type, reason: str | None = None) -> None:
        self.value_type = value_type
        msg = f"Cannot serialize object of type {value_type.__name__}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TaggingError(SerializationError):
    """A registered tag function failed to export an object."""

    def __init__(self, type_id: str, reason: str) -> None:
        self.type_id = type_id
        super().__init__(f"Cannot tag object as '{type_id}': {reason}")
