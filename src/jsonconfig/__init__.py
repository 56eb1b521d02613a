"""jsonconfig - Ordered JSON configuration trees with typed domain objects."""

from jsonconfig.config import (
    JsonConfiguration,
    JsonConfigurationOptions,
    load_configuration,
)
from jsonconfig.deserializer import (
    deserialize_into,
    resolve,
)
from jsonconfig.errors import (
    ConstructionError,
    DuplicateRegistrationError,
    InvalidConfigurationError,
    InvalidFormatError,
    JsonConfigError,
    MaxDepthExceededError,
    NotSerializableError,
    RegistrationError,
    RegistryFrozenError,
    SerializationError,
    TaggingError,
    TopLevelNotAnObjectError,
    UnknownTypeError,
)
from jsonconfig.formats.json import (
    parse_json,
    write_json,
)
from jsonconfig.logging import configure_logging
from jsonconfig.numeric import normalize_number
from jsonconfig.registry import (
    BaseRegistry,
    RegistrySnapshot,
    Serializable,
    TypeRegistry,
)
from jsonconfig.sections import (
    ConfigurationSection,
    MemorySection,
)
from jsonconfig.serializer import serialize
from jsonconfig.values import (
    DEFAULT_MAX_DEPTH,
    TAG_KEY,
    Value,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "TAG_KEY",
    # Registry
    "BaseRegistry",
    # Sections
    "ConfigurationSection",
    # Errors
    "ConstructionError",
    "DuplicateRegistrationError",
    "InvalidConfigurationError",
    "InvalidFormatError",
    # Configuration
    "JsonConfigError",
    "JsonConfiguration",
    "JsonConfigurationOptions",
    "MaxDepthExceededError",
    "MemorySection",
    "NotSerializableError",
    "RegistrationError",
    "RegistryFrozenError",
    "RegistrySnapshot",
    "Serializable",
    "SerializationError",
    "TaggingError",
    "TopLevelNotAnObjectError",
    "TypeRegistry",
    "UnknownTypeError",
    "Value",
    # Conversion
    "configure_logging",
    "deserialize_into",
    "load_configuration",
    "normalize_number",
    "parse_json",
    "resolve",
    "serialize",
    "write_json",
]
