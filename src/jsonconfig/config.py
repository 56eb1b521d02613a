"""JSON-backed configuration with load and save helpers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from jsonconfig.deserializer import deserialize_into
from jsonconfig.errors import InvalidConfigurationError, InvalidFormatError
from jsonconfig.formats.json import parse_json, write_json
from jsonconfig.registry import BaseRegistry, TypeRegistry
from jsonconfig.sections import MemorySection
from jsonconfig.serializer import serialize
from jsonconfig.values import DEFAULT_MAX_DEPTH

log = structlog.get_logger(__name__)

_BLANK_CONFIG = "{}"


@dataclass(frozen=True)
class JsonConfigurationOptions:
    """Options controlling how a configuration is written and read.

    Attributes:
        pretty_print: Indent the saved document
        indent: Indentation width used when pretty printing
        max_depth: Maximum nesting of maps and lists in either direction

    """

    pretty_print: bool = False
    indent: int = 2
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.indent < 0:
            msg = f"indent must be non-negative, got {self.indent}"
            raise ValueError(msg)
        if self.max_depth < 1:
            msg = f"max_depth must be at least 1, got {self.max_depth}"
            raise ValueError(msg)

    def with_(self, **changes: Any) -> JsonConfigurationOptions:
        """Return a copy with the given options replaced."""
        return dataclasses.replace(self, **changes)


class JsonConfiguration(MemorySection):
    """Configuration tree that saves to and loads from JSON text.

    Domain objects round-trip through the registry given at construction.
    Without one, a frozen registry of builtin codecs (sets, bytes,
    datetimes, Decimal, ...) is used.
    """

    def __init__(
        self,
        options: JsonConfigurationOptions | None = None,
        registry: BaseRegistry | None = None,
    ) -> None:
        super().__init__()
        self.options = options if options is not None else JsonConfigurationOptions()
        self.registry = (
            registry if registry is not None else TypeRegistry.with_builtins().freeze()
        )

    def save_to_string(self) -> str:
        """Serialize the configuration to JSON text.

        An empty configuration produces the empty string rather than ``{}``.
        """
        data = serialize(self, self.registry, max_depth=self.options.max_depth)
        dump = write_json(
            data,
            pretty=self.options.pretty_print,
            indent=self.options.indent,
        )
        if dump == _BLANK_CONFIG:
            return ""
        return dump

    def load_from_string(self, contents: str) -> None:
        """Load entries from JSON text into this configuration.

        Empty text leaves the configuration unchanged. On error nothing is
        modified.

        Raises:
            InvalidFormatError: If the text is not valid JSON
            TopLevelNotAnObjectError: If the document root is not an object
            UnknownTypeError: If a tag names an unregistered type
            ConstructionError: If a constructor rejects its fields
            MaxDepthExceededError: If nesting exceeds options.max_depth

        """
        if not contents:
            return
        data = parse_json(contents)
        deserialize_into(data, self, self.registry, max_depth=self.options.max_depth)

    def save(self, path: str | Path) -> None:
        """Write the configuration to a UTF-8 file, creating parent directories."""
        file = Path(path)
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(self.save_to_string(), encoding="utf-8")

    def load(self, path: str | Path) -> None:
        """Load entries from a UTF-8 file.

        Raises:
            OSError: If the file cannot be read
            InvalidConfigurationError: If the contents cannot be loaded

        """
        try:
            contents = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"File is not valid UTF-8: {exc}"
            raise InvalidFormatError(msg) from exc
        self.load_from_string(contents)


def load_configuration(
    path: str | Path,
    *,
    options: JsonConfigurationOptions | None = None,
    registry: BaseRegistry | None = None,
) -> JsonConfiguration:
    """Load a configuration from a file without raising.

    A missing file, read failure, or invalid document is logged and an empty
    configuration is returned.
    """
    config = JsonConfiguration(options=options, registry=registry)
    try:
        config.load(path)
    except FileNotFoundError as exc:
        _log_load_failure(path, "not found", exc)
    except OSError as exc:
        _log_load_failure(path, "io", exc)
    except InvalidConfigurationError as exc:
        _log_load_failure(path, "invalid", exc)
    return config


def _log_load_failure(path: str | Path, reason: str, exc: Exception) -> None:
    log.error("configuration.load_failed", path=str(path), reason=reason, error=str(exc))
