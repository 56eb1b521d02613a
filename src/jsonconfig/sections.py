"""Configuration tree interface and its in-memory implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any


class ConfigurationSection(ABC):
    """Ordered tree of configuration entries.

    Keys are direct child names; no path navigation is performed. Values are
    scalars, lists, domain objects, or nested sections.
    """

    @abstractmethod
    def get_values(self) -> dict[str, Any]:
        """Return the direct entries in insertion order."""
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored at key, or default."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value at key, replacing any existing entry."""
        ...

    @abstractmethod
    def create_section(self, key: str) -> ConfigurationSection:
        """Create an empty nested section at key, replacing any existing entry."""
        ...


class MemorySection(ConfigurationSection):
    """Configuration section backed by an insertion-ordered dict."""

    def __init__(self, name: str = "", parent: MemorySection | None = None) -> None:
        self._name = name
        self._parent = parent
        self._entries: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> MemorySection | None:
        return self._parent

    def get_values(self) -> dict[str, Any]:
        return dict(self._entries)

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def create_section(self, key: str) -> MemorySection:
        section = MemorySection(key, parent=self)
        self.set(key, section)
        return section

    def remove(self, key: str) -> None:
        """Delete the entry at key if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def is_section(self, key: str) -> bool:
        return isinstance(self._entries.get(key), ConfigurationSection)

    def keys(self) -> list[str]:
        return list(self._entries)

    def to_dict(self) -> dict[str, Any]:
        """Return the entries as nested dicts, converting child sections."""
        return {
            key: value.to_dict() if isinstance(value, MemorySection) else value
            for key, value in self._entries.items()
        }

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, keys={self.keys()})"
