"""Tests for jsonconfig.deserializer module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from jsonconfig.errors import (
    ConstructionError,
    InvalidFormatError,
    MaxDepthExceededError,
    TopLevelNotAnObjectError,
    UnknownTypeError,
)
from jsonconfig.deserializer import deserialize_into, resolve
from jsonconfig.registry import TypeRegistry
from jsonconfig.sections import MemorySection


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Polygon:
    vertices: list[Point]


class Recorder:
    """Collects the field types each constructor call receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, type]]] = []

    def __call__(self, type_id: str, fields: dict[str, Any]) -> None:
        self.calls.append((type_id, {k: type(v) for k, v in fields.items()}))


def _registry(recorder: Recorder | None = None) -> TypeRegistry:
    def build_point(fields: dict[str, Any]) -> Point:
        if recorder is not None:
            recorder("Point", fields)
        return Point(**fields)

    def build_polygon(fields: dict[str, Any]) -> Polygon:
        if recorder is not None:
            recorder("Polygon", fields)
        if not all(isinstance(v, Point) for v in fields["vertices"]):
            msg = "vertices must be points"
            raise TypeError(msg)
        return Polygon(vertices=fields["vertices"])

    registry = TypeRegistry()
    registry.register("Point", Point, construct=build_point, tag=lambda p: {"x": p.x, "y": p.y})
    registry.register(
        "Polygon",
        Polygon,
        construct=build_polygon,
        tag=lambda p: {"vertices": p.vertices},
    )
    return registry


class TestResolve:
    """Test bottom-up resolution of tagged maps."""

    def test_plain_values_unchanged(self) -> None:
        """Test that untagged trees resolve to equal values."""
        data = {"a": 1, "b": [1, {"c": None}], "d": {"e": "f"}}

        assert resolve(data, _registry()) == data

    def test_tagged_map_becomes_object(self) -> None:
        """Test that the tag key selects the constructor."""
        result = resolve({"==": "Point", "x": 1, "y": 2}, _registry())

        assert result == Point(1, 2)

    def test_tag_key_excluded_from_fields(self) -> None:
        """Test that constructors receive only the remaining entries."""
        recorder = Recorder()
        resolve({"==": "Point", "x": 1, "y": 2}, _registry(recorder))

        assert recorder.calls == [("Point", {"x": int, "y": int})]

    def test_inner_objects_resolved_first(self) -> None:
        """Test that outer constructors observe materialized inner objects."""
        recorder = Recorder()
        data = {
            "==": "Polygon",
            "vertices": [
                {"==": "Point", "x": 0, "y": 0},
                {"==": "Point", "x": 1, "y": 0},
                {"==": "Point", "x": 0, "y": 1},
            ],
        }

        result = resolve(data, _registry(recorder))

        assert result == Polygon([Point(0, 0), Point(1, 0), Point(0, 1)])
        assert [type_id for type_id, _ in recorder.calls] == [
            "Point",
            "Point",
            "Point",
            "Polygon",
        ]

    def test_objects_in_lists_are_elements(self) -> None:
        """Test that resolved list elements stay in place."""
        data = {"path": [{"==": "Point", "x": 1, "y": 1}, 5, [{"==": "Point", "x": 2, "y": 2}]]}

        result = resolve(data, _registry())

        assert result == {"path": [Point(1, 1), 5, [Point(2, 2)]]}

    def test_unknown_type_raises(self) -> None:
        """Test that unregistered ids abort resolution."""
        with pytest.raises(UnknownTypeError, match="'Circle'"):
            resolve({"shape": {"==": "Circle", "r": 1}}, _registry())

    def test_constructor_rejection_raises(self) -> None:
        """Test that constructor errors are reported with their cause."""
        data = {"==": "Polygon", "vertices": [1, 2]}

        with pytest.raises(ConstructionError, match="vertices must be points") as exc_info:
            resolve(data, _registry())
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_non_string_tag_raises(self) -> None:
        """Test that tag values must be strings."""
        with pytest.raises(InvalidFormatError, match="must be a string"):
            resolve({"==": 5}, _registry())

    def test_max_depth(self) -> None:
        """Test the recursion bound on input trees."""
        assert resolve({"a": [1]}, _registry(), max_depth=2) == {"a": [1]}
        with pytest.raises(MaxDepthExceededError):
            resolve({"a": [[1]]}, _registry(), max_depth=2)


class TestDeserializeInto:
    """Test populating sections from parsed documents."""

    def test_nested_maps_become_sections(self) -> None:
        """Test that plain maps create nested sections."""
        section = MemorySection()

        deserialize_into({"db": {"host": "h", "pool": {"size": 2}}}, section, _registry())

        assert section.is_section("db")
        assert section["db"].is_section("pool")
        assert section.to_dict() == {"db": {"host": "h", "pool": {"size": 2}}}

    def test_order_is_preserved(self) -> None:
        """Test that section keys follow document order."""
        section = MemorySection()

        deserialize_into({"z": 1, "a": 2, "m": 3}, section, _registry())

        assert section.keys() == ["z", "a", "m"]

    def test_maps_in_lists_stay_dicts(self) -> None:
        """Test that only direct map entries become sections."""
        section = MemorySection()

        deserialize_into({"items": [{"id": 1}, {"id": 2}]}, section, _registry())

        assert section.get("items") == [{"id": 1}, {"id": 2}]

    def test_domain_objects_are_set_directly(self) -> None:
        """Test that resolved objects are stored as values, not sections."""
        section = MemorySection()

        deserialize_into({"origin": {"==": "Point", "x": 0, "y": 0}}, section, _registry())

        assert section.get("origin") == Point(0, 0)
        assert not section.is_section("origin")

    def test_tagged_document_stored_under_empty_key(self) -> None:
        """Test a document that is itself a tagged object."""
        section = MemorySection()

        deserialize_into({"==": "Point", "x": 4, "y": 5}, section, _registry())

        assert section.get_values() == {"": Point(4, 5)}

    def test_existing_entries_are_kept(self) -> None:
        """Test that loading merges into the section."""
        section = MemorySection()
        section.set("keep", True)
        section.set("replace", 1)

        deserialize_into({"replace": 2, "new": 3}, section, _registry())

        assert section.to_dict() == {"keep": True, "replace": 2, "new": 3}

    @pytest.mark.parametrize("data", [[1, 2], "text", 3, None, True])
    def test_top_level_must_be_object(self, data: Any) -> None:
        """Test rejection of non-object documents."""
        with pytest.raises(TopLevelNotAnObjectError, match="not a JSON object"):
            deserialize_into(data, MemorySection(), _registry())

    def test_unknown_type_leaves_section_unchanged(self) -> None:
        """Test that failures do not partially populate the section."""
        section = MemorySection()
        section.set("keep", 1)
        data = {"a": 1, "nested": {"b": 2}, "shape": {"==": "Circle"}}

        with pytest.raises(UnknownTypeError):
            deserialize_into(data, section, _registry())

        assert section.to_dict() == {"keep": 1}
