"""Format adapters for serialization.

Each format module provides parse and write functions that work with the
core serialize/deserialize_into conversion.
"""

from jsonconfig.formats.json import parse_json, write_json

__all__ = ["parse_json", "write_json"]
