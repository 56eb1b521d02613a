"""Value model shared by the serializer and deserializer."""

from __future__ import annotations

# Reserved key marking a mapping as a serialized domain object:
# {"==": "<type_id>", ...fields}
# User mappings must not use this key; they would be read back as tagged objects.
TAG_KEY = "=="

# Recursion bound for both conversion directions
DEFAULT_MAX_DEPTH = 256

# Integral range read back as int. Larger Python ints are written exactly
# but load as float.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

type Scalar = None | bool | int | float | str
type Value = Scalar | list[Value] | dict[str, Value]

SCALAR_TYPES: tuple[type, ...] = (type(None), bool, int, float, str)


def is_scalar(value: object) -> bool:
    """Return True if value is a JSON scalar (null, bool, number, or string)."""
    return isinstance(value, SCALAR_TYPES)
