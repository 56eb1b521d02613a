"""Classification of JSON numbers into integers and floats.

JSON has a single number type. Configuration consumers, however, compare
whole numbers by exact integer equality, so a number is stored as ``int``
whenever it is integral and fits in 64 bits, and as ``float`` otherwise:

    3.0  -> 3
    3.5  -> 3.5
    -0.0 -> 0
    1e20 -> 1e20 (integral, but outside the int64 range)
"""

from __future__ import annotations

import math

from jsonconfig.values import INT64_MAX, INT64_MIN

# Decimal digits in INT64_MAX
_INT64_DIGITS = 19


def _fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def normalize_number(value: int | float) -> int | float:
    """Classify a number as integral or fractional.

    Args:
        value: A number as produced by a JSON parser

    Returns:
        ``int`` if the value is integral and fits in a signed 64-bit
        integer, ``float`` otherwise. Integers beyond the float range
        become infinities. Booleans and non-finite floats are returned
        unchanged.

    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value if _fits_int64(value) else _int_to_float(value)
    if not math.isfinite(value):
        return value

    truncated = math.trunc(value)
    # ceil alone equals the truncation for negative fractions (-2.5 -> -2)
    if math.ceil(value) == truncated == value and _fits_int64(truncated):
        return truncated
    return float(value)


def parse_int(literal: str) -> int | float:
    """``json.loads`` hook for integer literals."""
    # JSON forbids leading zeros, so longer literals are outside int64.
    # Converting them with float() also sidesteps int()'s digit limit.
    if len(literal.lstrip("-")) > _INT64_DIGITS:
        return float(literal)
    return normalize_number(int(literal))


def parse_float(literal: str) -> int | float:
    """``json.loads`` hook for literals with a fraction or exponent."""
    return normalize_number(float(literal))
