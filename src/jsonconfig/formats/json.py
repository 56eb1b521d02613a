"""JSON format adapter."""

from __future__ import annotations

import json

from jsonconfig.errors import InvalidFormatError
from jsonconfig.numeric import parse_float, parse_int
from jsonconfig.values import Value


def _reject_constant(name: str) -> float:
    msg = f"Invalid JSON detected: non-standard constant {name}"
    raise InvalidFormatError(msg)


def parse_json(s: str) -> Value:
    """Parse JSON text into builtins with normalized numbers.

    Integral numbers that fit in 64 bits become ``int``, all others
    ``float``. Object member order is preserved.

    Args:
        s: JSON text

    Returns:
        Parsed value tree

    Raises:
        InvalidFormatError: If the text is not valid JSON, uses NaN or
            Infinity, or nests deeper than the interpreter can parse

    """
    try:
        return json.loads(
            s,
            parse_int=parse_int,
            parse_float=parse_float,
            parse_constant=_reject_constant,
        )
    except InvalidFormatError:
        raise
    except (ValueError, OverflowError) as exc:
        # JSONDecodeError, plus number conversions refused by the interpreter
        msg = f"Invalid JSON detected: {exc}"
        raise InvalidFormatError(msg) from exc
    except RecursionError as exc:
        msg = "Invalid JSON detected: document is nested too deeply"
        raise InvalidFormatError(msg) from exc


def write_json(value: Value, *, pretty: bool = False, indent: int = 2) -> str:
    """Write a value tree as JSON text.

    Args:
        value: JSON-compatible builtins
        pretty: Indent nested values when True, compact output otherwise
        indent: Indentation width used when pretty is True

    Returns:
        JSON string; pretty printing affects whitespace only

    """
    if pretty:
        return json.dumps(value, indent=indent, ensure_ascii=False, allow_nan=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
