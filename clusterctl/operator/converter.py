"""
Value Converter.

Converts the textual value of a ``key=value`` argument into the primitive
type declared by an operator schema.
"""

import math
import re

from clusterctl.core.exceptions import ConversionError, UnsupportedTypeError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_LITERALS = frozenset({"1", "t", "true"})
_FALSE_LITERALS = frozenset({"0", "f", "false"})

TypedValue = str | int | bool | float


def _to_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ConversionError(raw, "int")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ConversionError(raw, "int")
    return value


def _to_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise ConversionError(raw, "bool")


def _to_float(raw: str) -> float:
    # float() tolerates surrounding whitespace and digit separators
    if not raw or raw != raw.strip() or "_" in raw:
        raise ConversionError(raw, "float")
    try:
        value = float(raw)
    except ValueError:
        raise ConversionError(raw, "float") from None
    # nan/inf and overflow have no JSON encoding
    if not math.isfinite(value):
        raise ConversionError(raw, "float")
    return value


_CONVERTERS = {
    "string": str,
    "int": _to_int,
    "bool": _to_bool,
    "float": _to_float,
}


def convert_value(raw: str, target_type: str) -> TypedValue:
    """
    Convert a raw string to the declared schema type.

    Args:
        raw: Value exactly as typed by the user
        target_type: One of string, int, bool, float

    Returns:
        The typed value

    Raises:
        ConversionError: The value is not valid for the type
        UnsupportedTypeError: The type itself is unknown
    """
    try:
        converter = _CONVERTERS[target_type]
    except KeyError:
        raise UnsupportedTypeError(target_type) from None
    return converter(raw)
