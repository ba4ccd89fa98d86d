"""Classification and display conversion of dynamic prop/param values."""

import math
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from core.json import safe_json_dumps


class ValueKind(str, Enum):
    """Closed set of value shapes the template and transform code handles."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    MAP = "map"
    ERROR = "error"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a value. `bool` is checked before numbers since it subclasses int."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return ValueKind.LIST
    if isinstance(value, BaseException):
        return ValueKind.ERROR
    return ValueKind.OTHER


def format_number(value: int | float) -> str:
    """`3.0` -> `"3"`, `2.5` -> `"2.5"`; NaN and infinities keep Python's names."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def stringify(value: Any) -> str:
    """Human-readable text for a value; None becomes the empty string."""
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return format_number(value)
    if kind is ValueKind.STRING:
        return value
    if kind in (ValueKind.MAP, ValueKind.LIST):
        return safe_json_dumps(value, default=str)
    return str(value)


def is_truthy(value: Any) -> bool:
    """Python truthiness, except NaN counts as false."""
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)
