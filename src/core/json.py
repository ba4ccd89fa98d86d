"""Fast JSON encoding and decoding with multiple backends."""

from typing import Any
import json
import sys

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json(text: str, repair: bool = False) -> dict[str, Any]:
    """
    Parse a JSON object from text, optionally repairing it.

    Args:
        text: Text containing a JSON object
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If parsing fails or the document is not an object
    """
    json_str = text.strip()
    if not json_str:
        raise JSONParseError("Empty JSON document")

    # Try msgspec first (fastest)
    try:
        result = msgspec.json.Decoder().decode(json_str.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)

        # Last resort: try json_repair
        try:
            result = json.loads(repair_json(json_str))
        except Exception as repair_error:
            raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def loads(data: bytes | str) -> Any:
    """
    Decode any JSON value (used for remote responses).

    Raises:
        JSONParseError: If the payload is not valid JSON
    """
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON payload: {e}", e)


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, default)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)
    default = kwargs.get("default")

    # Use orjson for compact output (fastest)
    if indent == 0:
        try:
            return orjson.dumps(obj, default=default).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

        try:
            return msgspec.json.Encoder(enc_hook=default).encode(obj).decode("utf-8")
        except (TypeError, ValueError, NotImplementedError):
            pass

    # Use stdlib for pretty-printed output or as fallback (most compatible)
    return json.dumps(obj, indent=indent if indent > 0 else None, default=default)


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Validate JSON size to prevent oversized configurations.

    Args:
        data: JSON string to validate
        max_size: Maximum allowed size in bytes
        name: Name for error messages

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = sys.getsizeof(data)
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")
