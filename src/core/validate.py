"""Configuration validation limits and helpers."""

from dataclasses import dataclass
from typing import Any


# Validation limits
MAX_CONFIG_SIZE = 1024 * 1024  # 1MB
MAX_JSON_DEPTH = 128


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent runaway recursion.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)


def validate_acyclic(obj: Any) -> None:
    """
    Reject configurations whose containers reference themselves.

    JSON text can never be cyclic, but configurations assembled in Python
    can be.

    Raises:
        ValidationError: If a container is reachable from itself
    """
    path: set[int] = set()
    stack: list[tuple[Any, bool]] = [(obj, False)]

    while stack:
        current, leaving = stack.pop()
        if not isinstance(current, (dict, list)):
            continue
        if leaving:
            path.discard(id(current))
            continue
        if id(current) in path:
            raise ValidationError("Configuration contains a reference cycle")

        path.add(id(current))
        stack.append((current, True))
        values = current.values() if isinstance(current, dict) else current
        for value in values:
            stack.append((value, False))
