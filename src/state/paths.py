"""Dotted-path access into nested mappings, lists and plain objects."""

from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Sentinel for "no value at this path" (distinct from a stored None)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dotted path, ignoring empty segments."""
    return [part for part in path.split(".") if part]


def _step(current: Any, part: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(part, MISSING)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        try:
            return current[int(part)]
        except (ValueError, IndexError):
            return MISSING
    if current is None or current is MISSING or isinstance(current, (str, bytes, int, float)):
        return MISSING
    return getattr(current, part, MISSING)


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """
    Resolve a dotted path.

    Missing intermediate segments short-circuit to `default`; they never raise.
    Mappings are indexed by key, sequences by integer segment and other
    objects by attribute. A path with no segments names nothing.
    """
    parts = split_path(path)
    if not parts:
        return default

    current = obj
    for part in parts:
        current = _step(current, part)
        if current is MISSING:
            return default
    return current


def set_path(data: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """
    Return a copy of `data` with `value` written at `path`.

    Every mapping along the path is copied; non-mapping intermediates are
    replaced by fresh mappings. `data` itself is never modified.
    """
    parts = split_path(path)
    if not parts:
        raise ValueError("State key must not be empty")

    root = dict(data)
    current = root
    for part in parts[:-1]:
        child = current.get(part)
        child = dict(child) if isinstance(child, Mapping) else {}
        current[part] = child
        current = child
    current[parts[-1]] = value
    return root


def delete_path(data: Mapping[str, Any], path: str) -> tuple[dict[str, Any], bool]:
    """
    Return a copy of `data` without the leaf at `path`.

    Returns:
        (new_data, removed) where `removed` is False when nothing was there
        (in which case `new_data` is a shallow copy of `data`)
    """
    parts = split_path(path)
    if not parts:
        return dict(data), False

    # Check presence before copying anything
    parent: Any = data
    for part in parts[:-1]:
        parent = parent.get(part) if isinstance(parent, Mapping) else None
    if not isinstance(parent, Mapping) or parts[-1] not in parent:
        return dict(data), False

    root = dict(data)
    current = root
    for part in parts[:-1]:
        child = dict(current[part])
        current[part] = child
        current = child
    del current[parts[-1]]
    return root, True
