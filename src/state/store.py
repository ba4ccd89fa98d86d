"""
State Store
Single key/value namespace shared by one interpreter instance.
"""

import copy
from collections.abc import Callable
from typing import Any

from core import get_logger
from .paths import MISSING, delete_path, get_path, set_path

logger = get_logger(__name__)

Listener = Callable[[str, Any], None]


class StateStore:
    """
    Dotted-path state with copy-on-write updates.

    Writing None removes the key, so a later `has` is False rather than
    "present with None". Every effective write notifies subscribers in order;
    that notification is the host's cue to re-render.

    Examples:
        >>> store = StateStore()
        >>> store.set("user.name", "Ann")
        >>> store.get("user")
        {'name': 'Ann'}
        >>> store.set("user.name", None)
        >>> store.has("user.name")
        False
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._listeners: list[Listener] = []
        for key, value in (initial or {}).items():
            if value is not None:
                self._data = set_path(self._data, key, value)

    def get(self, key: str) -> Any:
        """
        Value at `key`, or None when absent.

        Mappings and lists come back as copies; changing them never reaches
        the store without a `set`.
        """
        value = get_path(self._data, key)
        if isinstance(value, (dict, list)):
            return copy.deepcopy(value)
        return value

    def has(self, key: str) -> bool:
        """True when `key` resolves to a stored value."""
        return get_path(self._data, key, MISSING) is not MISSING

    def set(self, key: str, value: Any) -> None:
        """
        Write `value` at `key`, creating nested mappings along a dotted path.

        Args:
            key: Dotted state key
            value: New value; None deletes the key
        """
        if value is None:
            self.delete(key)
            return

        self._data = set_path(self._data, key, value)
        logger.debug("state_set", key=key)
        self._notify(key, value)

    def delete(self, key: str) -> bool:
        """
        Remove `key`.

        Returns:
            True if something was removed
        """
        self._data, removed = delete_path(self._data, key)
        if removed:
            logger.debug("state_deleted", key=key)
            self._notify(key, None)
        return removed

    def clear(self) -> None:
        """Remove every key."""
        keys = list(self._data)
        self._data = {}
        for key in keys:
            self._notify(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the current state."""
        return copy.deepcopy(self._data)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception as e:
                logger.error("listener_failed", key=key, error=str(e), exc_info=True)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        """Number of top-level keys."""
        return len(self._data)
