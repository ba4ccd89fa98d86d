"""
Interpreter State
Dotted-path key/value store and path helpers
"""

from .paths import MISSING, delete_path, get_path, set_path, split_path
from .store import Listener, StateStore

__all__ = [
    "MISSING",
    "delete_path",
    "get_path",
    "set_path",
    "split_path",
    "Listener",
    "StateStore",
]
