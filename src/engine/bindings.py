"""Binding Resolver - maps declared data bindings onto props."""

from collections.abc import Mapping
from typing import Any

from blueprint import DataBinding
from core import get_logger
from state import StateStore, get_path
from .transforms import TransformRegistry
from .values import is_truthy

logger = get_logger(__name__)

LOADING_SUFFIX = "_loading"
ERROR_SUFFIX = "_error"


def loading_key(key: str) -> str:
    """Companion key holding the in-flight flag for `key`."""
    return f"{key}{LOADING_SUFFIX}"


def error_key(key: str) -> str:
    """Companion key holding the last remote error for `key`."""
    return f"{key}{ERROR_SUFFIX}"


class BindingResolver:
    """Resolves bindings against the store, adding `loading`/`error` companions."""

    def __init__(self, store: StateStore, transforms: TransformRegistry) -> None:
        self.store = store
        self.transforms = transforms

    def resolve(self, bindings: Mapping[str, DataBinding]) -> dict[str, Any]:
        """
        Compute binding-derived props.

        Args:
            bindings: prop name -> binding

        Returns:
            Props to merge over the node's explicit props
        """
        props: dict[str, Any] = {}

        for prop, binding in bindings.items():
            props[prop] = self.resolve_value(binding)

            if self.store.has(loading_key(binding.source)):
                props["loading"] = self.store.get(loading_key(binding.source))

            error = self.store.get(error_key(binding.source))
            if is_truthy(error):
                props["error"] = error

        return props

    def resolve_value(self, binding: DataBinding) -> Any:
        """Bound value after the optional field lookup and transform."""
        value = self.store.get(binding.source)
        if binding.field:
            value = get_path(value, binding.field)
        return self.transforms.apply(binding.transform, value)
