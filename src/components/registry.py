"""
Component Registry
Maps node type names to host component implementations
"""

from typing import Any, Protocol

from core import get_logger
from .element import Element

logger = get_logger(__name__)


class Component(Protocol):
    """Host capability that turns resolved props and children into an element."""

    def render(self, props: dict[str, Any], children: Any, key: str | None = None) -> Any:
        ...


class ElementComponent:
    """Default component: wraps props and children in an `Element`."""

    def __init__(self, type_name: str, defaults: dict[str, Any] | None = None) -> None:
        self.type_name = type_name
        self.defaults = defaults or {}

    def render(self, props: dict[str, Any], children: Any, key: str | None = None) -> Element:
        return Element(self.type_name, key, {**self.defaults, **props}, children)

    def __repr__(self) -> str:
        return f"ElementComponent({self.type_name!r})"


class ComponentRegistry:
    """
    Central registry of renderable component types.
    Adding a type is a registration, not a code branch.
    """

    def __init__(self) -> None:
        self.components: dict[str, Component] = {}

    def register(self, type_name: str, component: Component, replace: bool = False) -> None:
        """
        Register a component implementation.

        Args:
            type_name: Node `type` it serves
            component: Implementation
            replace: Allow overriding an existing registration
        """
        if type_name in self.components and not replace:
            logger.warning("component_already_registered", type=type_name)
            return
        self.components[type_name] = component
        logger.debug("component_registered", type=type_name)

    def unregister(self, type_name: str) -> None:
        """Unregister a component type"""
        self.components.pop(type_name, None)

    def get(self, type_name: str) -> Component | None:
        """Get component implementation by type name"""
        return self.components.get(type_name)

    def names(self) -> list[str]:
        return sorted(self.components)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self.components

    def __len__(self) -> int:
        return len(self.components)


UI_COMPONENTS = ("Button", "Card", "CardHeader", "CardTitle", "CardContent", "Alert", "Select")

HTML_ELEMENTS = (
    "div", "span", "p", "h1", "h2", "h3", "section", "article",
    "header", "footer", "nav", "aside", "main", "label", "input",
)


def create_default_registry() -> ComponentRegistry:
    """Registry with the stock UI components and plain HTML elements."""
    registry = ComponentRegistry()
    for name in UI_COMPONENTS + HTML_ELEMENTS:
        registry.register(name, ElementComponent(name))
    return registry
