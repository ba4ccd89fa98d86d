"""Rendered element tree handed to the host."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Element:
    """One instantiated component: resolved props plus rendered children."""

    type: str
    key: str | None = None
    props: dict[str, Any] = field(default_factory=dict)
    children: Any = None

    def handler(self, name: str) -> Callable[..., Any] | None:
        """Event callback prop (e.g. `onClick`), if any."""
        value = self.props.get(name)
        return value if callable(value) else None

    def iter_children(self) -> Iterator[Any]:
        if isinstance(self.children, list):
            yield from self.children
        elif self.children is not None:
            yield self.children

    def walk(self) -> Iterator["Element"]:
        """This element and every descendant element, depth first."""
        yield self
        for child in self.iter_children():
            if isinstance(child, Element):
                yield from child.walk()

    def find(self, predicate: Callable[["Element"], bool]) -> list["Element"]:
        return [el for el in self.walk() if predicate(el)]

    def find_type(self, type_name: str) -> list["Element"]:
        return self.find(lambda el: el.type == type_name)

    def text(self) -> str:
        """Concatenated literal text below this element."""
        parts = []
        for child in self.iter_children():
            if isinstance(child, Element):
                parts.append(child.text())
            elif child is not None:
                parts.append(str(child))
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form; callbacks are replaced by their prop name."""
        props = {k: (f"<{k}>" if callable(v) else v) for k, v in self.props.items()}
        children = [c.to_dict() if isinstance(c, Element) else c for c in self.iter_children()]
        result: dict[str, Any] = {"type": self.type, "props": props}
        if self.key is not None:
            result["key"] = self.key
        if children:
            result["children"] = children
        return result
