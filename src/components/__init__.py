"""
Host Components
Element output type and the type-name registry the renderer instantiates from
"""

from .element import Element
from .registry import (
    Component,
    ComponentRegistry,
    ElementComponent,
    create_default_registry,
)

__all__ = [
    "Element",
    "Component",
    "ComponentRegistry",
    "ElementComponent",
    "create_default_registry",
]
