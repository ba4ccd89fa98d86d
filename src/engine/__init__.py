"""
Interpreter Engine
Template evaluation, transforms, bindings, rendering and action dispatch
"""

from .actions import ActionDispatcher, ActionResult, ActionStatus
from .bindings import BindingResolver, error_key, loading_key
from .fetch import DataFetchOrchestrator, FetchOutcome, FetchQueue
from .interpreter import Interpreter
from .navigation import Navigator, RecordingNavigator
from .renderer import TreeRenderer
from .template import TemplateEvaluator
from .transforms import TransformRegistry
from .values import ValueKind, is_truthy, kind_of, stringify

__all__ = [
    "ActionDispatcher",
    "ActionResult",
    "ActionStatus",
    "BindingResolver",
    "error_key",
    "loading_key",
    "DataFetchOrchestrator",
    "FetchOutcome",
    "FetchQueue",
    "Interpreter",
    "Navigator",
    "RecordingNavigator",
    "TreeRenderer",
    "TemplateEvaluator",
    "TransformRegistry",
    "ValueKind",
    "is_truthy",
    "kind_of",
    "stringify",
]
