"""
Blueprint Configuration
Declarative UI configuration schema and parser
"""

from .models import (
    ActionKind,
    ActionSpec,
    ApiConfig,
    ComponentNode,
    DataBinding,
    DataFetchSpec,
    EventBinding,
    EventType,
    HttpMethod,
)
from .parser import BlueprintParser, parse_blueprint, validate_config

__all__ = [
    "ActionKind",
    "ActionSpec",
    "ApiConfig",
    "ComponentNode",
    "DataBinding",
    "DataFetchSpec",
    "EventBinding",
    "EventType",
    "HttpMethod",
    "BlueprintParser",
    "parse_blueprint",
    "validate_config",
]
