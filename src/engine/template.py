"""
Template Evaluator
Resolves `${...}` placeholders against state, the loop item and the firing event.

Placeholder forms:
    ${state.<path>}   value from the state store
    ${item.<path>}    field of the current repeat item
    ${item}           the repeat item itself
    ${event.<path>}   field of the UI event (action params only)
Anything else resolves to the empty string.
"""

import re
from collections.abc import Mapping
from typing import Any

from core import get_logger
from state import MISSING, StateStore, get_path
from .values import is_truthy, stringify

logger = get_logger(__name__)

PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
STATE_CONDITION = re.compile(r"\$\{state\.([^}]+)\}")


class TemplateEvaluator:
    """Condition and template resolution over one state store."""

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def evaluate_condition(self, condition: Any) -> bool:
        """
        Decide whether a node renders.

        None renders, booleans are taken as-is, an exact `${state.path}` string
        tracks the truthiness of that state value and any other string is
        truthy when non-empty.
        """
        if condition is None:
            return True
        if isinstance(condition, bool):
            return condition

        try:
            if isinstance(condition, str):
                match = STATE_CONDITION.fullmatch(condition)
                if match:
                    value = self.store.get(match.group(1))
                    logger.debug("condition_evaluated", path=match.group(1), result=is_truthy(value))
                    return is_truthy(value)
                return bool(condition)
            return is_truthy(condition)
        except Exception as e:
            logger.warning("condition_failed", condition=str(condition), error=str(e))
            return False

    def process_template(self, template: Any, item: Any = MISSING, event: Any = MISSING) -> Any:
        """
        Substitute every placeholder in `template`.

        Args:
            template: Value to process; non-strings are returned unchanged
            item: Current repeat item, if rendering inside a repeat
            event: Firing UI event, if resolving action params

        Returns:
            The substituted string (or the literal template if substitution fails)
        """
        if not isinstance(template, str) or "${" not in template:
            return template

        def replace(match: re.Match) -> str:
            return self._resolve(match.group(1), item, event)

        try:
            return PLACEHOLDER.sub(replace, template)
        except Exception as e:
            logger.warning("template_failed", template=template, error=str(e))
            return template

    def resolve_params(self, params: Any, event: Any = MISSING, item: Any = MISSING) -> Any:
        """
        Resolve action params: strings are templated, mappings and lists are
        resolved field by field, other scalars pass through.
        """
        try:
            return self._resolve_value(params, item, event)
        except Exception as e:
            logger.warning("params_failed", error=str(e))
            return params

    def _resolve_value(self, value: Any, item: Any, event: Any) -> Any:
        if isinstance(value, str):
            return self.process_template(value, item=item, event=event)
        if isinstance(value, Mapping):
            return {k: self._resolve_value(v, item, event) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve_value(v, item, event) for v in value]
        return value

    def _resolve(self, expression: str, item: Any, event: Any) -> str:
        expression = expression.strip()

        if expression.startswith("state."):
            return stringify(self.store.get(expression[len("state."):]))
        if expression == "item":
            return "" if item is MISSING else stringify(item)
        if expression.startswith("item."):
            if item is MISSING:
                return ""
            return stringify(get_path(item, expression[len("item."):]))
        if expression.startswith("event."):
            if event is MISSING or event is None:
                return ""
            return stringify(get_path(event, expression[len("event."):]))
        return ""
