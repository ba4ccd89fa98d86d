"""
Tree Renderer
Walks a ComponentNode tree against current state and instantiates components.

Per node, in order: registry lookup -> condition -> repeat expansion ->
bindings -> event callbacks -> children -> prop templates -> instantiate.
Props merge as explicit < binding-derived < event-derived.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from blueprint import ActionSpec, ComponentNode, EventBinding, EventType
from components import ComponentRegistry
from core import get_logger
from .actions import ActionDispatcher, ActionResult
from .bindings import BindingResolver
from .template import STATE_CONDITION, TemplateEvaluator
from .values import ValueKind, is_truthy, kind_of, stringify

logger = get_logger(__name__)

EventHandler = Callable[..., Awaitable[list[ActionResult]]]


class TreeRenderer:
    """Recursive driver turning configuration nodes into host elements."""

    def __init__(
        self,
        registry: ComponentRegistry,
        evaluator: TemplateEvaluator,
        bindings: BindingResolver,
        dispatcher: ActionDispatcher,
        max_depth: int = 64,
    ) -> None:
        self.registry = registry
        self.evaluator = evaluator
        self.bindings = bindings
        self.dispatcher = dispatcher
        self.max_depth = max_depth

    def render(self, node: ComponentNode) -> Any:
        """
        Render a tree.

        Returns:
            The root element, a list of elements (repeating root) or None
        """
        key = stringify(node.key) if node.key is not None else f"{node.type}-0"
        return self._render(node, key, 0, frozenset())

    def _render(self, node: ComponentNode, key: str, depth: int, ancestors: frozenset[int]) -> Any:
        if depth > self.max_depth:
            logger.error("render_depth_exceeded", type=node.type, max_depth=self.max_depth)
            return None
        if id(node) in ancestors:
            logger.error("render_cycle", type=node.type)
            return None

        component = self.registry.get(node.type)
        if component is None:
            logger.warning("unknown_component", type=node.type, available=len(self.registry))
            return None

        if not self.evaluator.evaluate_condition(node.condition):
            return None

        if node.repeat is not None:
            return self._expand(node, depth, ancestors)

        ancestors = ancestors | {id(node)}

        props: dict[str, Any] = dict(node.props)
        if node.bindings:
            props.update(self.bindings.resolve(node.bindings))
        if node.events:
            props.update(self._event_handlers(node.events))

        children = self._render_children(node, depth, ancestors)

        props = {
            name: self.evaluator.process_template(value) if isinstance(value, str) else value
            for name, value in props.items()
        }
        # A `children` prop (e.g. bound text) fills in for missing declared children
        bound_children = props.pop("children", None)
        if node.children is None:
            children = bound_children

        try:
            return component.render(props, children, key=key)
        except Exception as e:
            logger.error("component_failed", type=node.type, error=str(e), exc_info=True)
            return None

    def _expand(self, node: ComponentNode, depth: int, ancestors: frozenset[int]) -> list[Any]:
        """Render one clone of `node` per repeat item."""
        items = self._repeat_items(node.repeat)
        rendered: list[Any] = []

        for index, item in enumerate(items):
            props = {
                name: self.evaluator.process_template(value, item=item) if isinstance(value, str) else value
                for name, value in node.props.items()
            }
            key = f"{node.type}-{index}-{self._item_identity(item, index)}"
            clone = node.model_copy(update={"props": props, "repeat": None, "key": key})
            result = self._render(clone, key, depth, ancestors)
            if result is not None:
                rendered.append(result)

        return rendered

    def _repeat_items(self, repeat: Any) -> list[Any]:
        if isinstance(repeat, str):
            match = STATE_CONDITION.fullmatch(repeat)
            data = self.evaluator.store.get(match.group(1) if match else repeat)
        else:
            data = repeat

        if kind_of(data) is not ValueKind.LIST:
            if data is not None:
                logger.debug("repeat_not_a_list", type=type(data).__name__)
            return []
        return list(data)

    @staticmethod
    def _item_identity(item: Any, index: int) -> str:
        if isinstance(item, Mapping) and is_truthy(item.get("id")):
            return stringify(item["id"])
        return str(index)

    def _render_children(self, node: ComponentNode, depth: int, ancestors: frozenset[int]) -> Any:
        children = node.children
        if children is None:
            return None

        if isinstance(children, ComponentNode):
            return self._render(children, self._child_key(node, children, 0), depth + 1, ancestors)

        if not isinstance(children, list):
            return children

        rendered: list[Any] = []
        for index, child in enumerate(children):
            if not isinstance(child, ComponentNode):
                rendered.append(child)
                continue

            result = self._render(child, self._child_key(node, child, index), depth + 1, ancestors)
            if isinstance(result, list):
                rendered.extend(result)
            elif result is not None:
                rendered.append(result)
        return rendered

    @staticmethod
    def _child_key(parent: ComponentNode, child: ComponentNode, index: int) -> str:
        if child.key is not None:
            return stringify(child.key)
        return f"{parent.type}-child-{index}"

    def _event_handlers(self, events: list[EventBinding]) -> dict[str, EventHandler]:
        """One callback per event type; bindings sharing a type run in order."""
        grouped: dict[EventType, list[ActionSpec]] = {}
        for binding in events:
            grouped.setdefault(binding.event_type, []).append(binding.action)

        return {
            event_type.value: self._make_handler(event_type, actions)
            for event_type, actions in grouped.items()
        }

    def _make_handler(self, event_type: EventType, actions: list[ActionSpec]) -> EventHandler:
        dispatcher = self.dispatcher

        async def handler(event: Any = None) -> list[ActionResult]:
            results: list[ActionResult] = []
            for action in actions:
                try:
                    results.extend(await dispatcher.dispatch(action, event))
                except Exception as e:
                    logger.error("event_handler_failed", event_type=event_type.value, error=str(e), exc_info=True)
            return results

        handler.__name__ = event_type.value
        return handler


__all__ = ["TreeRenderer", "EventHandler"]
