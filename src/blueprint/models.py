"""Configuration Data Models."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    """UI events a node can react to (values are the callback prop names)."""

    CLICK = "onClick"
    CHANGE = "onChange"
    SUBMIT = "onSubmit"
    BLUR = "onBlur"
    FOCUS = "onFocus"
    KEY_PRESS = "onKeyPress"
    KEY_DOWN = "onKeyDown"
    KEY_UP = "onKeyUp"
    MOUSE_OVER = "onMouseOver"
    MOUSE_OUT = "onMouseOut"

    @classmethod
    def parse(cls, value: Any) -> "EventType":
        """Accept `onKeyPress`, `keyPress`, `key-press`, `key_press` and friends."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid event type: {value!r}")

        normalized = value.strip().replace("-", "").replace("_", "").lower()
        if normalized.startswith("on"):
            normalized = normalized[2:]

        for member in cls:
            if member.value[2:].lower() == normalized:
                return member
        raise ValueError(f"Unknown event type: {value!r}")


class ActionKind(str, Enum):
    """Action kinds understood by the dispatcher."""

    SET_STATE = "setState"
    API = "api"
    SUBMIT = "submit"
    NAVIGATE = "navigate"


class HttpMethod(str, Enum):
    """HTTP methods for remote calls."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class Schema(BaseModel):
    """Base for configuration models: camelCase on the wire, immutable once parsed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ApiConfig(Schema):
    """Remote call description. `url` and `body` fields may hold templates."""

    url: str = Field(..., min_length=1)
    method: HttpMethod = Field(default=HttpMethod.GET)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = Field(default=None)

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        """Methods are case-insensitive on the wire."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_headers(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        return v


class ActionSpec(Schema):
    """A side effect plus its optional success/error continuations."""

    kind: str = Field(..., validation_alias=AliasChoices("action", "kind"), serialization_alias="action")
    target: str | None = Field(default=None)
    params: Any = Field(default=None)
    success_action: "ActionSpec | None" = Field(default=None)
    error_action: "ActionSpec | None" = Field(default=None)

    @property
    def action_kind(self) -> ActionKind | None:
        """Known kind, or None for kinds the dispatcher ignores."""
        try:
            return ActionKind(self.kind)
        except ValueError:
            return None


class EventBinding(Schema):
    """
    Binds an event type to an action.

    Accepts the flat wire form `{type, action: "api", target, params, ...}`
    as well as the nested form `{type, action: {action: "api", ...}}`.
    """

    event_type: EventType = Field(
        ...,
        validation_alias=AliasChoices("type", "eventType", "event_type"),
        serialization_alias="type",
    )
    action: ActionSpec

    @model_validator(mode="before")
    @classmethod
    def unflatten(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("action"), str):
            event_keys = {"type", "eventType", "event_type"}
            action = {k: v for k, v in data.items() if k not in event_keys}
            event = {k: v for k, v in data.items() if k in event_keys}
            event["action"] = action
            return event
        return data

    @field_validator("event_type", mode="before")
    @classmethod
    def parse_event_type(cls, v: Any) -> EventType:
        return EventType.parse(v)


class DataBinding(Schema):
    """Links a prop to a state key, optionally a nested field and a transform."""

    source: str = Field(..., min_length=1)
    field: str | None = Field(default=None)
    transform: str | None = Field(default=None)


class DataFetchSpec(Schema):
    """Remote data loaded into `key` when the tree mounts."""

    key: str = Field(..., min_length=1)
    api: ApiConfig
    transform: str | None = Field(default=None)
    on_success: ActionSpec | None = Field(default=None)
    on_error: ActionSpec | None = Field(default=None)


def is_node_data(value: Any) -> bool:
    """True when a raw child looks like a node (a mapping with a `type`)."""
    return isinstance(value, dict) and isinstance(value.get("type"), str)


class ComponentNode(Schema):
    """One declarative unit of UI configuration."""

    type: str = Field(..., min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    children: Any = Field(default=None)
    condition: bool | str | None = Field(default=None)
    repeat: list[Any] | str | None = Field(default=None)
    key: str | int | None = Field(default=None)
    events: list[EventBinding] = Field(default_factory=list)
    bindings: dict[str, DataBinding] = Field(default_factory=dict)
    data_fetch: list[DataFetchSpec] = Field(default_factory=list)

    @field_validator("props", mode="before")
    @classmethod
    def default_props(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("children", mode="before")
    @classmethod
    def parse_children(cls, v: Any) -> Any:
        """Node-shaped children become ComponentNodes; literals pass through."""
        if is_node_data(v):
            return ComponentNode.model_validate(v)
        if isinstance(v, list):
            return [ComponentNode.model_validate(c) if is_node_data(c) else c for c in v]
        return v

    def child_nodes(self) -> list["ComponentNode"]:
        """Direct children that are nodes."""
        if isinstance(self.children, ComponentNode):
            return [self.children]
        if isinstance(self.children, list):
            return [c for c in self.children if isinstance(c, ComponentNode)]
        return []


ActionSpec.model_rebuild()
ComponentNode.model_rebuild()
