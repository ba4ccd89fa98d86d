"""
Transform Registry
Named, total value conversions applied to bound or fetched data.
"""

import math
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from core import get_logger, safe_json_dumps
from .values import ValueKind, is_truthy, kind_of, stringify

logger = get_logger(__name__)

Transform = Callable[[Any], Any]


def _first(item: Mapping[str, Any], *fields: str) -> Any:
    """First truthy field value, or None."""
    for name in fields:
        value = item.get(name)
        if is_truthy(value):
            return value
    return None


def to_options(data: Any) -> list[dict[str, Any]]:
    """Collection -> `[{label, value}]` for select-like components."""
    if kind_of(data) is not ValueKind.LIST:
        return []

    options = []
    for item in data:
        if isinstance(item, Mapping):
            label = _first(item, "name", "label")
            value = _first(item, "id", "value")
            options.append({
                "label": stringify(label) if label is not None else stringify(item),
                "value": value if value is not None else item,
            })
        else:
            options.append({"label": stringify(item), "value": item})
    return options


def to_number(data: Any) -> int | float:
    kind = kind_of(data)
    if kind is ValueKind.NULL:
        return 0
    if kind is ValueKind.BOOL:
        return int(data)
    if kind is ValueKind.NUMBER:
        return 0 if isinstance(data, float) and math.isnan(data) else data
    if kind is ValueKind.STRING:
        text = data.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            number = float(text)
            return 0 if math.isnan(number) else number
    return 0


def _parse_date(data: Any) -> date:
    if isinstance(data, datetime):
        return data.date()
    if isinstance(data, date):
        return data
    if kind_of(data) is ValueKind.NUMBER:
        # Epoch milliseconds
        return datetime.fromtimestamp(data / 1000, tz=timezone.utc).date()
    if isinstance(data, str):
        text = data.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Cannot interpret {type(data).__name__} as a date")


def to_date(data: Any) -> str:
    """Date-like value -> `M/D/YYYY`."""
    parsed = _parse_date(data)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _today() -> str:
    today = date.today()
    return f"{today.month}/{today.day}/{today.year}"


def make_currency(symbol: str = "$") -> Transform:
    def to_currency(data: Any) -> str:
        amount = float(to_number(data)) if not isinstance(data, (int, float)) else float(data)
        if not math.isfinite(amount):
            raise ValueError("Amount is not finite")
        sign = "-" if amount < 0 else ""
        return f"{sign}{symbol}{abs(amount):,.2f}"

    return to_currency


def to_json(data: Any) -> str:
    return safe_json_dumps(data, indent=2)


def to_array(data: Any) -> list[Any]:
    if kind_of(data) is ValueKind.LIST:
        return list(data)
    return [data] if is_truthy(data) else []


def to_fixed(data: Any) -> str:
    number = float(data) if isinstance(data, str) else float(to_number(data))
    if not math.isfinite(number):
        raise ValueError("Value is not finite")
    return f"{number:.2f}"


def to_percent(data: Any) -> str:
    number = float(data) if isinstance(data, str) else float(to_number(data))
    if not math.isfinite(number):
        raise ValueError("Value is not finite")
    return f"{number * 100:.1f}%"


def to_upper(data: Any) -> str:
    return stringify(data).upper()


def to_lower(data: Any) -> str:
    return stringify(data).lower()


class TransformRegistry:
    """
    Fixed mapping from transform name to a total function.

    A transform never raises: when its conversion fails the registered
    fallback is returned instead. Unknown names leave the value unchanged.
    """

    def __init__(self, currency_symbol: str = "$") -> None:
        self._transforms: dict[str, tuple[Transform, Callable[[], Any]]] = {}

        self.register("toOptions", to_options, fallback=list)
        self.register("toString", stringify, fallback=str)
        self.register("toNumber", to_number, fallback=int)
        self.register("toDate", to_date, fallback=_today)
        self.register(
            "toCurrency",
            make_currency(currency_symbol),
            fallback=lambda: f"{currency_symbol}0.00",
        )
        self.register("toJSON", to_json, fallback=lambda: "{}")
        self.register("toArray", to_array, fallback=list)
        self.register("toFixed", to_fixed, fallback=lambda: "0.00")
        self.register("toPercent", to_percent, fallback=lambda: "0.0%")
        self.register("toUpperCase", to_upper, fallback=str)
        self.register("toLowerCase", to_lower, fallback=str)
        self.register("toBoolean", is_truthy, fallback=bool)

    def register(
        self, name: str, transform: Transform, fallback: Callable[[], Any] = lambda: None
    ) -> None:
        """
        Add a transform.

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._transforms:
            raise ValueError(f"Transform already registered: {name}")
        self._transforms[name] = (transform, fallback)

    def apply(self, name: str | None, value: Any) -> Any:
        """Apply transform `name` to `value`."""
        if not name:
            return value

        entry = self._transforms.get(name)
        if entry is None:
            logger.warning("unknown_transform", name=name)
            return value

        transform, fallback = entry
        try:
            return transform(value)
        except Exception as e:
            logger.debug("transform_fallback", name=name, error=str(e))
            return fallback()

    def names(self) -> list[str]:
        return list(self._transforms)

    def __contains__(self, name: str) -> bool:
        return name in self._transforms


__all__ = ["TransformRegistry", "Transform"]
