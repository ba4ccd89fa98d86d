"""Transform registry tests."""

from datetime import date
from unittest.mock import patch

import pytest
from hypothesis import given, strategies as st

from engine import TransformRegistry


json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats() | st.text(),
    lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(max_size=5), children, max_size=3),
    max_leaves=10,
)


@pytest.mark.unit
class TestTransforms:
    """Test the built-in transforms."""

    def test_names(self, transforms):
        assert set(transforms.names()) == {
            "toOptions", "toString", "toNumber", "toDate", "toCurrency", "toJSON",
            "toArray", "toFixed", "toPercent", "toUpperCase", "toLowerCase", "toBoolean",
        }

    def test_no_transform_passthrough(self, transforms):
        value = {"a": 1}
        assert transforms.apply(None, value) is value
        assert transforms.apply("", value) is value

    def test_unknown_transform_passthrough(self, transforms):
        assert transforms.apply("toSomethingElse", 5) == 5

    def test_to_options_records(self, transforms):
        assert transforms.apply("toOptions", [{"id": 1, "name": "Ann"}]) == [
            {"label": "Ann", "value": 1}
        ]

    def test_to_options_label_and_value_fields(self, transforms):
        assert transforms.apply("toOptions", [{"label": "A", "value": "a"}]) == [
            {"label": "A", "value": "a"}
        ]

    def test_to_options_scalars(self, transforms):
        assert transforms.apply("toOptions", ["x", 2]) == [
            {"label": "x", "value": "x"},
            {"label": "2", "value": 2},
        ]

    def test_to_options_non_list(self, transforms):
        assert transforms.apply("toOptions", {"a": 1}) == []
        assert transforms.apply("toOptions", None) == []

    def test_to_string(self, transforms):
        assert transforms.apply("toString", None) == ""
        assert transforms.apply("toString", 3.0) == "3"

    def test_to_number(self, transforms):
        assert transforms.apply("toNumber", "42") == 42
        assert transforms.apply("toNumber", " 2.5 ") == 2.5
        assert transforms.apply("toNumber", "abc") == 0
        assert transforms.apply("toNumber", None) == 0
        assert transforms.apply("toNumber", True) == 1

    def test_to_date(self, transforms):
        assert transforms.apply("toDate", "2024-03-05") == "3/5/2024"
        assert transforms.apply("toDate", "2024-03-05T10:00:00Z") == "3/5/2024"
        assert transforms.apply("toDate", 0) == "1/1/1970"

    def test_to_date_fallback_is_today(self, transforms):
        today = date.today()
        assert transforms.apply("toDate", "not a date") == f"{today.month}/{today.day}/{today.year}"

    def test_to_currency(self, transforms):
        assert transforms.apply("toCurrency", 1234.5) == "$1,234.50"
        assert transforms.apply("toCurrency", "-3") == "-$3.00"
        assert transforms.apply("toCurrency", "abc") == "$0.00"

    def test_to_currency_symbol(self):
        assert TransformRegistry("€").apply("toCurrency", 2) == "€2.00"

    def test_to_json(self, transforms):
        assert transforms.apply("toJSON", {"a": 1}) == '{\n  "a": 1\n}'

    def test_to_array(self, transforms):
        assert transforms.apply("toArray", [1]) == [1]
        assert transforms.apply("toArray", "x") == ["x"]
        assert transforms.apply("toArray", None) == []
        assert transforms.apply("toArray", 0) == []

    def test_to_fixed(self, transforms):
        assert transforms.apply("toFixed", 3.14159) == "3.14"
        assert transforms.apply("toFixed", "2") == "2.00"
        assert transforms.apply("toFixed", "abc") == "0.00"

    def test_to_percent(self, transforms):
        assert transforms.apply("toPercent", 0.256) == "25.6%"
        assert transforms.apply("toPercent", "nope") == "0.0%"

    def test_case(self, transforms):
        assert transforms.apply("toUpperCase", "abc") == "ABC"
        assert transforms.apply("toLowerCase", "ABC") == "abc"
        assert transforms.apply("toUpperCase", None) == ""

    def test_to_boolean(self, transforms):
        assert transforms.apply("toBoolean", "x") is True
        assert transforms.apply("toBoolean", 0) is False

    def test_failing_transform_returns_fallback(self, transforms):
        with patch("engine.transforms.safe_json_dumps", side_effect=TypeError("unserializable")):
            registry = TransformRegistry()
            assert registry.apply("toJSON", object()) == "{}"

    def test_register_duplicate(self, transforms):
        with pytest.raises(ValueError):
            transforms.register("toString", str)

    def test_register_custom(self, transforms):
        transforms.register("double", lambda v: v * 2, fallback=lambda: 0)
        assert "double" in transforms
        assert transforms.apply("double", 4) == 8
        assert transforms.apply("double", None) == 0

    @given(name=st.sampled_from(TransformRegistry().names()), value=json_values)
    def test_transforms_never_raise(self, name, value):
        """Property: every built-in transform is total."""
        TransformRegistry().apply(name, value)
