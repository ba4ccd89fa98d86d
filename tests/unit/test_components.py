"""Component registry and element tests."""

import pytest

from components import ComponentRegistry, Element, ElementComponent, create_default_registry
from components.registry import HTML_ELEMENTS, UI_COMPONENTS


@pytest.mark.unit
class TestComponentRegistry:
    """Test component registration."""

    def test_default_registry(self):
        registry = create_default_registry()
        assert len(registry) == len(UI_COMPONENTS) + len(HTML_ELEMENTS)
        for name in ("Button", "Card", "CardHeader", "CardTitle", "CardContent", "Alert", "Select"):
            assert name in registry
        for name in ("div", "span", "h3", "main", "label", "input"):
            assert name in registry
        assert "table" not in registry

    def test_register_and_get(self):
        registry = ComponentRegistry()
        component = ElementComponent("Badge", defaults={"tone": "info"})
        registry.register("Badge", component)

        assert registry.get("Badge") is component
        assert registry.names() == ["Badge"]

    def test_duplicate_ignored_unless_replace(self):
        registry = ComponentRegistry()
        first, second = ElementComponent("x"), ElementComponent("x")
        registry.register("x", first)
        registry.register("x", second)
        assert registry.get("x") is first

        registry.register("x", second, replace=True)
        assert registry.get("x") is second

    def test_unregister(self):
        registry = create_default_registry()
        registry.unregister("Button")
        registry.unregister("Button")
        assert registry.get("Button") is None

    def test_element_component_defaults(self):
        element = ElementComponent("Badge", defaults={"tone": "info", "size": "s"}).render(
            {"tone": "warn"}, None, key="b"
        )
        assert element == Element("Badge", "b", {"tone": "warn", "size": "s"}, None)


@pytest.mark.unit
class TestElement:
    """Test element helpers."""

    def tree(self):
        return Element("div", "root", {}, [
            Element("p", "a", {"onClick": lambda event=None: None}, "one"),
            "loose",
            Element("section", "b", {}, [Element("p", "c", {}, ["two"])]),
        ])

    def test_walk_and_find(self):
        tree = self.tree()
        assert [el.key for el in tree.walk()] == ["root", "a", "b", "c"]
        assert [el.key for el in tree.find_type("p")] == ["a", "c"]

    def test_text(self):
        assert self.tree().text() == "oneloosetwo"

    def test_handler(self):
        tree = self.tree()
        assert callable(tree.find_type("p")[0].handler("onClick"))
        assert tree.handler("onClick") is None

    def test_to_dict(self):
        result = self.tree().to_dict()
        assert result["children"][0] == {
            "type": "p",
            "key": "a",
            "props": {"onClick": "<onClick>"},
            "children": ["one"],
        }
        assert result["children"][1] == "loose"
