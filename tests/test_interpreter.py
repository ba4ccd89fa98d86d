"""Interpreter integration tests."""

import asyncio

import httpx
import pytest

from clients import ApiClient, ApiError
from components import Element
from core import ValidationError
from engine import ActionStatus, Interpreter, RecordingNavigator


USERS = [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bob"}]


@pytest.mark.integration
class TestInterpreter:
    """End-to-end behaviour of one configuration tree."""

    def test_render_from_json(self, make_interpreter, sample_config_json):
        ui = make_interpreter(sample_config_json)
        ui.store.set("name", "Ann")

        element = ui.render()

        assert element.props["className"] == "greeting"
        assert element.find_type("p")[0].props["title"] == "Ann"
        assert element.find_type("h1")[0].text() == "Hello"

    def test_from_json(self, sample_config_json):
        ui = Interpreter.from_json(sample_config_json, client=ApiClient())
        assert ui.config.type == "div"
        ui.client.close()

    def test_invalid_config(self, make_interpreter):
        with pytest.raises(ValidationError):
            make_interpreter('{"props": {}}')

    def test_render_has_no_side_effects(self, make_interpreter, sample_config):
        ui = make_interpreter(sample_config)
        ui.render()
        ui.render()
        assert ui.state == {}

    @pytest.mark.asyncio
    async def test_mount_then_render(self, make_interpreter, sample_config):
        ui = make_interpreter(sample_config, routes={
            "https://api.test/users": USERS,
            "https://api.test/stats": {"count": 2},
        })

        outcomes = await ui.mount()
        element = ui.render()

        assert [o.ok for o in outcomes] == [True, True]
        assert ui.state["stats"] == '{\n  "count": 2\n}'
        select = element.find_type("Select")[0]
        assert select.props["options"] == [
            {"label": "Ann", "value": 1},
            {"label": "Bob", "value": 2},
        ]
        assert select.props["loading"] is False
        assert [p.props["title"] for p in element.find_type("p")] == ["Ann", "Bob"]
        assert [p.key for p in element.find_type("p")] == ["p-0-1", "p-1-2"]
        assert len(element.find_type("Button")) == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_surfaces_error_prop(self, make_interpreter, sample_config):
        ui = make_interpreter(sample_config, routes={"https://api.test/stats": {}})

        await ui.mount()
        element = ui.render()

        select = element.find_type("Select")[0]
        assert isinstance(select.props["error"], ApiError)
        assert select.props["options"] == []
        # Button is conditional on users being present
        assert element.find_type("Button") == []
        assert ui.state["stats"] == "{}"

    @pytest.mark.asyncio
    async def test_mount_is_idempotent(self, make_interpreter, sample_config):
        ui = make_interpreter(sample_config, routes={
            "https://api.test/users": USERS,
            "https://api.test/stats": {},
        })

        first, second = await asyncio.gather(ui.mount(), ui.mount())
        third = await ui.mount()

        assert len(ui.client.calls) == 2
        assert first is second is third
        assert ui.mounted

    @pytest.mark.asyncio
    async def test_event_callback_roundtrip(self, make_interpreter, sample_config):
        ui = make_interpreter(sample_config, routes={
            "https://api.test/users": USERS[:1],
            "https://api.test/stats": {},
        })
        await ui.mount()
        ui.client.routes["https://api.test/users"] = USERS

        button = ui.render().find_type("Button")[0]
        results = await button.handler("onClick")()

        assert results[0].ok
        assert len(ui.render().find_type("p")) == 2

    @pytest.mark.asyncio
    async def test_subscribe(self, make_interpreter):
        ui = make_interpreter({"type": "div"})
        changes = []
        unsubscribe = ui.subscribe(lambda key, value: changes.append((key, value)))

        await ui.dispatch({"action": "setState", "target": "x", "params": 1})
        unsubscribe()
        await ui.dispatch({"action": "setState", "target": "y", "params": 2})

        assert changes == [("x", 1)]

    @pytest.mark.asyncio
    async def test_navigate_terminates(self, make_interpreter):
        navigator = RecordingNavigator()
        ui = make_interpreter({"type": "div"}, navigator=navigator)

        await ui.dispatch({"action": "navigate", "target": "/done"})
        results = await ui.dispatch({"action": "setState", "target": "x", "params": 1})

        assert ui.navigated_to == "/done"
        assert navigator.history == ["/done"]
        assert results[0].status is ActionStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_unmount_cancels_pending_fetch(self, make_interpreter):
        config = {
            "type": "div",
            "dataFetch": [
                {"key": "slow", "api": {"url": "https://api.test/slow"}},
                {"key": "next", "api": {"url": "https://api.test/next"}},
            ],
        }
        ui = make_interpreter(config, routes={"https://api.test/next": 1})
        started = asyncio.Event()
        release = asyncio.Event()
        original = ui.client.request_async

        async def slow_request(api_config):
            if api_config.url.endswith("/slow"):
                started.set()
                await release.wait()
            return await original(api_config)

        ui.client.request_async = slow_request

        mount = asyncio.create_task(ui.mount())
        await started.wait()
        await ui.unmount()
        await asyncio.gather(mount, return_exceptions=True)

        assert mount.cancelled()
        assert not ui.store.has("slow")
        assert not ui.store.has("next")
        assert not ui.mounted

        results = await ui.dispatch({"action": "setState", "target": "x", "params": 1})
        assert results[0].status is ActionStatus.SKIPPED
        assert await ui.mount() == []

    @pytest.mark.asyncio
    async def test_async_context_manager(self, make_interpreter):
        async with make_interpreter({"type": "div"}) as ui:
            assert ui.mounted
        assert not ui.mounted

    @pytest.mark.asyncio
    async def test_real_client_with_respx(self, settings, mock_httpx_client):
        mock_httpx_client.get("https://api.test/users").mock(return_value=httpx.Response(200, json=USERS))
        mock_httpx_client.get("https://api.test/stats").mock(return_value=httpx.Response(500))
        config = {
            "type": "div",
            "dataFetch": [
                {"key": "users", "api": {"url": "https://api.test/users"}, "transform": "toOptions"},
                {"key": "stats", "api": {"url": "https://api.test/stats"}},
            ],
        }

        async with Interpreter(config, settings=settings) as ui:
            assert ui.state["users"][0] == {"label": "Ann", "value": 1}
            assert ui.store.get("stats_error").status_code == 500
            assert ui.store.get("stats_loading") is False

    def test_element_is_plain_data(self, make_interpreter):
        element = make_interpreter({"type": "span", "children": "x"}).render()
        assert isinstance(element, Element)
        assert element.to_dict() == {"type": "span", "key": "span-0", "props": {}, "children": ["x"]}
