"""Pytest configuration and fixtures."""

import os
from typing import Any

import pytest
import respx

from blueprint import ApiConfig
from clients import ApiError
from components import create_default_registry
from core import create_container, get_settings
from engine import (
    ActionDispatcher,
    BindingResolver,
    DataFetchOrchestrator,
    Interpreter,
    RecordingNavigator,
    TemplateEvaluator,
    TransformRegistry,
    TreeRenderer,
)
from state import StateStore


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['RENDERER_LOG_LEVEL'] = 'DEBUG'
    os.environ['RENDERER_API_BASE_URL'] = ''
    os.environ['RENDERER_ABORT_FETCHES_ON_ERROR'] = 'false'


# ============================================================================
# Fakes
# ============================================================================

class FakeApiClient:
    """
    In-memory stand-in for ApiClient.

    Routes map a URL to a payload, or to an exception instance which is raised.
    Every resolved ApiConfig is recorded in `calls`.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[ApiConfig] = []
        self.on_request = None

    async def request_async(self, config: ApiConfig) -> Any:
        self.calls.append(config)
        if self.on_request is not None:
            self.on_request(config)
        if config.url not in self.routes:
            raise ApiError("API call failed: 404 Not Found", status_code=404, url=config.url)
        outcome = self.routes[config.url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        pass


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container(settings):
    """Dependency injection container for testing."""
    return create_container(settings)


@pytest.fixture
def store():
    """Empty state store."""
    return StateStore()


@pytest.fixture
def evaluator(store):
    return TemplateEvaluator(store)


@pytest.fixture
def transforms():
    return TransformRegistry()


@pytest.fixture
def fake_client():
    """Fake remote client with no routes."""
    return FakeApiClient()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def dispatcher(store, evaluator, transforms, fake_client, navigator):
    """Dispatcher wired to the fake client (metrics disabled)."""
    return ActionDispatcher(store, evaluator, transforms, fake_client, navigator)


@pytest.fixture
def orchestrator(dispatcher):
    return DataFetchOrchestrator(dispatcher)


@pytest.fixture
def renderer(store, evaluator, transforms, dispatcher):
    """Tree renderer over the default component registry."""
    return TreeRenderer(
        create_default_registry(),
        evaluator,
        BindingResolver(store, transforms),
        dispatcher,
    )


@pytest.fixture
def make_interpreter(settings):
    """Factory building interpreters on a fake client."""

    def _make(config: Any, routes: dict[str, Any] | None = None, **kwargs: Any) -> Interpreter:
        client = kwargs.pop("client", None) or FakeApiClient(routes)
        return Interpreter(config, client=client, settings=settings, **kwargs)

    return _make


# ============================================================================
# HTTP/Network Fixtures
# ============================================================================

@pytest.fixture
def mock_httpx_client():
    """Mock httpx transport."""
    with respx.mock(assert_all_called=False) as router:
        yield router


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """User list screen: fetch on mount, repeat, bindings and a refresh button."""
    return {
        "type": "Card",
        "dataFetch": [
            {
                "key": "users",
                "api": {"url": "https://api.test/users"},
            },
            {
                "key": "stats",
                "api": {"url": "https://api.test/stats"},
                "transform": "toJSON",
            },
        ],
        "children": [
            {"type": "CardTitle", "children": "Users"},
            {
                "type": "Select",
                "bindings": {
                    "options": {"source": "users", "transform": "toOptions"},
                },
            },
            {
                "type": "p",
                "repeat": "${state.users}",
                "props": {"title": "${item.name}"},
            },
            {
                "type": "Button",
                "condition": "${state.users}",
                "props": {"label": "Refresh"},
                "events": [
                    {
                        "type": "onClick",
                        "action": "api",
                        "target": "users",
                        "params": {"url": "https://api.test/users"},
                    }
                ],
            },
        ],
    }


@pytest.fixture
def sample_config_json():
    """Minimal configuration as JSON text."""
    return """{
  "type": "div",
  "props": {"className": "greeting"},
  "children": [
    {"type": "h1", "children": "Hello"},
    {"type": "p", "props": {"title": "${state.name}"}}
  ]
}"""
