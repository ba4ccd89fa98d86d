"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from clients.api import ApiClient
from components import ComponentRegistry, create_default_registry
from engine import Interpreter, Navigator, RecordingNavigator, TransformRegistry
from state import StateStore
from .config import Settings, get_settings


class InterpreterModule(Module):
    """Per-interpreter dependencies: one container, one state store."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings."""
        return self.settings

    @singleton
    @provider
    def provide_store(self) -> StateStore:
        """Provide the state store owned by this container."""
        return StateStore()

    @singleton
    @provider
    def provide_transforms(self, settings: Settings) -> TransformRegistry:
        """Provide transform registry."""
        return TransformRegistry(settings.currency_symbol)

    @singleton
    @provider
    def provide_component_registry(self) -> ComponentRegistry:
        """Provide registry with the stock components."""
        return create_default_registry()

    @singleton
    @provider
    def provide_api_client(self, settings: Settings) -> ApiClient:
        """Provide API client with circuit breaker."""
        return ApiClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_navigator(self) -> Navigator:
        """Provide headless navigator."""
        return RecordingNavigator()


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([InterpreterModule(settings)])


def build_interpreter(container: Injector, config) -> Interpreter:
    """Interpreter for `config` wired from `container`'s dependencies."""
    return Interpreter(
        config,
        store=container.get(StateStore),
        registry=container.get(ComponentRegistry),
        client=container.get(ApiClient),
        navigator=container.get(Navigator),
        transforms=container.get(TransformRegistry),
        settings=container.get(Settings),
    )
