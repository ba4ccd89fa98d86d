"""
Interpreter
One configuration tree, its own state store and everything that acts on it.
"""

import asyncio
from typing import Any

from blueprint import ActionSpec, BlueprintParser, ComponentNode
from clients import ApiClient
from components import ComponentRegistry, create_default_registry
from core import Settings, get_logger, get_settings
from monitoring import MetricsCollector, metrics_collector
from state import Listener, StateStore
from .actions import ActionDispatcher, ActionResult
from .bindings import BindingResolver
from .fetch import DataFetchOrchestrator, FetchOutcome
from .navigation import Navigator, RecordingNavigator
from .renderer import TreeRenderer
from .template import TemplateEvaluator
from .transforms import TransformRegistry

logger = get_logger(__name__)


class Interpreter:
    """
    Resolves a declarative UI configuration into elements and runs its actions.

    Examples:
        >>> ui = Interpreter({"type": "p", "props": {"title": "${state.name}"}})
        >>> ui.store.set("name", "Ann")
        >>> ui.render().props["title"]
        'Ann'
    """

    def __init__(
        self,
        config: str | dict[str, Any] | ComponentNode,
        *,
        store: StateStore | None = None,
        registry: ComponentRegistry | None = None,
        client: ApiClient | None = None,
        navigator: Navigator | None = None,
        transforms: TransformRegistry | None = None,
        metrics: MetricsCollector | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.settings = settings
        self.config = BlueprintParser(
            max_depth=settings.max_config_depth, max_size=settings.max_config_size
        ).parse(config)

        self.store = store if store is not None else StateStore()
        self.transforms = transforms or TransformRegistry(settings.currency_symbol)
        self.registry = registry if registry is not None else create_default_registry()
        self.navigator = navigator or RecordingNavigator()

        self._owns_client = client is None
        self.client = client or ApiClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

        if metrics is None and settings.enable_metrics:
            metrics = metrics_collector
        self.metrics = metrics

        self.evaluator = TemplateEvaluator(self.store)
        self.bindings = BindingResolver(self.store, self.transforms)
        self.dispatcher = ActionDispatcher(
            self.store, self.evaluator, self.transforms, self.client, self.navigator, metrics
        )
        self.orchestrator = DataFetchOrchestrator(
            self.dispatcher, abort_on_error=settings.abort_fetches_on_error, metrics=metrics
        )
        self.renderer = TreeRenderer(
            self.registry,
            self.evaluator,
            self.bindings,
            self.dispatcher,
            max_depth=settings.max_render_depth,
        )

        self._mount_task: asyncio.Task[list[FetchOutcome]] | None = None
        self._unmounted = False

    @classmethod
    def from_json(cls, text: str, **kwargs: Any) -> "Interpreter":
        """Build an interpreter from a JSON configuration document."""
        return cls(text, **kwargs)

    def render(self) -> Any:
        """Walk the configuration against current state (no side effects)."""
        if self.metrics is None:
            return self.renderer.render(self.config)
        with self.metrics.measure_duration(self.metrics.record_render):
            return self.renderer.render(self.config)

    async def mount(self) -> list[FetchOutcome]:
        """
        Run the root's dataFetch list once.

        Repeated calls wait for (or return) the first run's outcomes.
        """
        if self._unmounted:
            logger.warning("mount_after_unmount", type=self.config.type)
            return []

        if self._mount_task is None:
            logger.info("mount", type=self.config.type, fetches=len(self.config.data_fetch))
            self._mount_task = asyncio.create_task(self.orchestrator.run(self.config.data_fetch))
        return await self._mount_task

    async def unmount(self) -> None:
        """Cancel in-flight mount work and ignore any later dispatches."""
        self._unmounted = True
        self.dispatcher.terminate()

        task = self._mount_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            logger.info("mount_cancelled", type=self.config.type)

    async def dispatch(self, action: ActionSpec | dict[str, Any], event: Any = None) -> list[ActionResult]:
        """Dispatch an action (ActionSpec or raw wire dict) outside of any event callback."""
        if not isinstance(action, ActionSpec):
            action = ActionSpec.model_validate(action)
        return await self.dispatcher.dispatch(action, event)

    def subscribe(self, listener: Listener):
        """Be told about every state change (the host's re-render hook)."""
        return self.store.subscribe(listener)

    @property
    def state(self) -> dict[str, Any]:
        """Snapshot of current state."""
        return self.store.snapshot()

    @property
    def navigated_to(self) -> str | None:
        return self.dispatcher.navigated_to

    @property
    def mounted(self) -> bool:
        return self._mount_task is not None and not self._unmounted

    def close(self) -> None:
        """Release the HTTP client if this interpreter created it."""
        if self._owns_client:
            self.client.close()

    async def __aenter__(self) -> "Interpreter":
        await self.mount()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.unmount()
        self.close()
