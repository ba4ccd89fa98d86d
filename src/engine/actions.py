"""
Action Dispatcher
Executes event- or lifecycle-triggered actions and their continuation chains.

Each link of a chain moves idle -> running -> succeeded | failed. Chains are
walked with an explicit loop over the next link, so deep success/error chains
never grow the call stack, and a link only starts after its parent has fully
settled (loading flag already cleared).
"""

import inspect
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pydantic

from blueprint import ActionKind, ActionSpec, ApiConfig
from clients import ApiClient, ApiError
from core import LogContext, get_logger
from monitoring import MetricsCollector
from state import MISSING, StateStore, split_path
from .bindings import error_key, loading_key
from .navigation import Navigator
from .template import TemplateEvaluator
from .transforms import TransformRegistry

logger = get_logger(__name__)


class ActionStatus(str, Enum):
    """Per-link lifecycle states."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ActionResult:
    """Outcome of one executed link."""

    kind: str
    target: str | None
    status: ActionStatus = ActionStatus.IDLE
    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is ActionStatus.SUCCEEDED


class ActionDispatcher:
    """Runs setState / api / submit / navigate actions against one store."""

    def __init__(
        self,
        store: StateStore,
        evaluator: TemplateEvaluator,
        transforms: TransformRegistry,
        client: ApiClient,
        navigator: Navigator,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.store = store
        self.evaluator = evaluator
        self.transforms = transforms
        self.client = client
        self.navigator = navigator
        self.metrics = metrics
        self._terminated = False
        self.navigated_to: str | None = None

    @property
    def terminated(self) -> bool:
        """True once a navigation happened or the owner shut the dispatcher down."""
        return self._terminated

    def terminate(self) -> None:
        self._terminated = True

    async def dispatch(self, action: ActionSpec, event: Any = None) -> list[ActionResult]:
        """
        Run `action` and whichever continuation each link selects.

        Args:
            action: First link of the chain
            event: Firing UI event (mapping or object), if any

        Returns:
            One result per executed link, in execution order
        """
        results: list[ActionResult] = []
        link: ActionSpec | None = action

        while link is not None:
            if self._terminated:
                logger.info("action_skipped", kind=link.kind, reason="terminated")
                results.append(ActionResult(link.kind, link.target, ActionStatus.SKIPPED))
                break

            with LogContext(action=link.kind, target=link.target):
                result, link = await self._run(link, event)

            results.append(result)
            if self.metrics:
                self.metrics.record_action(result.kind, result.status.value)

        return results

    async def _run(self, link: ActionSpec, event: Any) -> tuple[ActionResult, ActionSpec | None]:
        """Execute one link and pick its continuation."""
        result = ActionResult(link.kind, link.target, ActionStatus.RUNNING)
        kind = link.action_kind

        if kind is None:
            logger.warning("unknown_action", kind=link.kind)
            result.status = ActionStatus.SKIPPED
            return result, None

        if kind is ActionKind.NAVIGATE:
            await self._navigate(link, event, result)
            return result, None

        if not link.target or not split_path(link.target):
            logger.warning("missing_target", kind=link.kind, target=link.target)
            result.status = ActionStatus.FAILED
            return result, None

        if kind is ActionKind.SET_STATE:
            value = self.evaluator.resolve_params(link.params, event=self._event(event))
            self.store.set(link.target, value)
            result.status = ActionStatus.SUCCEEDED
            result.value = value
            return result, None

        if kind is ActionKind.SUBMIT:
            # Sugar over api: POST the form value to the target address
            form_key = link.params if isinstance(link.params, str) and link.params else link.target
            params = {"url": link.target, "method": "POST", "body": self.store.get(form_key)}
        else:
            params = link.params

        ok, outcome = await self.call_api(link.target, params, event=event)
        if ok:
            result.status = ActionStatus.SUCCEEDED
            result.value = outcome
            return result, link.success_action

        result.status = ActionStatus.FAILED
        result.error = outcome
        return result, link.error_action

    async def call_api(
        self,
        target: str,
        params: Any,
        event: Any = None,
        transform: str | None = None,
        source: str = "action",
    ) -> tuple[bool, Any]:
        """
        Remote call with the `_loading`/`_error` companion key lifecycle.

        Args:
            target: State key receiving the payload
            params: ApiConfig-shaped params (templates allowed)
            event: Firing UI event, if any
            transform: Transform applied to the payload before it is stored
            source: Metrics label (action or fetch)

        Returns:
            (True, payload) on success, (False, error) on failure
        """
        self.store.set(loading_key(target), True)
        self.store.delete(error_key(target))
        start = time.perf_counter()

        try:
            resolved = self.evaluator.resolve_params(params, event=self._event(event))
            config = self._api_config(resolved)
            payload = await self.client.request_async(config)
            payload = self.transforms.apply(transform, payload)
            self.store.set(target, payload)
            logger.info("api_succeeded", target=target, url=config.url)
            return True, payload
        except Exception as e:
            error = e if isinstance(e, ApiError) else ApiError(str(e))
            logger.warning("api_failed", target=target, error=error)
            self.store.set(error_key(target), error)
            if self.metrics:
                self.metrics.record_error(type(e).__name__, source)
            return False, error
        finally:
            self.store.set(loading_key(target), False)
            if self.metrics:
                self.metrics.record_api_call(source, time.perf_counter() - start)

    async def _navigate(self, link: ActionSpec, event: Any, result: ActionResult) -> None:
        destination = link.params if isinstance(link.params, str) else link.target
        url = self.evaluator.process_template(destination or "", event=self._event(event))
        if not url:
            logger.warning("missing_destination")
            result.status = ActionStatus.FAILED
            return

        try:
            outcome = self.navigator.navigate(url)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error("navigate_failed", url=url, error=str(e), exc_info=True)
            result.status = ActionStatus.FAILED
            result.error = e
            return

        # Navigation leaves the page; nothing after it is observable
        self._terminated = True
        self.navigated_to = url
        result.status = ActionStatus.SUCCEEDED
        result.value = url

    @staticmethod
    def _api_config(resolved: Any) -> ApiConfig:
        if isinstance(resolved, ApiConfig):
            return resolved
        if not isinstance(resolved, dict):
            raise ApiError(f"Invalid API params: expected object, got {type(resolved).__name__}")
        try:
            return ApiConfig.model_validate(resolved)
        except pydantic.ValidationError as e:
            raise ApiError(f"Invalid API params: {e.errors()[0]['msg']}") from e

    @staticmethod
    def _event(event: Any) -> Any:
        return MISSING if event is None else event
