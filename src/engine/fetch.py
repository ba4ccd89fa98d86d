"""
Data Fetch Orchestrator
Loads a root node's `dataFetch` list into state when the tree mounts.

Fetches run strictly one after another in declaration order: a fetch starts
only once the previous one, including its onSuccess/onError chain, has
settled. Later fetches may therefore read state written by earlier ones.
"""

from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from blueprint import DataFetchSpec
from core import LogContext, get_logger
from monitoring import MetricsCollector
from .actions import ActionDispatcher, ActionResult

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class FetchQueue(Generic[T, R]):
    """
    Ordered task queue: each queued item is awaited to completion before the
    next one is started.
    """

    def __init__(self, worker: Callable[[T], Awaitable[R]], items: Iterable[T] = ()) -> None:
        self._worker = worker
        self._pending: deque[T] = deque(items)
        self.completed: list[R] = []

    def push(self, item: T) -> None:
        self._pending.append(item)

    def drain(self) -> None:
        """Drop everything not yet started."""
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)

    async def run(self, stop: Callable[[R], bool] = lambda _: False) -> list[R]:
        """
        Work through the queue in order.

        Args:
            stop: Called with each result; returning True drains the rest

        Returns:
            Results in completion (= declaration) order
        """
        while self._pending:
            item = self._pending.popleft()
            result = await self._worker(item)
            self.completed.append(result)
            if stop(result):
                self.drain()
        return self.completed


@dataclass
class FetchOutcome:
    """Result of one data fetch."""

    key: str
    ok: bool
    value: Any = None
    error: Exception | None = None
    followups: list[ActionResult] = field(default_factory=list)


class DataFetchOrchestrator:
    """Runs dataFetch specs through the dispatcher's api lifecycle."""

    def __init__(
        self,
        dispatcher: ActionDispatcher,
        abort_on_error: bool = False,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.abort_on_error = abort_on_error
        self.metrics = metrics

    async def run(self, specs: Iterable[DataFetchSpec]) -> list[FetchOutcome]:
        """
        Execute `specs` sequentially.

        A failed fetch does not stop later ones unless `abort_on_error` is set.
        """
        queue: FetchQueue[DataFetchSpec, FetchOutcome] = FetchQueue(self.fetch, specs)
        logger.info("fetches_started", count=len(queue))

        outcomes = await queue.run(
            stop=lambda outcome: self.dispatcher.terminated or (self.abort_on_error and not outcome.ok)
        )

        logger.info(
            "fetches_finished",
            total=len(outcomes),
            failed=sum(1 for o in outcomes if not o.ok),
        )
        return outcomes

    async def fetch(self, spec: DataFetchSpec) -> FetchOutcome:
        """Run one fetch and its onSuccess/onError chain."""
        with LogContext(fetch=spec.key):
            ok, outcome = await self.dispatcher.call_api(
                spec.key,
                spec.api.model_dump(mode="json"),
                transform=spec.transform,
                source="fetch",
            )

        if self.metrics:
            self.metrics.record_fetch("success" if ok else "error")

        result = FetchOutcome(spec.key, ok, value=outcome if ok else None, error=None if ok else outcome)

        followup = spec.on_success if ok else spec.on_error
        if followup is not None:
            result.followups = await self.dispatcher.dispatch(followup)
        return result
