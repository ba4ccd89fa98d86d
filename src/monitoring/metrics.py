"""
Metrics Collection
Prometheus metrics for interpreter activity
"""

import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import Counter, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the interpreter.
    """

    def __init__(self) -> None:
        # Action metrics
        self.actions_total = Counter(
            "renderer_actions_total",
            "Total number of dispatched actions",
            ["kind", "status"],
        )
        self.api_duration = Histogram(
            "renderer_api_duration_seconds",
            "Remote call duration in seconds",
            ["source"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
        )

        # Data fetch metrics
        self.fetches_total = Counter(
            "renderer_fetches_total",
            "Total number of mount-time data fetches",
            ["status"],
        )

        # Render metrics
        self.renders_total = Counter(
            "renderer_renders_total",
            "Total number of tree renders",
        )
        self.render_duration = Histogram(
            "renderer_render_duration_seconds",
            "Tree render duration in seconds",
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        # Error metrics
        self.errors_total = Counter(
            "renderer_errors_total",
            "Total number of errors",
            ["error_type", "component"],
        )

    def record_action(self, kind: str, status: str) -> None:
        """Record a dispatched action outcome."""
        self.actions_total.labels(kind=kind, status=status).inc()

    def record_api_call(self, source: str, duration: float) -> None:
        """Record a remote call duration (source: action or fetch)."""
        self.api_duration.labels(source=source).observe(duration)

    def record_fetch(self, status: str) -> None:
        """Record a data fetch outcome."""
        self.fetches_total.labels(status=status).inc()

    def record_render(self, duration: float) -> None:
        """Record a full tree render."""
        self.renders_total.inc()
        self.render_duration.observe(duration)

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]):
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
