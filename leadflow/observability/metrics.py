"""
Observability metrics module.

The metrics interface operates in two modes:
1. No-op mode: every recording method exists but does nothing
2. Active mode: Prometheus counters and histograms via prometheus_client

Automation code records through ``get_metrics()`` and never needs to know
which mode is active.
"""

import time
import typing as t
from contextlib import contextmanager

from flask import Flask, Response


class MetricsManager:
    """Central manager for automation metrics."""

    def __init__(self, enabled: bool = False, registry: t.Any = None):
        """
        Initialize the metrics manager.

        Args:
            enabled: Whether metrics collection is active
            registry: prometheus_client registry, defaults to the global one
        """
        self.enabled = enabled
        self.registry = registry
        self._initialize_metrics()

    def _initialize_metrics(self) -> None:
        """Initialize metric objects based on enabled state."""
        if self.enabled:
            from prometheus_client import REGISTRY, Counter, Histogram

            if self.registry is None:
                self.registry = REGISTRY

            self.jobs_scheduled_total = Counter(
                "automation_jobs_scheduled_total",
                "Automation jobs scheduled",
                ["trigger_type"],
                registry=self.registry,
            )

            self.job_executions_total = Counter(
                "automation_job_executions_total",
                "Automation job executions by outcome",
                ["action_type", "status"],
                registry=self.registry,
            )

            self.job_duration_seconds = Histogram(
                "automation_job_duration_seconds",
                "Automation action execution time in seconds",
                ["action_type"],
                buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0),
                registry=self.registry,
            )
        else:
            self.jobs_scheduled_total = _DummyMetric()
            self.job_executions_total = _DummyMetric()
            self.job_duration_seconds = _DummyMetric()

    def job_scheduled(self, trigger_type: str) -> None:
        self.jobs_scheduled_total.labels(trigger_type=trigger_type).inc()

    def job_executed(self, action_type: str, status: str) -> None:
        self.job_executions_total.labels(action_type=action_type, status=status).inc()

    @contextmanager
    def observe_job(self, action_type: str) -> t.Generator[None, None, None]:
        """
        Context manager measuring how long an action takes.

        Args:
            action_type: Label for the histogram
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self.job_duration_seconds.labels(action_type=action_type).observe(duration)


class _DummyMetric:
    """Dummy metric object that mimics Prometheus metric interface."""

    def labels(self, **labels: str) -> "_DummyMetric":
        return self

    def inc(self, amount: float = 1) -> None:
        pass

    def observe(self, value: float) -> None:
        pass


_metrics_manager = MetricsManager(enabled=False)


def get_metrics() -> MetricsManager:
    return _metrics_manager


def init_metrics(app: Flask) -> MetricsManager:
    """
    Activate metrics for the application and register ``/metrics``.

    Collectors are registered once per process; later apps reuse them.
    """
    global _metrics_manager

    if not app.config.get("METRICS_ENABLED", False):
        return _metrics_manager

    if not _metrics_manager.enabled:
        _metrics_manager = MetricsManager(enabled=True)

    manager = _metrics_manager

    @app.route("/metrics")
    def metrics_endpoint() -> Response:
        """Metrics endpoint for Prometheus scraping."""
        from prometheus_client import generate_latest

        return Response(
            generate_latest(manager.registry),
            mimetype="text/plain",
            headers={"Cache-Control": "no-cache"},
        )

    return manager
