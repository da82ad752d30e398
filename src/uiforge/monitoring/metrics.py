"""
Metrics Collection
Prometheus metrics for generation pipeline tracking
"""

import time

from prometheus_client import Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the playground.
    """

    def __init__(self) -> None:
        # Round metrics
        self.rounds_total = Counter(
            "uiforge_rounds_total",
            "Total number of published rounds",
            ["mode"],
        )
        self.source_failures_total = Counter(
            "uiforge_source_failures_total",
            "Total number of source acquisition failures",
            ["error_type"],
        )

        # Output metrics
        self.outputs_total = Counter(
            "uiforge_outputs_total",
            "Total number of settled outputs",
            ["model", "status"],
        )
        self.generation_duration = Histogram(
            "uiforge_generation_duration_seconds",
            "Time from dispatch to settlement of one output",
            ["model"],
            buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 200.0, 400.0, 1000.0],
        )
        self.attempts_total = Counter(
            "uiforge_generation_attempts_total",
            "Total number of backend attempts",
            ["model", "outcome"],
        )

        # Limiter metrics
        self.limiter_active = Gauge(
            "uiforge_limiter_active",
            "Generation calls currently holding a slot",
        )
        self.limiter_queued = Gauge(
            "uiforge_limiter_queued",
            "Generation calls waiting for a slot",
        )

        # Edit metrics
        self.edits_total = Counter(
            "uiforge_edit_instructions_total",
            "Total number of AI chat edit instructions",
            ["status"],
        )

        self.uptime = Gauge(
            "uiforge_uptime_seconds",
            "Process uptime in seconds",
        )
        self.start_time = time.time()

    def record_round(self, mode: str) -> None:
        """Record a published round."""
        self.rounds_total.labels(mode=mode).inc()

    def record_source_failure(self, error_type: str) -> None:
        """Record a failed source acquisition."""
        self.source_failures_total.labels(error_type=error_type).inc()

    def record_output(self, model: str, status: str, duration: float) -> None:
        """Record a settled output."""
        self.outputs_total.labels(model=model, status=status).inc()
        self.generation_duration.labels(model=model).observe(duration)

    def record_attempt(self, model: str, outcome: str) -> None:
        """Record one backend attempt."""
        self.attempts_total.labels(model=model, outcome=outcome).inc()

    def set_limiter_state(self, active: int, queued: int) -> None:
        """Update limiter occupancy."""
        self.limiter_active.set(active)
        self.limiter_queued.set(queued)

    def record_edit(self, status: str) -> None:
        """Record an AI chat edit."""
        self.edits_total.labels(status=status).inc()

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.uptime.set(time.time() - self.start_time)
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
