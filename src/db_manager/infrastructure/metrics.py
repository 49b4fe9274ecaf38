"""Prometheus metrics for the database manager."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all database manager metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Operation metrics
        self.operations_total = Counter(
            "dbm_operations_total",
            "Total number of operations dispatched to a backend",
            ["backend", "operation", "status"],  # status: success, error
            registry=self._registry,
        )

        self.operation_latency_seconds = Histogram(
            "dbm_operation_latency_seconds",
            "Operation latency in seconds, connection setup included",
            ["backend", "operation"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 60.0),
            registry=self._registry,
        )

        # Data movement metrics
        self.records_exported_total = Counter(
            "dbm_records_exported_total",
            "Total records written to export files",
            ["backend", "format"],
            registry=self._registry,
        )

        self.records_imported_total = Counter(
            "dbm_records_imported_total",
            "Total records loaded from import files",
            ["backend"],
            registry=self._registry,
        )

        # Backup metrics
        self.backups_total = Counter(
            "dbm_backups_total",
            "Total backup attempts",
            ["backend", "status"],
            registry=self._registry,
        )

        self.info = Info(
            "dbm",
            "Database manager information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry backing these metrics."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int | None = None, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics.

    Args:
        port: Port for the metrics HTTP server; no server is started when None
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    if _metrics is None or registry is not None:
        _metrics = MetricsRegistry(registry)

    from db_manager import __version__
    _metrics.info.info({
        "version": __version__,
    })

    if port is not None:
        start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
