"""Infrastructure layer - cross-cutting concerns."""

from db_manager.infrastructure.config import Config, get_config
from db_manager.infrastructure.logging import setup_logging, get_logger
from db_manager.infrastructure.metrics import setup_metrics, MetricsRegistry
from db_manager.infrastructure.tracing import setup_tracing, get_tracer

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
]
