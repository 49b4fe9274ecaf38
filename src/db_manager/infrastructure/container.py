"""Dependency injection container for the database manager."""

from dataclasses import dataclass
from typing import Any

import structlog
from opentelemetry import trace

from db_manager.adapters.outbound.factory import BackendFactory
from db_manager.application.database_service import DatabaseService
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.config import Config, get_config
from db_manager.infrastructure.logging import setup_logging, get_logger
from db_manager.infrastructure.metrics import MetricsRegistry, setup_metrics
from db_manager.infrastructure.tracing import setup_tracing


@dataclass
class Container:
    """Dependency injection container for database manager components."""

    config: Config
    logger: structlog.stdlib.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry
    backends: BackendFactory

    _instance: "Container | None" = None

    @classmethod
    def create(cls, log_level: str | None = None) -> "Container":
        """Create and initialize the container with all dependencies.

        Args:
            log_level: Overrides the configured log level (``--verbose``)
        """
        if cls._instance is not None:
            return cls._instance

        config = get_config()
        observability = config.observability
        setup_logging(
            level=log_level or observability.log_level,
            log_format=observability.log_format,
        )
        logger = get_logger("db_manager")
        tracer = setup_tracing(
            service_name=observability.otel_service_name,
            otlp_endpoint=observability.otel_endpoint,
            console_export=observability.console_traces,
        )
        metrics = setup_metrics(port=observability.metrics_port)

        cls._instance = cls(
            config=config,
            logger=logger,
            tracer=tracer,
            metrics=metrics,
            backends=BackendFactory(config),
        )

        logger.debug(
            "db_manager_container_initialized",
            metrics_port=observability.metrics_port,
            otel_endpoint=observability.otel_endpoint,
        )

        return cls._instance

    @classmethod
    def get(cls) -> "Container":
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the container (useful for testing)."""
        cls._instance = None

    def service(self, backend: BackendType | str, database: str) -> DatabaseService:
        """Build the service for one backend and database."""
        return DatabaseService(
            backend,
            database,
            self.config,
            factory=self.backends,
            metrics=self.metrics,
        )
