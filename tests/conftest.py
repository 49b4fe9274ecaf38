"""Pytest configuration and fixtures for db_manager tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import structlog
from prometheus_client import CollectorRegistry

from db_manager.adapters.outbound.factory import BackendFactory
from db_manager.infrastructure.config import (
    BackupConfig,
    Config,
    ExportConfig,
    SQLiteConfig,
    get_config,
)
from db_manager.infrastructure.container import Container
from db_manager.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration with temporary directories."""
    config = Config(
        sqlite=SQLiteConfig(data_dir=temp_dir / "data"),
        export=ExportConfig(output_dir=temp_dir / "exports"),
        backup=BackupConfig(output_dir=temp_dir / "backups", timeout_seconds=30),
    )
    config.ensure_directories()
    return config


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def factory(test_config: Config) -> BackendFactory:
    return BackendFactory(test_config)


@pytest.fixture
def cli_env(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the CLI's configuration at a temporary directory."""
    data_dir = temp_dir / "data"
    monkeypatch.setenv("DBCLI_SQLITE__DATA_DIR", str(data_dir))
    monkeypatch.setenv("DBCLI_EXPORT__OUTPUT_DIR", str(temp_dir / "exports"))
    monkeypatch.setenv("DBCLI_BACKUP__OUTPUT_DIR", str(temp_dir / "backups"))
    monkeypatch.chdir(temp_dir)
    get_config.cache_clear()
    Container.reset()
    yield data_dir
    get_config.cache_clear()
    Container.reset()
    # Logging was bound to the runner's stderr
    structlog.reset_defaults()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
