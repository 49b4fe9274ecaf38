"""Unit tests for the backend factory."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from db_manager.adapters.outbound import (
    BackendFactory,
    MongoBackend,
    MySQLBackend,
    SQLiteBackend,
)
from db_manager.domain.errors import UnsupportedBackendError
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.config import Config


@pytest.mark.unit
class TestBackendFactory:
    """Tests for BackendFactory."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mongodb", MongoBackend),
            ("mysql", MySQLBackend),
            ("SQLite", SQLiteBackend),
        ],
    )
    def test_create_by_name(self, factory: BackendFactory, name: str, expected: type) -> None:
        backend = factory.create(name, "shop")

        assert isinstance(backend, expected)
        assert backend.database == "shop"

    def test_create_does_not_connect(self, factory: BackendFactory, test_config: Config) -> None:
        backend = factory.create(BackendType.SQLITE, "shop")

        assert not (test_config.sqlite.data_dir / "shop.db").exists()
        assert backend.backend_type is BackendType.SQLITE

    def test_sqlite_uses_data_dir(self, factory: BackendFactory, test_config: Config) -> None:
        backend = factory.create(BackendType.SQLITE, "shop")

        assert isinstance(backend, SQLiteBackend)
        assert backend.path == test_config.sqlite.data_dir / "shop.db"

    def test_unknown_backend(self, factory: BackendFactory) -> None:
        with pytest.raises(UnsupportedBackendError):
            factory.create("postgres", "shop")

    def test_register_replaces_builder(self, factory: BackendFactory, test_config: Config) -> None:
        fake = MagicMock()
        builder = MagicMock(return_value=fake)

        factory.register(BackendType.MYSQL, builder)

        assert factory.create("mysql", "shop") is fake
        builder.assert_called_once_with(test_config, "shop")

    def test_supported(self, factory: BackendFactory) -> None:
        assert set(factory.supported) == set(BackendType)
