"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest

from db_manager.infrastructure.config import (
    Config,
    MySQLConfig,
    ObservabilityConfig,
    RecordConfig,
    SQLiteConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        """Test default configuration values."""
        monkeypatch.chdir(temp_dir)
        config = Config()

        assert config.mongodb.uri == "mongodb://localhost:27017"
        assert config.mongodb.init_collection == "initialCollection"
        assert config.mysql.host == "localhost"
        assert config.mysql.port == 3306
        assert config.mysql.user == "root"
        assert config.records.id_column == "id"
        assert config.records.schema_sample_size == 100
        assert config.export.json_indent == 2
        assert config.backup.output_dir == Path("backups")
        assert config.observability.metrics_port is None

    def test_nested_env_overrides(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        """Test that DBCLI_ variables with __ reach nested sections."""
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("DBCLI_MYSQL__HOST", "db.internal")
        monkeypatch.setenv("DBCLI_MYSQL__PORT", "3307")
        monkeypatch.setenv("DBCLI_MYSQL__PASSWORD", "s3cret")
        monkeypatch.setenv("DBCLI_SQLITE__DATA_DIR", str(temp_dir / "sqlite"))

        config = Config()

        assert config.mysql.host == "db.internal"
        assert config.mysql.port == 3307
        assert config.mysql.password.get_secret_value() == "s3cret"
        assert config.sqlite.data_dir == temp_dir / "sqlite"

    def test_password_is_masked(self) -> None:
        """Test that the MySQL password does not leak through repr."""
        mysql = MySQLConfig(password="hunter2")

        assert "hunter2" not in repr(mysql)

    def test_ensure_directories(self, temp_dir: Path) -> None:
        """Test that ensure_directories creates the SQLite data directory."""
        config = Config(sqlite=SQLiteConfig(data_dir=temp_dir / "nested" / "data"))

        config.ensure_directories()

        assert config.sqlite.data_dir.is_dir()

    def test_invalid_port(self) -> None:
        """Test that an out-of-range port raises validation error."""
        with pytest.raises(ValueError):
            MySQLConfig(port=70000)

    def test_invalid_sample_size(self) -> None:
        with pytest.raises(ValueError):
            RecordConfig(schema_sample_size=0)

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError):
            ObservabilityConfig(log_level="LOUD")

    def test_get_config_is_cached(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        """Test that get_config returns the same instance until cleared."""
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("DBCLI_SQLITE__DATA_DIR", str(temp_dir / "data"))
        get_config.cache_clear()
        try:
            first = get_config()
            assert get_config() is first
            assert (temp_dir / "data").is_dir()
        finally:
            get_config.cache_clear()
