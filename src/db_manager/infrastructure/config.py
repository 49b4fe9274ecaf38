"""Configuration management for the database manager."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoConfig(BaseModel):
    """MongoDB connection configuration."""

    uri: str = Field(default="mongodb://localhost:27017", description="Server URI (no database path)")
    server_selection_timeout_ms: int = Field(
        default=5000, ge=100, description="Server selection timeout in milliseconds"
    )
    init_collection: str = Field(
        default="initialCollection",
        description="Collection created to materialize a new database",
    )


class MySQLConfig(BaseModel):
    """MySQL connection configuration."""

    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=3306, ge=1, le=65535, description="Server port")
    user: str = Field(default="root", description="User name")
    password: SecretStr = Field(default=SecretStr(""), description="Password")
    charset: str = Field(default="utf8mb4", description="Connection charset")
    connect_timeout: int = Field(default=10, ge=1, description="Connect timeout in seconds")


class SQLiteConfig(BaseModel):
    """SQLite file configuration."""

    data_dir: Path = Field(default=Path("."), description="Directory holding database files")
    suffix: str = Field(default=".db", description="File suffix appended to database names")
    timeout: float = Field(default=5.0, ge=0, description="Lock wait timeout in seconds")


class RecordConfig(BaseModel):
    """Record addressing and introspection."""

    id_column: str = Field(default="id", description="Primary key column for SQL backends")
    schema_sample_size: int = Field(
        default=100, ge=1, le=100000, description="Documents sampled for schema inference"
    )


class ExportConfig(BaseModel):
    """Export configuration."""

    output_dir: Path = Field(default=Path("."), description="Default export directory")
    json_indent: int = Field(default=2, ge=0, le=8, description="JSON indentation")


class BackupConfig(BaseModel):
    """Backup configuration."""

    output_dir: Path = Field(default=Path("backups"), description="Default backup directory")
    mongodump_path: str = Field(default="mongodump", description="mongodump executable")
    mysqldump_path: str = Field(default="mysqldump", description="mysqldump executable")
    sqlite3_path: str = Field(default="sqlite3", description="sqlite3 shell executable")
    timeout_seconds: int = Field(default=600, ge=1, description="Dump tool timeout in seconds")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="db_manager", description="Service name for tracing")
    console_traces: bool = Field(default=False, description="Export spans to the console")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port (disabled if unset)"
    )


class Config(BaseSettings):
    """Main configuration for the database manager."""

    model_config = SettingsConfigDict(
        env_prefix="DBCLI_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    mongodb: MongoConfig = Field(default_factory=MongoConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    sqlite: SQLiteConfig = Field(default_factory=SQLiteConfig)
    records: RecordConfig = Field(default_factory=RecordConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the SQLite data directory exists."""
        self.sqlite.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
