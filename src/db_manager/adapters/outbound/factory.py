"""Backend factory.

Maps each BackendType to a builder that turns the configuration and a
database name into a ready (but not yet connected) backend adapter.
"""

from __future__ import annotations

from collections.abc import Callable

from db_manager.adapters.outbound.mongo_backend import MongoBackend
from db_manager.adapters.outbound.mysql_backend import MySQLBackend
from db_manager.adapters.outbound.sqlite_backend import SQLiteBackend
from db_manager.domain.errors import UnsupportedBackendError
from db_manager.infrastructure.config import Config
from db_manager.infrastructure.logging import get_logger
from db_manager.domain.value_objects import BackendType
from db_manager.ports.outbound import DatabaseBackend

logger = get_logger(__name__)

BackendBuilder = Callable[[Config, str], DatabaseBackend]


def _build_mongodb(config: Config, database: str) -> DatabaseBackend:
    return MongoBackend(
        database,
        uri=config.mongodb.uri,
        server_selection_timeout_ms=config.mongodb.server_selection_timeout_ms,
        init_collection=config.mongodb.init_collection,
        sample_size=config.records.schema_sample_size,
        mongodump_path=config.backup.mongodump_path,
        dump_timeout=config.backup.timeout_seconds,
    )


def _build_mysql(config: Config, database: str) -> DatabaseBackend:
    return MySQLBackend(
        database,
        host=config.mysql.host,
        port=config.mysql.port,
        user=config.mysql.user,
        password=config.mysql.password.get_secret_value(),
        charset=config.mysql.charset,
        connect_timeout=config.mysql.connect_timeout,
        id_column=config.records.id_column,
        mysqldump_path=config.backup.mysqldump_path,
        dump_timeout=config.backup.timeout_seconds,
    )


def _build_sqlite(config: Config, database: str) -> DatabaseBackend:
    return SQLiteBackend(
        database,
        data_dir=config.sqlite.data_dir,
        suffix=config.sqlite.suffix,
        timeout=config.sqlite.timeout,
        id_column=config.records.id_column,
        sqlite3_path=config.backup.sqlite3_path,
        dump_timeout=config.backup.timeout_seconds,
    )


class BackendFactory:
    """Creates backend adapters by type."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._builders: dict[BackendType, BackendBuilder] = {
            BackendType.MONGODB: _build_mongodb,
            BackendType.MYSQL: _build_mysql,
            BackendType.SQLITE: _build_sqlite,
        }

    @property
    def supported(self) -> list[BackendType]:
        return list(self._builders)

    def register(self, backend_type: BackendType, builder: BackendBuilder) -> None:
        """Register or replace the builder for a backend type."""
        self._builders[backend_type] = builder

    def create(self, backend: BackendType | str, database: str) -> DatabaseBackend:
        """Create an adapter bound to one database.

        Raises:
            UnsupportedBackendError: If no builder is registered for the type.
        """
        backend_type = BackendType.parse(backend)
        builder = self._builders.get(backend_type)
        if builder is None:
            raise UnsupportedBackendError(f"No adapter registered for {backend_type.value}")
        logger.debug("backend_created", backend=backend_type.value, database=database)
        return builder(self._config, database)
