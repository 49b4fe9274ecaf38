"""SQLite backend adapter.

A database is a single file. Names without a SQLite suffix are placed in the
configured data directory as ``<name>.db``; names that already look like a
database file are used as paths.
"""

from __future__ import annotations

import shutil
import sqlite3
from pathlib import Path
from typing import Any

from db_manager.adapters.outbound.dump_runner import backup_stamp, run_dump
from db_manager.adapters.outbound.sql_backend import SQLBackend
from db_manager.domain.errors import BackupError
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.logging import get_logger

logger = get_logger(__name__)

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


def resolve_database_path(name: str, data_dir: Path, suffix: str = ".db") -> Path:
    """Map a database name to its file.

    Example:
        >>> resolve_database_path("shop", Path("/data"))
        PosixPath('/data/shop.db')
        >>> resolve_database_path("/tmp/x.sqlite", Path("/data"))
        PosixPath('/tmp/x.sqlite')
    """
    candidate = Path(name).expanduser()
    if candidate.suffix.lower() in SQLITE_SUFFIXES:
        return candidate
    return data_dir / f"{name}{suffix}"


class SQLiteBackend(SQLBackend):
    """Embedded relational backend over the stdlib sqlite3 driver."""

    dialect = "sqlite"
    placeholder = "?"
    driver_errors = (sqlite3.Error,)
    create_if_not_exists = True

    def __init__(
        self,
        database: str,
        *,
        data_dir: Path = Path("."),
        suffix: str = ".db",
        timeout: float = 5.0,
        id_column: str = "id",
        sqlite3_path: str = "sqlite3",
        dump_timeout: float | None = None,
    ) -> None:
        super().__init__(database, id_column=id_column)
        self._path = resolve_database_path(database, data_dir, suffix)
        self._timeout = timeout
        self._sqlite3_path = sqlite3_path
        self._dump_timeout = dump_timeout

    @property
    def backend_type(self) -> BackendType:
        return BackendType.SQLITE

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> Any:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(str(self._path), timeout=self._timeout)
        connection.row_factory = sqlite3.Row
        return connection

    def create_database(self) -> None:
        # The file is created when the first connection opens it
        self._execute("PRAGMA user_version")
        logger.info("database_created", backend="sqlite", path=str(self._path))

    def database_exists(self) -> bool:
        if not self._path.is_file():
            return False
        return super().database_exists()

    def _list_tables_sql(self) -> str:
        return (
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )

    def collection_exists(self, collection: str) -> bool:
        rows = self._fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            [collection],
        )
        return bool(rows)

    def _columns(self, collection: str) -> dict[str, str]:
        rows = self._fetch_all(f"PRAGMA table_info({self.builder.quote(collection)})")
        return {row["name"]: row["type"] for row in rows}

    def _indexes(self, collection: str) -> list[dict[str, Any]]:
        rows = self._fetch_all(f"PRAGMA index_list({self.builder.quote(collection)})")
        return [
            {"name": row["name"], "unique": bool(row["unique"]), "origin": row["origin"]}
            for row in rows
        ]

    def backup(self, target_dir: Path) -> Path:
        """Copy the database file with ``sqlite3 .backup``.

        Falls back to the driver's online backup API when the sqlite3 shell
        is not installed.
        """
        if not self._path.is_file():
            raise BackupError(f"SQLite database file not found: {self._path}")

        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / f"{self._path.stem}-{backup_stamp()}.db"

        tool = shutil.which(self._sqlite3_path)
        if tool is not None:
            run_dump(
                [tool, str(self._path), f'.backup "{destination}"'],
                timeout=self._dump_timeout,
            )
        else:
            logger.info("sqlite3_shell_missing", fallback="online_backup_api")
            self._online_backup(destination)
        return destination

    def _online_backup(self, destination: Path) -> None:
        try:
            target = sqlite3.connect(str(destination))
            try:
                self.connection.backup(target)
            finally:
                target.close()
        except sqlite3.Error as e:
            destination.unlink(missing_ok=True)
            raise BackupError(f"SQLite online backup failed: {e}") from e
