"""MySQL backend adapter using PyMySQL.

Connections use DictCursor so rows come back as dicts, and the FOUND_ROWS
client flag so UPDATE reports matched rather than changed rows. Every
statement passes a parameter tuple (possibly empty): PyMySQL only runs
%-interpolation when parameters are given, and identifiers are quoted with
``%`` doubled for that step.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pymysql
from pymysql.constants import CLIENT
from pymysql.cursors import DictCursor

from db_manager.adapters.outbound.dump_runner import backup_stamp, run_dump
from db_manager.adapters.outbound.sql_backend import SQLBackend
from db_manager.domain.errors import BackendError, ConnectionFailedError
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.logging import get_logger

logger = get_logger(__name__)


def like_pattern(name: str) -> str:
    """Escape a name for use as a literal LIKE pattern."""
    return name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


class MySQLBackend(SQLBackend):
    """Relational server backend."""

    dialect = "mysql"
    placeholder = "%s"
    driver_errors = (pymysql.MySQLError,)
    create_if_not_exists = False

    def __init__(
        self,
        database: str,
        *,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: str = "",
        charset: str = "utf8mb4",
        connect_timeout: int = 10,
        id_column: str = "id",
        mysqldump_path: str = "mysqldump",
        dump_timeout: float | None = None,
        connect: Callable[..., Any] = pymysql.connect,
    ) -> None:
        super().__init__(database, id_column=id_column)
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._charset = charset
        self._connect_timeout = connect_timeout
        self._mysqldump_path = mysqldump_path
        self._dump_timeout = dump_timeout
        self._connect_fn = connect

    @property
    def backend_type(self) -> BackendType:
        return BackendType.MYSQL

    def _open(self, database: str | None) -> Any:
        return self._connect_fn(
            host=self._host,
            port=self._port,
            user=self._user,
            password=self._password,
            database=database,
            charset=self._charset,
            connect_timeout=self._connect_timeout,
            cursorclass=DictCursor,
            client_flag=CLIENT.FOUND_ROWS,
            autocommit=False,
        )

    def _connect(self) -> Any:
        return self._open(self._database)

    def create_database(self) -> None:
        """Run CREATE DATABASE on a server-level connection."""
        try:
            server = self._open(None)
        except pymysql.MySQLError as e:
            raise ConnectionFailedError(f"Error connecting to MySQL at {self._host}:{self._port}: {e}") from e

        try:
            with server.cursor() as cursor:
                cursor.execute(f"CREATE DATABASE IF NOT EXISTS {self.builder.quote(self._database)}", ())
            server.commit()
        except pymysql.MySQLError as e:
            raise BackendError(f"Failed to create database {self._database}: {e}") from e
        finally:
            server.close()
        logger.info("database_created", backend="mysql", database=self._database)

    def _list_tables_sql(self) -> str:
        return "SHOW TABLES"

    def collection_exists(self, collection: str) -> bool:
        return bool(self._fetch_all("SHOW TABLES LIKE %s", [like_pattern(collection)]))

    def _columns(self, collection: str) -> dict[str, str]:
        rows = self._fetch_all(f"SHOW COLUMNS FROM {self.builder.quote(collection)}")
        return {_text(row["Field"]): _text(row["Type"]) for row in rows}

    def _indexes(self, collection: str) -> list[dict[str, Any]]:
        rows = self._fetch_all(f"SHOW INDEX FROM {self.builder.quote(collection)}")
        indexes: dict[str, dict[str, Any]] = {}
        for row in rows:
            name = _text(row["Key_name"])
            index = indexes.setdefault(
                name,
                {"name": name, "columns": [], "unique": not int(row["Non_unique"])},
            )
            index["columns"].append(_text(row["Column_name"]))
        return list(indexes.values())

    def backup(self, target_dir: Path) -> Path:
        """Dump the database with mysqldump into ``<database>-<stamp>.sql``."""
        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / f"{self._database}-{backup_stamp()}.sql"
        argv = [
            self._mysqldump_path,
            f"--host={self._host}",
            f"--port={self._port}",
            f"--user={self._user}",
            "--single-transaction",
            "--routines",
            "--triggers",
            self._database,
        ]
        env = {"MYSQL_PWD": self._password} if self._password else None
        run_dump(argv, stdout_path=destination, env=env, timeout=self._dump_timeout)
        return destination
