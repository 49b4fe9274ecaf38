"""Unit tests for the MySQL backend with a mocked PyMySQL connection."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pymysql
import pytest
from pymysql.constants import CLIENT
from pymysql.cursors import DictCursor

from db_manager.adapters.outbound.mysql_backend import MySQLBackend, like_pattern
from db_manager.adapters.outbound.sql_backend import coerce_record_id
from db_manager.domain.errors import (
    BackendError,
    CollectionNotFoundError,
    ConnectionFailedError,
    InvalidRecordError,
    SchemaDefinitionError,
)


@pytest.fixture
def cursor() -> MagicMock:
    cursor = MagicMock(name="Cursor")
    cursor.__enter__.return_value = cursor
    cursor.fetchall.return_value = []
    return cursor


@pytest.fixture
def connection(cursor: MagicMock) -> MagicMock:
    connection = MagicMock(name="Connection")
    connection.cursor.return_value = cursor
    return connection


@pytest.fixture
def connect(connection: MagicMock) -> MagicMock:
    return MagicMock(return_value=connection)


@pytest.fixture
def backend(connect: MagicMock) -> MySQLBackend:
    return MySQLBackend(
        "shop",
        host="db",
        port=3307,
        user="app",
        password="pw",
        connect=connect,
    )


@pytest.mark.unit
class TestLikePattern:
    def test_escapes_wildcards(self) -> None:
        assert like_pattern("user_logs%") == "user\\_logs\\%"

    def test_escapes_backslash(self) -> None:
        assert like_pattern("a\\b") == "a\\\\b"


@pytest.mark.unit
class TestCoerceRecordId:
    @pytest.mark.parametrize(("raw", "expected"), [("42", 42), (" 7 ", 7), ("-3", -3), ("0", 0), (5, 5)])
    def test_integers(self, raw: object, expected: int) -> None:
        assert coerce_record_id(raw) == expected

    @pytest.mark.parametrize("raw", ["007", "²", "abc", "4.2", "-"])
    def test_other_ids_stay_text(self, raw: str) -> None:
        assert coerce_record_id(raw) == raw


@pytest.mark.unit
class TestMySQLConnection:
    """Tests for connection handling."""

    def test_connect_arguments(self, backend: MySQLBackend, connect: MagicMock) -> None:
        backend.list_collections()

        kwargs = connect.call_args.kwargs
        assert kwargs["host"] == "db"
        assert kwargs["port"] == 3307
        assert kwargs["user"] == "app"
        assert kwargs["password"] == "pw"
        assert kwargs["database"] == "shop"
        assert kwargs["cursorclass"] is DictCursor
        assert kwargs["client_flag"] == CLIENT.FOUND_ROWS

    def test_connection_failure(self, backend: MySQLBackend, connect: MagicMock) -> None:
        connect.side_effect = pymysql.err.OperationalError(2003, "Can't connect to MySQL server")

        with pytest.raises(ConnectionFailedError, match="Can't connect"):
            backend.list_collections()

    def test_exit_closes_connection(self, backend: MySQLBackend, connection: MagicMock) -> None:
        with backend as b:
            b.list_collections()

        connection.close.assert_called_once()

    def test_query_failure_is_wrapped(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.execute.side_effect = pymysql.err.ProgrammingError(1146, "Table 'shop.x' doesn't exist")

        with pytest.raises(BackendError, match="doesn't exist") as excinfo:
            backend.delete("x", "1")

        assert isinstance(excinfo.value.__cause__, pymysql.MySQLError)


@pytest.mark.unit
class TestMySQLOperations:
    """Tests for SQL generation and result handling."""

    def test_create_database_uses_server_connection(
        self, backend: MySQLBackend, connect: MagicMock, connection: MagicMock, cursor: MagicMock
    ) -> None:
        backend.create_database()

        assert connect.call_args.kwargs["database"] is None
        cursor.execute.assert_called_once_with("CREATE DATABASE IF NOT EXISTS `shop`", ())
        connection.commit.assert_called_once()
        connection.close.assert_called_once()

    def test_list_collections(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = [{"Tables_in_shop": "users"}, {"Tables_in_shop": "orders"}]

        assert backend.list_collections() == ["orders", "users"]
        cursor.execute.assert_called_once_with("SHOW TABLES", ())

    def test_create_collection(self, backend: MySQLBackend, cursor: MagicMock, connection: MagicMock) -> None:
        backend.create_collection("users", "id INT PRIMARY KEY, name VARCHAR(255)")

        cursor.execute.assert_called_once_with(
            "CREATE TABLE `users` (id INT PRIMARY KEY, name VARCHAR(255))", ()
        )
        connection.commit.assert_called_once()

    def test_create_collection_requires_columns(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        with pytest.raises(SchemaDefinitionError):
            backend.create_collection("users", "")

        cursor.execute.assert_not_called()

    def test_insert_binds_values(self, backend: MySQLBackend, cursor: MagicMock, connection: MagicMock) -> None:
        cursor.lastrowid = 12

        record_id = backend.insert("users", {"name": "Ada", "meta": {"team": "core"}})

        assert record_id == 12
        cursor.execute.assert_called_once_with(
            "INSERT INTO `users` (`name`, `meta`) VALUES (%s, %s)",
            ("Ada", '{"team": "core"}'),
        )
        connection.commit.assert_called_once()

    def test_insert_empty_record(self, backend: MySQLBackend) -> None:
        with pytest.raises(InvalidRecordError):
            backend.insert("users", {})

    def test_find_all_requires_table(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = []

        with pytest.raises(CollectionNotFoundError, match='table "users"'):
            backend.find_all("users")

        cursor.execute.assert_called_once_with("SHOW TABLES LIKE %s", ("users",))

    def test_find_all(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.fetchall.side_effect = [
            [{"Tables_in_shop (users)": "users"}],
            [{"id": 1, "name": "Ada"}],
        ]

        assert backend.find_all("users") == [{"id": 1, "name": "Ada"}]
        assert cursor.execute.call_args.args == ("SELECT * FROM `users`", ())

    def test_update_coerces_numeric_id(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.rowcount = 1

        assert backend.update("users", "5", {"name": "Grace"}) == 1

        cursor.execute.assert_called_once_with(
            "UPDATE `users` SET `name` = %s WHERE `id` = %s", ("Grace", 5)
        )

    def test_update_requires_changes(self, backend: MySQLBackend) -> None:
        with pytest.raises(InvalidRecordError):
            backend.update("users", "5", {})

    def test_delete_keeps_text_id(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.rowcount = 0

        assert backend.delete("users", "abc") == 0

        cursor.execute.assert_called_once_with("DELETE FROM `users` WHERE `id` = %s", ("abc",))

    def test_insert_many(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        count = backend.insert_many("users", [{"id": 1, "name": "Ada"}, {"id": 2}])

        assert count == 2
        cursor.executemany.assert_called_once_with(
            "INSERT INTO `users` (`id`, `name`) VALUES (%s, %s)",
            [[1, "Ada"], [2, None]],
        )

    def test_describe(self, backend: MySQLBackend, cursor: MagicMock) -> None:
        cursor.fetchall.side_effect = [
            [{"Tables_in_shop (users)": "users"}],
            [
                {"Field": "id", "Type": b"int", "Null": "NO", "Key": "PRI"},
                {"Field": "email", "Type": "varchar(255)", "Null": "YES", "Key": "UNI"},
            ],
            [
                {"Key_name": "PRIMARY", "Column_name": "id", "Non_unique": 0},
                {"Key_name": "email", "Column_name": "email", "Non_unique": 0},
            ],
        ]

        report = backend.describe("users")

        assert report.fields == {"id": "int", "email": "varchar(255)"}
        assert report.indexes == [
            {"name": "PRIMARY", "columns": ["id"], "unique": True},
            {"name": "email", "columns": ["email"], "unique": True},
        ]
        assert report.sampled_documents is None

    def test_backup_runs_mysqldump(self, backend: MySQLBackend, temp_dir: Path) -> None:
        with patch("db_manager.adapters.outbound.mysql_backend.run_dump") as run_dump, patch(
            "db_manager.adapters.outbound.mysql_backend.backup_stamp", return_value="20240101-000000"
        ):
            path = backend.backup(temp_dir)

        assert path == temp_dir / "shop-20240101-000000.sql"
        argv = run_dump.call_args.args[0]
        assert argv[0] == "mysqldump"
        assert "--single-transaction" in argv
        assert "--routines" in argv
        assert "--triggers" in argv
        assert argv[-1] == "shop"
        assert not any("pw" in arg for arg in argv)
        assert run_dump.call_args.kwargs["env"] == {"MYSQL_PWD": "pw"}
        assert run_dump.call_args.kwargs["stdout_path"] == path
