"""Shared DB-API implementation for the relational backends.

MySQL and SQLite differ only in how they connect, how they list and
inspect tables, and how they are dumped. Everything else (CRUD, bulk
insert, error wrapping) goes through the DB-API cursor and lives here.

Records map to rows column-for-column: document keys become column names
and nested values are stored as JSON text. Update and delete address rows
by a single id column (``records.id_column``, default ``id``).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

from db_manager.adapters.outbound.sql_builder import SQLBuilder
from db_manager.domain.entities import Document, SchemaReport
from db_manager.domain.errors import (
    BackendError,
    CollectionNotFoundError,
    ConnectionFailedError,
    InvalidRecordError,
)
from db_manager.domain.services import collect_fieldnames
from db_manager.domain.services.record_files import JsonDefault, JsonObjectHook
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.logging import get_logger

logger = get_logger(__name__)


def bind_value(value: Any) -> Any:
    """Convert a document value into something a DB-API driver can bind."""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return value


def coerce_record_id(record_id: Any) -> Any:
    """Bind integer-looking ids as integers so they match INTEGER keys.

    Ids with a leading zero (``"007"``) are left as text so they still
    match TEXT keys.
    """
    if isinstance(record_id, str):
        text = record_id.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdecimal() and (digits == "0" or not digits.startswith("0")):
            return int(text)
        return text
    return record_id


class SQLBackend(ABC):
    """Base class for DB-API backed relational adapters.

    Subclasses set ``dialect``, ``placeholder`` and ``driver_errors`` and
    implement the connection and introspection hooks.

    The connection is opened lazily on first use and closed by
    ``__exit__``, so a backend that only runs server-level statements
    (like CREATE DATABASE) never connects to the target database.
    """

    dialect: str = ""
    placeholder: str = "?"
    driver_errors: tuple[type[Exception], ...] = ()
    create_if_not_exists: bool = False

    json_default: JsonDefault | None = None
    json_object_hook: JsonObjectHook | None = None

    def __init__(self, database: str, *, id_column: str = "id") -> None:
        self._database = database
        self._id_column = id_column
        self._builder = SQLBuilder(dialect=self.dialect, placeholder=self.placeholder)
        self._connection: Any = None

    # -- lifecycle ----------------------------------------------------------

    @property
    @abstractmethod
    def backend_type(self) -> BackendType:
        ...

    @property
    def database(self) -> str:
        return self._database

    @property
    def builder(self) -> SQLBuilder:
        return self._builder

    @abstractmethod
    def _connect(self) -> Any:
        """Open a DB-API connection to the bound database."""
        ...

    @property
    def connection(self) -> Any:
        if self._connection is None:
            try:
                self._connection = self._connect()
            except self.driver_errors as e:
                raise ConnectionFailedError(
                    f"Error connecting to {self.backend_type.value} database {self._database}: {e}"
                ) from e
            logger.debug("connection_opened", backend=self.backend_type.value, database=self._database)
        return self._connection

    def __enter__(self) -> SQLBackend:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None
            logger.debug("connection_closed", backend=self.backend_type.value, database=self._database)

    # -- driver access ------------------------------------------------------

    @contextmanager
    def _driver_call(self, action: str) -> Iterator[None]:
        try:
            yield
        except self.driver_errors as e:
            raise BackendError(f"{action} failed: {e}") from e
        except OverflowError as e:
            # sqlite3 cannot bind integers wider than 64 bits
            raise InvalidRecordError(f"{action} failed: {e}") from e

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> Any:
        with self._driver_call("Query"):
            cursor = self.connection.cursor()
            cursor.execute(sql, tuple(params))
            return cursor

    def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        cursor = self._execute(sql, params)
        with self._driver_call("Fetch"):
            return [dict(row) for row in cursor.fetchall()]

    def _commit(self) -> None:
        with self._driver_call("Commit"):
            self.connection.commit()

    # -- introspection hooks ------------------------------------------------

    @abstractmethod
    def _list_tables_sql(self) -> str:
        ...

    @abstractmethod
    def collection_exists(self, collection: str) -> bool:
        ...

    @abstractmethod
    def _columns(self, collection: str) -> dict[str, str]:
        ...

    @abstractmethod
    def _indexes(self, collection: str) -> list[dict[str, Any]]:
        ...

    def _require_collection(self, collection: str) -> None:
        if not self.collection_exists(collection):
            raise CollectionNotFoundError(collection, label="table")

    # -- operations ---------------------------------------------------------

    @abstractmethod
    def create_database(self) -> None:
        ...

    def database_exists(self) -> bool:
        return bool(self.list_collections())

    def list_collections(self) -> list[str]:
        rows = self._fetch_all(self._list_tables_sql())
        return sorted(str(next(iter(row.values()))) for row in rows)

    def create_collection(self, name: str, columns: str = "") -> None:
        sql = self._builder.create_table(name, columns, if_not_exists=self.create_if_not_exists)
        self._execute(sql)
        self._commit()
        logger.info("table_created", backend=self.backend_type.value, table=name)

    def insert(self, collection: str, document: Document) -> Any:
        if not document:
            raise InvalidRecordError("Cannot insert an empty record")
        columns = list(document)
        cursor = self._execute(
            self._builder.insert(collection, columns),
            [bind_value(document[c]) for c in columns],
        )
        self._commit()
        return cursor.lastrowid

    def find_all(self, collection: str) -> list[Document]:
        self._require_collection(collection)
        return self._fetch_all(self._builder.select_all(collection))

    def update(self, collection: str, record_id: str, changes: Document) -> int:
        if not changes:
            raise InvalidRecordError("No fields to update")
        columns = list(changes)
        cursor = self._execute(
            self._builder.update(collection, columns, self._id_column),
            [bind_value(changes[c]) for c in columns] + [coerce_record_id(record_id)],
        )
        self._commit()
        return cursor.rowcount

    def delete(self, collection: str, record_id: str) -> int:
        cursor = self._execute(
            self._builder.delete(collection, self._id_column),
            [coerce_record_id(record_id)],
        )
        self._commit()
        return cursor.rowcount

    def insert_many(self, collection: str, documents: list[Document]) -> int:
        if not documents:
            return 0
        columns = collect_fieldnames(documents)
        rows = [[bind_value(doc.get(c)) for c in columns] for doc in documents]
        sql = self._builder.insert(collection, columns)
        with self._driver_call("Bulk insert"):
            cursor = self.connection.cursor()
            cursor.executemany(sql, rows)
        self._commit()
        return len(rows)

    def describe(self, collection: str) -> SchemaReport:
        self._require_collection(collection)
        fields = self._columns(collection)
        if not fields:
            raise BackendError(f'The table "{collection}" has no columns.')
        return SchemaReport(
            collection=collection,
            backend=self.backend_type,
            fields=fields,
            indexes=self._indexes(collection),
        )

    @abstractmethod
    def backup(self, target_dir: Path) -> Path:
        ...
