"""Database Backend port for native client access.

This outbound port defines the contract every backend adapter fulfils.
Implementations wrap one client library each: pymongo for the document
store, pymysql for the relational server, sqlite3 for the embedded file.

A backend instance is bound to one database and is used for exactly one
request: the application opens it with ``with``, performs a single call,
and lets ``__exit__`` close the connection. Connections are opened lazily
on first use, so entering the context never touches the network.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from types import TracebackType
from typing import Any, Protocol

from db_manager.domain.entities import Document, SchemaReport
from db_manager.domain.services.record_files import JsonDefault, JsonObjectHook
from db_manager.domain.value_objects import BackendType


class DatabaseBackend(Protocol):
    """Protocol for per-backend database access.

    Errors:
        Driver exceptions are wrapped in BackendError (or a subclass) with
        the driver exception chained. ConnectionFailedError is raised by
        whichever call first needs the connection.
    """

    json_default: JsonDefault | None
    """Encoder for values the json module cannot serialize on export."""

    json_object_hook: JsonObjectHook | None
    """Decoder applied to every JSON object on import."""

    @property
    @abstractmethod
    def backend_type(self) -> BackendType:
        """Return the backend this adapter talks to."""
        ...

    @property
    @abstractmethod
    def database(self) -> str:
        """Return the database this adapter is bound to."""
        ...

    @abstractmethod
    def __enter__(self) -> DatabaseBackend:
        """Return the backend; the connection opens on first use."""
        ...

    @abstractmethod
    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the connection."""
        ...

    @abstractmethod
    def create_database(self) -> None:
        """Create the bound database if it does not exist."""
        ...

    @abstractmethod
    def database_exists(self) -> bool:
        """Return True if the bound database holds at least one collection."""
        ...

    @abstractmethod
    def list_collections(self) -> list[str]:
        """Return collection or table names, sorted."""
        ...

    @abstractmethod
    def create_collection(self, name: str, columns: str = "") -> None:
        """Create a collection or table.

        Args:
            name: Collection or table name.
            columns: Column definitions for relational backends, for
                example ``"id INTEGER PRIMARY KEY, name TEXT"``. Ignored by
                the document store.

        Raises:
            SchemaDefinitionError: If the column definitions do not parse.
        """
        ...

    @abstractmethod
    def insert(self, collection: str, document: Document) -> Any:
        """Insert one record and return its identifier when known."""
        ...

    @abstractmethod
    def find_all(self, collection: str) -> list[Document]:
        """Return every record in a collection.

        Relational backends raise CollectionNotFoundError for a missing
        table; the document store returns an empty list.
        """
        ...

    @abstractmethod
    def update(self, collection: str, record_id: str, changes: Document) -> int:
        """Set fields on the record with the given id.

        Returns:
            Number of records matched (0 or 1).
        """
        ...

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> int:
        """Delete the record with the given id.

        Returns:
            Number of records deleted (0 or 1).
        """
        ...

    @abstractmethod
    def insert_many(self, collection: str, documents: list[Document]) -> int:
        """Insert several records and return how many were written."""
        ...

    @abstractmethod
    def describe(self, collection: str) -> SchemaReport:
        """Build a schema report for one collection.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            EmptyCollectionError: If a schemaless collection has no
                documents to infer from.
        """
        ...

    @abstractmethod
    def backup(self, target_dir: Path) -> Path:
        """Dump the bound database into target_dir.

        Returns:
            The dump file or directory written.

        Raises:
            BackupError: If the dump tool fails.
        """
        ...
