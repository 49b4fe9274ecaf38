"""Database Operations port - the API offered to the CLI.

One method per user-facing operation. Each call opens a connection to the
selected backend, performs one request and closes the connection before
returning, so callers never hold a connection between menu actions.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Any, Protocol

from db_manager.domain.entities import (
    BackupResult,
    Document,
    ExportResult,
    ImportResult,
    SchemaReport,
)
from db_manager.domain.value_objects import BackendType, ExportFormat


class DatabaseOperations(Protocol):
    """Protocol for backend-independent database operations."""

    @property
    @abstractmethod
    def backend_type(self) -> BackendType:
        ...

    @property
    @abstractmethod
    def database(self) -> str:
        ...

    @abstractmethod
    def create_database(self) -> None:
        """Create the selected database."""
        ...

    @abstractmethod
    def select_database(self) -> bool:
        """Connect to the selected database.

        Returns:
            False if the database is empty or does not exist yet.

        Raises:
            ConnectionFailedError: If the backend cannot be reached.
        """
        ...

    @abstractmethod
    def list_collections(self) -> list[str]:
        ...

    @abstractmethod
    def create_collection(self, name: str, columns: str = "") -> None:
        ...

    @abstractmethod
    def create_record(self, collection: str, document: Document) -> Any:
        ...

    @abstractmethod
    def read_records(self, collection: str) -> list[Document]:
        ...

    @abstractmethod
    def update_record(self, collection: str, record_id: str, changes: Document) -> int:
        ...

    @abstractmethod
    def delete_record(self, collection: str, record_id: str) -> int:
        ...

    @abstractmethod
    def generate_schema_report(self, collection: str) -> SchemaReport:
        ...

    @abstractmethod
    def export_data(
        self,
        collection: str,
        fmt: ExportFormat,
        output: Path | None = None,
    ) -> ExportResult:
        ...

    @abstractmethod
    def import_data(self, collection: str, path: Path) -> ImportResult:
        ...

    @abstractmethod
    def backup_database(self, target_dir: Path | None = None) -> BackupResult:
        ...
