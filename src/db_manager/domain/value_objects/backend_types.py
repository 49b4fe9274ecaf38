"""Backend and file format enumerations.

The backend type is chosen once per session and drives every dispatch
decision in the application layer.
"""

from __future__ import annotations

from enum import Enum

from db_manager.domain.errors import UnsupportedBackendError, UnsupportedFormatError


class BackendType(str, Enum):
    """Supported database backends."""

    MONGODB = "mongodb"
    """Document store. Collections are schemaless."""

    MYSQL = "mysql"
    """Relational server reached over the network."""

    SQLITE = "sqlite"
    """Embedded relational database stored in a single file."""

    @classmethod
    def parse(cls, value: str | BackendType) -> BackendType:
        """Resolve a backend from its name, case-insensitively.

        Raises:
            UnsupportedBackendError: If the name is not a known backend.
        """
        if isinstance(value, BackendType):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            supported = ", ".join(b.value for b in cls)
            raise UnsupportedBackendError(
                f"Unsupported database type: {value!r}. Supported: {supported}"
            ) from None

    @property
    def is_relational(self) -> bool:
        """Whether collections are SQL tables with declared columns."""
        return self is not BackendType.MONGODB

    @property
    def collection_label(self) -> str:
        return "collection" if self is BackendType.MONGODB else "table"


class ExportFormat(str, Enum):
    """File formats for export."""

    CSV = "csv"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        """Resolve a format from its name, case-insensitively.

        Raises:
            UnsupportedFormatError: If the name is not a known format.
        """
        if isinstance(value, ExportFormat):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported export format: {value!r}") from None
