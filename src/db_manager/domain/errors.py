"""Exception hierarchy for the database manager.

Every error raised on purpose derives from DatabaseManagerError so the CLI
can report it and keep the menu loop running. Driver exceptions are wrapped
in BackendError subclasses with the original chained as ``__cause__``.
"""

from __future__ import annotations


class DatabaseManagerError(Exception):
    """Base class for all database manager errors."""

    pass


class UnsupportedBackendError(DatabaseManagerError):
    """Raised when a backend name is not one of the supported backends."""

    pass


class UnsupportedFormatError(DatabaseManagerError):
    """Raised when an export format is not supported."""

    pass


class InvalidNameError(DatabaseManagerError):
    """Raised when a database, collection or table name is rejected."""

    pass


class InvalidRecordError(DatabaseManagerError):
    """Raised when record input is not a JSON object or holds values the backend cannot store."""

    pass


class RecordFileError(DatabaseManagerError):
    """Raised when an import file cannot be read as records."""

    pass


class BackendError(DatabaseManagerError):
    """Raised when a backend driver call fails."""

    pass


class ConnectionFailedError(BackendError):
    """Raised when a connection to the backend cannot be established."""

    pass


class CollectionNotFoundError(BackendError):
    """Raised when a collection or table does not exist."""

    def __init__(self, collection: str, label: str = "collection") -> None:
        super().__init__(f'The {label} "{collection}" does not exist.')
        self.collection = collection


class EmptyCollectionError(BackendError):
    """Raised when a schema cannot be inferred from an empty collection."""

    def __init__(self, collection: str) -> None:
        super().__init__(f'The collection "{collection}" is empty.')
        self.collection = collection


class SchemaDefinitionError(BackendError):
    """Raised when column definitions for a new table do not parse."""

    pass


class BackupError(BackendError):
    """Raised when an external dump tool fails."""

    pass
