"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (DatabaseOperations)
- Outbound ports: Dependencies on external systems (DatabaseBackend)

Adapters implement these ports with concrete functionality.
"""

from db_manager.domain.errors import (
    BackendError,
    BackupError,
    CollectionNotFoundError,
    ConnectionFailedError,
    DatabaseManagerError,
    EmptyCollectionError,
    InvalidNameError,
    InvalidRecordError,
    RecordFileError,
    SchemaDefinitionError,
    UnsupportedBackendError,
    UnsupportedFormatError,
)
from db_manager.ports.inbound import DatabaseOperations
from db_manager.ports.outbound import DatabaseBackend

__all__ = [
    # Inbound ports
    "DatabaseOperations",
    # Outbound ports
    "DatabaseBackend",
    # Errors
    "DatabaseManagerError",
    "UnsupportedBackendError",
    "UnsupportedFormatError",
    "InvalidNameError",
    "InvalidRecordError",
    "RecordFileError",
    "BackendError",
    "ConnectionFailedError",
    "CollectionNotFoundError",
    "EmptyCollectionError",
    "SchemaDefinitionError",
    "BackupError",
]
