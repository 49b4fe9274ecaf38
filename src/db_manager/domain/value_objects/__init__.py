"""Value objects for the database manager domain.

Value objects are immutable types that represent domain concepts.

Exports:
    Backend Types:
        - BackendType: The three supported backends (mongodb, mysql, sqlite)
        - ExportFormat: Export file formats (csv, json)

    Names:
        - NameKind: What a validated name refers to
        - validate_name: Normalize and check a database/collection/column name
        - MAX_NAME_LENGTH: Longest accepted name
"""

from db_manager.domain.value_objects.backend_types import BackendType, ExportFormat
from db_manager.domain.value_objects.names import MAX_NAME_LENGTH, NameKind, validate_name

__all__ = [
    # Backend types
    "BackendType",
    "ExportFormat",
    # Names
    "NameKind",
    "validate_name",
    "MAX_NAME_LENGTH",
]
