"""Domain entities for the database manager.

Exports:
    Schema:
        - SchemaReport: Field types and indexes of one collection

    Results:
        - Document: Opaque record type alias
        - ExportResult, ImportResult, BackupResult: Data movement outcomes
"""

from db_manager.domain.entities.results import (
    BackupResult,
    Document,
    ExportResult,
    ImportResult,
)
from db_manager.domain.entities.schema_report import SchemaReport

__all__ = [
    # Schema
    "SchemaReport",
    # Results
    "Document",
    "ExportResult",
    "ImportResult",
    "BackupResult",
]
