"""Results of data movement operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from db_manager.domain.value_objects import BackendType, ExportFormat

Document = dict[str, Any]
"""An opaque record: field name to untyped value."""


@dataclass(frozen=True)
class ExportResult:
    """Outcome of exporting a collection to a file."""

    collection: str
    path: Path
    format: ExportFormat
    count: int


@dataclass(frozen=True)
class ImportResult:
    """Outcome of loading a file into a collection."""

    collection: str
    path: Path
    count: int


@dataclass(frozen=True)
class BackupResult:
    """Outcome of a database backup.

    Attributes:
        backend: Backend that was dumped.
        database: Database name.
        path: Dump file or directory written by the backup.
        duration_seconds: Wall-clock time spent in the dump.
    """

    backend: BackendType
    database: str
    path: Path
    duration_seconds: float
