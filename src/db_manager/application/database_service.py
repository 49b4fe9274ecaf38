"""DatabaseService application service.

This is the backend-selection dispatcher: it validates names, asks the
factory for the adapter of the selected backend, and runs exactly one
request per connection. Every operation is traced, counted and timed, and
failures are logged before they propagate to the caller.

Usage:
    from db_manager.application import DatabaseService

    service = DatabaseService("sqlite", "shop", config)
    service.create_collection("users", "id INTEGER PRIMARY KEY, name TEXT")
    service.create_record("users", {"id": 1, "name": "Ada"})
    service.export_data("users", "json")
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from db_manager.adapters.outbound.factory import BackendFactory
from db_manager.domain.entities import (
    BackupResult,
    Document,
    ExportResult,
    ImportResult,
    SchemaReport,
)
from db_manager.domain.errors import InvalidRecordError
from db_manager.domain.services import read_records, write_records
from db_manager.domain.value_objects import (
    BackendType,
    ExportFormat,
    NameKind,
    validate_name,
)
from db_manager.infrastructure.config import Config
from db_manager.infrastructure.logging import get_logger
from db_manager.infrastructure.metrics import MetricsRegistry, get_metrics
from db_manager.infrastructure.tracing import trace_span
from db_manager.ports.outbound import DatabaseBackend


class DatabaseService:
    """Runs user operations against one database on one backend.

    Attributes:
        backend_type: Backend selected for the session
        database: Validated database name
    """

    def __init__(
        self,
        backend_type: BackendType | str,
        database: str,
        config: Config,
        factory: BackendFactory | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            backend_type: Backend name or enum member
            database: Database name (a file path is allowed for SQLite)
            config: Application configuration
            factory: Adapter factory; built from config when omitted
            metrics: Metrics registry; the global one when omitted

        Raises:
            UnsupportedBackendError: If the backend is unknown
            InvalidNameError: If the database name is rejected
        """
        self._backend_type = BackendType.parse(backend_type)
        kind = NameKind.DATABASE_FILE if self._backend_type is BackendType.SQLITE else NameKind.DATABASE
        self._database = validate_name(database, kind)
        self._config = config
        self._factory = factory or BackendFactory(config)
        self._metrics = metrics or get_metrics()
        self._logger = get_logger(
            __name__,
            backend=self._backend_type.value,
            database=self._database,
        )

    @property
    def backend_type(self) -> BackendType:
        return self._backend_type

    @property
    def database(self) -> str:
        return self._database

    @contextmanager
    def _operation(self, name: str, **attributes: Any) -> Iterator[DatabaseBackend]:
        """Open a backend for one operation and record its outcome."""
        backend_label = self._backend_type.value
        span_attributes = {"db.system": backend_label, "db.name": self._database, **attributes}
        status = "success"
        start = time.perf_counter()

        with trace_span(f"dbm.{name}", span_attributes):
            try:
                with self._factory.create(self._backend_type, self._database) as backend:
                    yield backend
            except Exception as e:
                status = "error"
                self._logger.error(
                    "operation_failed",
                    operation=name,
                    error=str(e),
                    error_type=type(e).__name__,
                    **attributes,
                )
                raise
            finally:
                self._metrics.operations_total.labels(
                    backend=backend_label, operation=name, status=status
                ).inc()
                self._metrics.operation_latency_seconds.labels(
                    backend=backend_label, operation=name
                ).observe(time.perf_counter() - start)

    # -- database ---------------------------------------------------------

    def create_database(self) -> None:
        with self._operation("create_database") as backend:
            backend.create_database()
        self._logger.info("database_ready")

    def select_database(self) -> bool:
        """Connect and check the database holds at least one collection."""
        with self._operation("select_database") as backend:
            exists = backend.database_exists()
        if not exists:
            self._logger.warning("database_empty_or_missing")
        return exists

    def list_collections(self) -> list[str]:
        with self._operation("list_collections") as backend:
            return backend.list_collections()

    def create_collection(self, name: str, columns: str = "") -> None:
        name = validate_name(name, NameKind.COLLECTION)
        with self._operation("create_collection", collection=name) as backend:
            backend.create_collection(name, columns)

    # -- records ----------------------------------------------------------

    def create_record(self, collection: str, document: Document) -> Any:
        """Insert one record and return the id the backend assigned, if any."""
        collection = validate_name(collection, NameKind.COLLECTION)
        _require_object(document)
        with self._operation("create", collection=collection) as backend:
            record_id = backend.insert(collection, document)
        self._logger.info("record_created", collection=collection, record_id=str(record_id))
        return record_id

    def read_records(self, collection: str) -> list[Document]:
        collection = validate_name(collection, NameKind.COLLECTION)
        with self._operation("read", collection=collection) as backend:
            return backend.find_all(collection)

    def update_record(self, collection: str, record_id: str, changes: Document) -> int:
        """Set fields on one record.

        Returns:
            Number of records matched (0 when the id is unknown)
        """
        collection = validate_name(collection, NameKind.COLLECTION)
        record_id = _require_id(record_id)
        _require_object(changes)
        with self._operation("update", collection=collection) as backend:
            matched = backend.update(collection, record_id, changes)
        self._logger.info("record_updated", collection=collection, record_id=record_id, matched=matched)
        return matched

    def delete_record(self, collection: str, record_id: str) -> int:
        collection = validate_name(collection, NameKind.COLLECTION)
        record_id = _require_id(record_id)
        with self._operation("delete", collection=collection) as backend:
            deleted = backend.delete(collection, record_id)
        self._logger.info("record_deleted", collection=collection, record_id=record_id, deleted=deleted)
        return deleted

    # -- schema, export, import, backup -------------------------------------

    def generate_schema_report(self, collection: str) -> SchemaReport:
        collection = validate_name(collection, NameKind.COLLECTION)
        with self._operation("schema_report", collection=collection) as backend:
            return backend.describe(collection)

    def export_data(
        self,
        collection: str,
        fmt: ExportFormat | str,
        output: Path | str | None = None,
    ) -> ExportResult:
        """Write every record of a collection to a CSV or JSON file.

        Args:
            collection: Collection or table to export
            fmt: Output format
            output: Destination file; ``<export.output_dir>/<collection>.<fmt>``
                when omitted
        """
        collection = validate_name(collection, NameKind.COLLECTION)
        fmt = ExportFormat.parse(fmt)
        path = Path(output).expanduser() if output else (
            self._config.export.output_dir / f"{collection}.{fmt.value}"
        )

        with self._operation("export", collection=collection, format=fmt.value) as backend:
            records = backend.find_all(collection)
            write_records(
                path,
                records,
                fmt,
                default=backend.json_default,
                indent=self._config.export.json_indent,
            )

        self._metrics.records_exported_total.labels(
            backend=self._backend_type.value, format=fmt.value
        ).inc(len(records))
        self._logger.info("data_exported", collection=collection, path=str(path), count=len(records))
        return ExportResult(collection=collection, path=path, format=fmt, count=len(records))

    def import_data(self, collection: str, path: Path | str) -> ImportResult:
        """Load records from a CSV or JSON file into a collection."""
        collection = validate_name(collection, NameKind.COLLECTION)
        source = Path(path).expanduser()

        with self._operation("import", collection=collection) as backend:
            records = read_records(source, object_hook=backend.json_object_hook)
            count = backend.insert_many(collection, records)

        self._metrics.records_imported_total.labels(backend=self._backend_type.value).inc(count)
        self._logger.info("data_imported", collection=collection, path=str(source), count=count)
        return ImportResult(collection=collection, path=source, count=count)

    def backup_database(self, target_dir: Path | str | None = None) -> BackupResult:
        """Dump the database with the backend's native tool."""
        target = Path(target_dir).expanduser() if target_dir else self._config.backup.output_dir
        backend_label = self._backend_type.value
        start = time.perf_counter()

        try:
            with self._operation("backup", target_dir=str(target)) as backend:
                path = backend.backup(target)
        except Exception:
            self._metrics.backups_total.labels(backend=backend_label, status="error").inc()
            raise

        duration = time.perf_counter() - start
        self._metrics.backups_total.labels(backend=backend_label, status="success").inc()
        self._logger.info("backup_completed", path=str(path), duration_seconds=round(duration, 3))
        return BackupResult(
            backend=self._backend_type,
            database=self._database,
            path=path,
            duration_seconds=duration,
        )


def _require_object(document: Any) -> None:
    if not isinstance(document, dict):
        raise InvalidRecordError(f"Record must be a JSON object, got {type(document).__name__}")


def _require_id(record_id: Any) -> str:
    text = str(record_id).strip() if record_id is not None else ""
    if not text:
        raise InvalidRecordError("Record id must not be empty")
    return text
