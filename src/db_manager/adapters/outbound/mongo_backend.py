"""MongoDB backend adapter using pymongo.

Collections are schemaless: inserting into a missing collection creates it,
reads from a missing collection return nothing, and the schema report is
inferred from a sample of documents. Exports use MongoDB Extended JSON so
ObjectIds and dates survive an export/import round trip.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

from bson import ObjectId, json_util
from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

from db_manager.adapters.outbound.dump_runner import backup_stamp, run_dump
from db_manager.domain.entities import Document, SchemaReport
from db_manager.domain.errors import (
    BackendError,
    CollectionNotFoundError,
    ConnectionFailedError,
    EmptyCollectionError,
    InvalidRecordError,
)
from db_manager.domain.services import infer_document_schema
from db_manager.domain.value_objects import BackendType
from db_manager.infrastructure.logging import get_logger

logger = get_logger(__name__)


def to_object_id(record_id: Any) -> Any:
    """Convert 24-character hex strings to ObjectId; leave other ids alone."""
    if isinstance(record_id, str) and ObjectId.is_valid(record_id.strip()):
        return ObjectId(record_id.strip())
    return record_id


def extended_json_hook(obj: dict[str, Any]) -> Any:
    """Decode Extended JSON wrappers such as ``{"$oid": ...}`` on import.

    Malformed wrappers raise ValueError, like any other bad JSON.
    """
    try:
        return json_util.object_hook(obj)
    except BSONError as e:
        raise ValueError(f"Invalid Extended JSON value {obj!r}: {e}") from e


class MongoBackend:
    """Document store backend."""

    def __init__(
        self,
        database: str,
        *,
        uri: str = "mongodb://localhost:27017",
        server_selection_timeout_ms: int = 5000,
        init_collection: str = "initialCollection",
        sample_size: int = 100,
        mongodump_path: str = "mongodump",
        dump_timeout: float | None = None,
        client_factory: Callable[..., Any] = MongoClient,
    ) -> None:
        self._database = database
        self._uri = uri
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._init_collection = init_collection
        self._sample_size = sample_size
        self._mongodump_path = mongodump_path
        self._dump_timeout = dump_timeout
        self._client_factory = client_factory
        self._client: Any = None

        self.json_default = json_util.default
        self.json_object_hook = extended_json_hook

    @property
    def backend_type(self) -> BackendType:
        return BackendType.MONGODB

    @property
    def database(self) -> str:
        return self._database

    @property
    def db(self) -> Database:
        if self._client is None:
            try:
                self._client = self._client_factory(
                    self._uri,
                    serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                )
            except PyMongoError as e:
                raise ConnectionFailedError(f"Error connecting to MongoDB: {e}") from e
            logger.debug("connection_opened", backend="mongodb", database=self._database)
        return self._client[self._database]

    def __enter__(self) -> MongoBackend:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            finally:
                self._client = None
            logger.debug("connection_closed", backend="mongodb", database=self._database)

    @contextmanager
    def _driver_call(self, action: str) -> Iterator[None]:
        try:
            yield
        except ConnectionFailure as e:
            raise ConnectionFailedError(f"Error connecting to MongoDB: {e}") from e
        except PyMongoError as e:
            raise BackendError(f"{action} failed: {e}") from e
        except (BSONError, OverflowError) as e:
            # Raised while encoding, before anything reaches the server
            raise InvalidRecordError(f"{action} failed: {e}") from e

    def create_database(self) -> None:
        """Materialize the database by creating an initial collection."""
        with self._driver_call("Create database"):
            if not self.db.list_collection_names():
                self.db.create_collection(self._init_collection)
                logger.info(
                    "database_created",
                    backend="mongodb",
                    database=self._database,
                    collection=self._init_collection,
                )

    def database_exists(self) -> bool:
        return bool(self.list_collections())

    def list_collections(self) -> list[str]:
        with self._driver_call("List collections"):
            return sorted(self.db.list_collection_names())

    def create_collection(self, name: str, columns: str = "") -> None:
        with self._driver_call("Create collection"):
            self.db.create_collection(name)
        logger.info("collection_created", backend="mongodb", collection=name)

    def insert(self, collection: str, document: Document) -> Any:
        with self._driver_call("Insert"):
            result = self.db[collection].insert_one(dict(document))
        return result.inserted_id

    def find_all(self, collection: str) -> list[Document]:
        with self._driver_call("Read"):
            return list(self.db[collection].find())

    def update(self, collection: str, record_id: str, changes: Document) -> int:
        with self._driver_call("Update"):
            result = self.db[collection].update_one(
                {"_id": to_object_id(record_id)},
                {"$set": dict(changes)},
            )
        return result.matched_count

    def delete(self, collection: str, record_id: str) -> int:
        with self._driver_call("Delete"):
            result = self.db[collection].delete_one({"_id": to_object_id(record_id)})
        return result.deleted_count

    def insert_many(self, collection: str, documents: list[Document]) -> int:
        if not documents:
            return 0
        with self._driver_call("Bulk insert"):
            result = self.db[collection].insert_many([dict(doc) for doc in documents])
        return len(result.inserted_ids)

    def describe(self, collection: str) -> SchemaReport:
        with self._driver_call("Schema report"):
            if collection not in self.db.list_collection_names():
                raise CollectionNotFoundError(collection)
            sample = list(self.db[collection].find().limit(self._sample_size))
            if not sample:
                raise EmptyCollectionError(collection)
            index_info = self.db[collection].index_information()

        indexes = [
            {
                "name": name,
                "key": [[field, direction] for field, direction in info.get("key", [])],
                "unique": bool(info.get("unique", False)),
            }
            for name, info in index_info.items()
        ]
        return SchemaReport(
            collection=collection,
            backend=BackendType.MONGODB,
            fields=infer_document_schema(sample),
            indexes=indexes,
            sampled_documents=len(sample),
        )

    def backup(self, target_dir: Path) -> Path:
        """Dump the database with mongodump.

        mongodump writes one BSON file per collection under
        ``<out>/<database>/``; that directory is returned.
        """
        target_dir.mkdir(parents=True, exist_ok=True)
        out = target_dir / f"{self._database}-{backup_stamp()}"
        run_dump(
            [
                self._mongodump_path,
                f"--uri={self._uri}",
                f"--db={self._database}",
                f"--out={out}",
            ],
            timeout=self._dump_timeout,
        )
        return out / self._database
