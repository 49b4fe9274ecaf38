"""Schema report entity.

A schema report is whatever a backend can say about the shape of one
collection: declared column types for relational tables, or field types
inferred from a sample of documents for the document store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from db_manager.domain.value_objects import BackendType


@dataclass
class SchemaReport:
    """Shape of a single collection or table.

    Attributes:
        collection: Collection or table name.
        backend: Backend the report was read from.
        fields: Field name to type name, in declaration or first-seen order.
        indexes: Index descriptions as returned by the backend.
        sampled_documents: Number of documents inspected when the schema was
            inferred; None when the backend declares its columns.
    """

    collection: str
    backend: BackendType
    fields: dict[str, str] = field(default_factory=dict)
    indexes: list[dict[str, Any]] = field(default_factory=list)
    sampled_documents: int | None = None

    @property
    def is_inferred(self) -> bool:
        """Whether field types were guessed from sampled documents."""
        return self.sampled_documents is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection": self.collection,
            "backend": self.backend.value,
            "schema": dict(self.fields),
            "indexes": list(self.indexes),
            "sampled_documents": self.sampled_documents,
        }
