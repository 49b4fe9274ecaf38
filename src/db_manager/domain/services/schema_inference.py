"""Schema inference for schemaless collections.

Documents in a collection need not share fields or types. The inferred
schema records, for each field, the type seen in the first document that
carries the field. Later documents never override an earlier type, so the
result is stable for a given sample order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any


def describe_value_type(value: Any) -> str:
    """Name the type of a single document value.

    Builtin JSON-like types map to portable names; anything else (for
    example a driver's ObjectId) reports its class name.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "date"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (bytes, bytearray)):
        return "binary"
    return type(value).__name__


def infer_document_schema(documents: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Infer field types from a sample of documents.

    Args:
        documents: Sampled documents, in the order they were read.

    Returns:
        Field name to type name, in first-appearance order.

    Example:
        >>> infer_document_schema([{"a": 1}, {"a": "x", "b": True}])
        {'a': 'number', 'b': 'boolean'}
    """
    schema: dict[str, str] = {}
    for document in documents:
        for key, value in document.items():
            if key not in schema:
                schema[key] = describe_value_type(value)
    return schema
