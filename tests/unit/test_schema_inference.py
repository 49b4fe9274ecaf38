"""Unit tests for schema inference."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from db_manager.domain.services import describe_value_type, infer_document_schema


class _Opaque:
    pass


@pytest.mark.unit
class TestDescribeValueType:
    """Tests for describe_value_type."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "null"),
            (True, "boolean"),
            (3, "number"),
            (2.5, "number"),
            (Decimal("1.10"), "number"),
            ("text", "string"),
            (datetime(2024, 1, 31), "date"),
            ({"a": 1}, "object"),
            ([1, 2], "array"),
            (b"\x00", "binary"),
        ],
    )
    def test_builtin_types(self, value: object, expected: str) -> None:
        assert describe_value_type(value) == expected

    def test_unknown_type_uses_class_name(self) -> None:
        assert describe_value_type(_Opaque()) == "_Opaque"


@pytest.mark.unit
class TestInferDocumentSchema:
    """Tests for infer_document_schema."""

    def test_first_seen_type_wins(self) -> None:
        documents = [
            {"name": "Ada", "age": 36},
            {"name": 7, "age": "unknown", "email": "ada@example.com"},
        ]

        schema = infer_document_schema(documents)

        assert schema == {"name": "string", "age": "number", "email": "string"}

    def test_field_order_is_first_appearance(self) -> None:
        schema = infer_document_schema([{"b": 1}, {"a": 1, "b": 2, "c": 3}])

        assert list(schema) == ["b", "a", "c"]

    def test_empty_sample(self) -> None:
        assert infer_document_schema([]) == {}
