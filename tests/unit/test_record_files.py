"""Unit tests for record file reading and writing."""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path

import pytest

from db_manager.domain.errors import InvalidRecordError, RecordFileError
from db_manager.domain.services import (
    collect_fieldnames,
    parse_record,
    read_records,
    write_records,
)
from db_manager.domain.value_objects import ExportFormat


@pytest.mark.unit
class TestCollectFieldnames:
    def test_union_in_first_appearance_order(self) -> None:
        records = [{"id": 1, "name": "a"}, {"id": 2, "email": "b@x"}, {"name": "c", "age": 3}]

        assert collect_fieldnames(records) == ["id", "name", "email", "age"]


@pytest.mark.unit
class TestParseRecord:
    def test_object(self) -> None:
        assert parse_record('{"name": "Ada", "tags": ["x"]}') == {"name": "Ada", "tags": ["x"]}

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '"text"', "42"])
    def test_rejects_non_objects(self, text: str) -> None:
        with pytest.raises(InvalidRecordError):
            parse_record(text)


@pytest.mark.unit
class TestWriteRecords:
    """Tests for write_records."""

    def test_json_is_indented_array(self, temp_dir: Path) -> None:
        path = write_records(temp_dir / "out" / "users.json", [{"id": 1}], ExportFormat.JSON)

        text = path.read_text(encoding="utf-8")
        assert text.startswith("[\n  {")
        assert json.loads(text) == [{"id": 1}]

    def test_json_default_hook(self, temp_dir: Path) -> None:
        stamp = datetime(2024, 1, 31, 12, 0)

        path = write_records(
            temp_dir / "users.json",
            [{"created": stamp}],
            ExportFormat.JSON,
            default=lambda value: {"$date": value.isoformat()},
        )

        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"created": {"$date": "2024-01-31T12:00:00"}}
        ]

    def test_csv_has_header_and_encodes_values(self, temp_dir: Path) -> None:
        records = [
            {"id": 1, "name": "Ada", "tags": ["x", "y"]},
            {"id": 2, "email": None},
        ]

        path = write_records(temp_dir / "users.csv", records, ExportFormat.CSV)

        with path.open(newline="", encoding="utf-8") as fh:
            rows = list(csv.reader(fh))
        assert rows[0] == ["id", "name", "tags", "email"]
        assert rows[1] == ["1", "Ada", '["x", "y"]', ""]
        assert rows[2] == ["2", "", "", ""]

    def test_csv_writes_scalars_as_json(self, temp_dir: Path) -> None:
        records = [{"age": 30, "active": True, "score": 1.5, "name": "Ada", "zip": "30", "blank": ""}]

        path = write_records(temp_dir / "t.csv", records, ExportFormat.CSV)

        with path.open(newline="", encoding="utf-8") as fh:
            rows = list(csv.reader(fh))
        assert rows[1] == ["30", "true", "1.5", "Ada", '"30"', '""']

    def test_csv_stringifies_driver_types(self, temp_dir: Path) -> None:
        class Token:
            def __str__(self) -> str:
                return "tok-1"

        path = write_records(temp_dir / "t.csv", [{"token": Token()}], ExportFormat.CSV)

        assert read_records(path) == [{"token": "tok-1"}]

    def test_csv_default_hook(self, temp_dir: Path) -> None:
        stamp = datetime(2024, 1, 31, 12, 0)

        path = write_records(
            temp_dir / "t.csv",
            [{"created": stamp}],
            ExportFormat.CSV,
            default=lambda value: {"$date": value.isoformat()},
        )

        assert read_records(path) == [{"created": {"$date": "2024-01-31T12:00:00"}}]


@pytest.mark.unit
class TestReadRecords:
    """Tests for read_records."""

    def test_json_array(self, temp_dir: Path) -> None:
        path = temp_dir / "in.json"
        path.write_text('[{"id": 1}, {"id": 2}]', encoding="utf-8")

        assert read_records(path) == [{"id": 1}, {"id": 2}]

    def test_json_single_object(self, temp_dir: Path) -> None:
        path = temp_dir / "in.json"
        path.write_text('{"id": 1}', encoding="utf-8")

        assert read_records(path) == [{"id": 1}]

    def test_json_object_hook(self, temp_dir: Path) -> None:
        path = temp_dir / "in.json"
        path.write_text('[{"n": {"$int": "5"}}]', encoding="utf-8")

        def hook(obj: dict) -> object:
            return int(obj["$int"]) if "$int" in obj else obj

        assert read_records(path, object_hook=hook) == [{"n": 5}]

    def test_csv_empty_cells_become_none(self, temp_dir: Path) -> None:
        path = temp_dir / "in.csv"
        path.write_text("id,name\n1,Ada\n2,\n", encoding="utf-8")

        assert read_records(path) == [{"id": 1, "name": "Ada"}, {"id": 2, "name": None}]

    def test_csv_cells_that_are_not_json_stay_text(self, temp_dir: Path) -> None:
        path = temp_dir / "in.csv"
        path.write_text("zip,note\n02139,{broken\n", encoding="utf-8")

        assert read_records(path) == [{"zip": "02139", "note": "{broken"}]

    def test_csv_object_hook(self, temp_dir: Path) -> None:
        path = temp_dir / "in.csv"
        path.write_text('n\n"{""$int"": ""5""}"\n', encoding="utf-8")

        def hook(obj: dict) -> object:
            return int(obj["$int"]) if "$int" in obj else obj

        assert read_records(path, object_hook=hook) == [{"n": 5}]

    def test_csv_row_with_extra_cells(self, temp_dir: Path) -> None:
        path = temp_dir / "in.csv"
        path.write_text("id,name\n1,Ada\n2,Grace,extra\n", encoding="utf-8")

        with pytest.raises(RecordFileError, match="Line 3 of in.csv has more cells than the header"):
            read_records(path)

    def test_csv_row_with_missing_cells(self, temp_dir: Path) -> None:
        path = temp_dir / "in.csv"
        path.write_text("id,name\n1\n", encoding="utf-8")

        assert read_records(path) == [{"id": 1, "name": None}]

    def test_csv_round_trip(self, temp_dir: Path) -> None:
        records = [
            {"id": 1, "name": "Ada", "active": True, "score": 9.5, "tags": ["navy"], "zip": "007", "code": "42", "note": None},
            {"id": 2, "name": "", "active": False, "score": -1, "tags": [], "zip": "02139", "code": "null", "note": {"ok": False}},
        ]

        path = write_records(temp_dir / "rt.csv", records, ExportFormat.CSV)

        assert read_records(path) == records

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(RecordFileError, match="not found"):
            read_records(temp_dir / "missing.json")

    def test_malformed_json(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(RecordFileError):
            read_records(path)

    @pytest.mark.parametrize("content", ["42", '["a", "b"]', '[{"id": 1}, 2]'])
    def test_rejects_non_object_items(self, temp_dir: Path, content: str) -> None:
        path = temp_dir / "bad.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(RecordFileError):
            read_records(path)
