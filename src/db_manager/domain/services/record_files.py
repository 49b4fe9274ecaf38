"""Reading and writing record files for export and import.

File Formats:
    JSON: a single array of objects, indented. A backend may pass a
        ``default`` hook for values the json module cannot encode and an
        ``object_hook`` to restore them on import.
    CSV: a header row holding the union of field names in first-appearance
        order, then one row per record. Cells hold JSON text (numbers,
        booleans, nested values, and strings that would otherwise read back
        as JSON) or a bare string, and None is an empty cell. On import each
        cell is decoded as JSON when it parses and kept as text otherwise.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from db_manager.domain.errors import InvalidRecordError, RecordFileError
from db_manager.domain.value_objects import ExportFormat

JsonDefault = Callable[[Any], Any]
JsonObjectHook = Callable[[dict[str, Any]], Any]


def collect_fieldnames(records: Iterable[Mapping[str, Any]]) -> list[str]:
    """Union of record keys, in first-appearance order."""
    seen: dict[str, None] = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)
    return list(seen)


def parse_record(text: str, *, object_hook: JsonObjectHook | None = None) -> dict[str, Any]:
    """Parse one record typed as a JSON object.

    Raises:
        InvalidRecordError: If the text is not valid JSON or not an object.
    """
    try:
        value = json.loads(text, object_hook=object_hook)
    except ValueError as e:
        raise InvalidRecordError(f"Invalid JSON: {e}") from e
    if not isinstance(value, dict):
        raise InvalidRecordError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _csv_cell(value: Any, default: JsonDefault | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        # Quote strings that would otherwise import as None or a non-string
        if value == "" or _is_json(value):
            return json.dumps(value, ensure_ascii=False)
        return value
    return json.dumps(value, default=default or str, ensure_ascii=False)


def _csv_value(cell: str | None, object_hook: JsonObjectHook | None) -> Any:
    if cell is None or cell == "":
        return None
    try:
        return json.loads(cell, object_hook=object_hook)
    except ValueError:
        return cell


def write_records(
    path: str | Path,
    records: Sequence[Mapping[str, Any]],
    fmt: ExportFormat,
    *,
    default: JsonDefault | None = None,
    indent: int = 2,
) -> Path:
    """Write records to a file in the given format.

    Args:
        path: Destination file; parent directories are created.
        records: Records to write.
        fmt: Output format.
        default: Encoder for values the json module cannot serialize.
        indent: JSON indentation.

    Returns:
        The path written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    if fmt is ExportFormat.JSON:
        with target.open("w", encoding="utf-8") as fh:
            json.dump(list(records), fh, indent=indent, default=default or str, ensure_ascii=False)
            fh.write("\n")
    elif fmt is ExportFormat.CSV:
        fieldnames = collect_fieldnames(records)
        with target.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=fieldnames)
            writer.writeheader()
            for record in records:
                writer.writerow({key: _csv_cell(record.get(key), default) for key in fieldnames})
    else:
        raise RecordFileError(f"Unsupported export format: {fmt}")

    return target


def read_records(
    path: str | Path,
    *,
    object_hook: JsonObjectHook | None = None,
) -> list[dict[str, Any]]:
    """Read records from a JSON or CSV file.

    The format is chosen by suffix: ``.csv`` is CSV, anything else is JSON.

    Raises:
        RecordFileError: If the file is missing, malformed, or does not
            hold objects.
    """
    source = Path(path).expanduser()
    if not source.is_file():
        raise RecordFileError(f"Import file not found: {source}")

    if source.suffix.lower() == ".csv":
        return _read_csv(source, object_hook)
    return _read_json(source, object_hook)


def _read_csv(source: Path, object_hook: JsonObjectHook | None) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    try:
        with source.open("r", encoding="utf-8", newline="") as fh:
            reader = csv.DictReader(fh)
            if not reader.fieldnames:
                return []
            for row in reader:
                # DictReader files surplus cells under the None key
                if None in row:
                    raise RecordFileError(
                        f"Line {reader.line_num} of {source.name} has more cells than the header"
                    )
                records.append(
                    {key: _csv_value(value, object_hook) for key, value in row.items()}
                )
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise RecordFileError(f"Failed to read CSV file {source}: {e}") from e
    return records


def _read_json(source: Path, object_hook: JsonObjectHook | None) -> list[dict[str, Any]]:
    try:
        with source.open("r", encoding="utf-8") as fh:
            data = json.load(fh, object_hook=object_hook)
    except (OSError, ValueError) as e:
        raise RecordFileError(f"Failed to read JSON file {source}: {e}") from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise RecordFileError(
            f"JSON import file must hold an array of objects, got {type(data).__name__}"
        )

    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise RecordFileError(
                f"Item {position} in {source.name} is {type(item).__name__}, expected an object"
            )
    return data
