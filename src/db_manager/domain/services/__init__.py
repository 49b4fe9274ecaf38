"""Domain services - backend-independent record handling.

Exports:
    Schema Inference:
        - infer_document_schema: First-seen field types of sampled documents
        - describe_value_type: Portable type name of one value

    Record Files:
        - write_records: Export records as CSV or JSON
        - read_records: Load records from CSV or JSON
        - collect_fieldnames: Union of record keys in first-seen order
        - parse_record: Parse one JSON object typed at a prompt
"""

from db_manager.domain.services.record_files import (
    collect_fieldnames,
    parse_record,
    read_records,
    write_records,
)
from db_manager.domain.services.schema_inference import (
    describe_value_type,
    infer_document_schema,
)

__all__ = [
    # Schema inference
    "infer_document_schema",
    "describe_value_type",
    # Record files
    "write_records",
    "read_records",
    "collect_fieldnames",
    "parse_record",
]
