"""Build tables from JSON arrays of flat records."""

import json
import logging
from typing import Any, Dict, List, Optional

from jsonschema import validate

from askalot_table.models.table import SparseTable

logger = logging.getLogger(__name__)


def records_schema(row_key_field: str) -> Dict[str, Any]:
    """JSON schema for an array of objects that all carry row_key_field."""
    return {
        "type": "array",
        "items": {
            "type": "object",
            "required": [row_key_field],
            "properties": {
                row_key_field: {"type": ["string", "number", "boolean"]}
            }
        }
    }


def table_from_records(
    records: Any,
    row_key_field: str,
    schema: Optional[Dict[str, Any]] = None
) -> SparseTable:
    """
    Validate decoded records and build a table from them.

    Args:
        records: Decoded document, expected to be a list of objects
        row_key_field: Field holding each record's row key
        schema: Optional extra JSON schema the document must also satisfy

    Raises:
        ValidationError: If the document is not an array of objects with row_key_field
    """
    validate(instance=records, schema=records_schema(row_key_field))
    if schema is not None:
        validate(instance=records, schema=schema)

    table = SparseTable.from_records(records, row_key_field)
    logger.debug(
        f"Built table from {len(records)} records keyed by '{row_key_field}': "
        f"{len(table.rows)} rows, {len(table.cols)} cols"
    )
    return table


def parse_json(text: str, row_key_field: str) -> SparseTable:
    """
    Parse a JSON array of flat records into a table without a default value.

    Column order follows the order fields are first seen across records.

    Raises:
        json.JSONDecodeError: If text is not valid JSON
        ValidationError: If the document is not an array of objects with row_key_field
    """
    records: List[Dict[str, Any]] = json.loads(text)
    return table_from_records(records, row_key_field)
