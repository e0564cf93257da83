"""Table API blueprint for parsing, ranking and serving stored tables."""

import json
import logging
from numbers import Number
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from flask import Blueprint, Response, jsonify, request
from jsonschema import ValidationError

from askalot_table.core import TableLoader
from askalot_table.core.csv_codec import parse_csv
from askalot_table.core.json_codec import table_from_records
from askalot_table.errors import TableParseError
from askalot_table.models.table import SparseTable


def row_total(values: List[Any]) -> float:
    """Sum the numeric values of a row, skipping absent and non-numeric cells."""
    return sum(v for v in values if isinstance(v, Number) and not isinstance(v, bool))


def table_from_payload(payload: Dict[str, Any]) -> SparseTable:
    """
    Build a table from a request body.

    Accepts either {"csv": str, "overwrite": bool} or
    {"json": str | list, "row_key": str}.

    Raises:
        ValueError: If the body names neither form or lacks row_key
        TableParseError: If the CSV is malformed
        ValidationError: If the records don't match the schema
    """
    if 'csv' in payload:
        overwrite = payload.get('overwrite', True)
        if not isinstance(overwrite, bool):
            raise ValueError("overwrite must be a boolean")
        return parse_csv(payload['csv'], overwrite=overwrite)

    if 'json' in payload:
        row_key = payload.get('row_key')
        if not row_key:
            raise ValueError("row_key is required with json input")
        records = payload['json']
        if isinstance(records, str):
            records = json.loads(records)
        return table_from_records(records, row_key)

    raise ValueError("Request body must contain 'csv' or 'json'")


def create_table_blueprint(
    table_dir: Optional[str | Path] = None,
    schema_path: Optional[str | Path] = None,
    url_prefix: str = "/api/table",
    table_dir_resolver: Optional[Callable[[], Optional[str | Path]]] = None
) -> Blueprint:
    """
    Create table API blueprint.

    Args:
        table_dir: Static directory containing table files (used if table_dir_resolver not provided)
        schema_path: Path to a JSON schema for record files
        url_prefix: URL prefix for the blueprint
        table_dir_resolver: Optional callable returning the table directory for the current request.
                            Takes precedence over static table_dir.

    Returns:
        Flask blueprint with table endpoints
    """
    blueprint = Blueprint('table', __name__, url_prefix=url_prefix)
    logger = logging.getLogger(__name__)

    def _get_loader() -> TableLoader:
        resolved_table_dir = table_dir_resolver() if table_dir_resolver else table_dir
        return TableLoader(
            table_dir=resolved_table_dir,
            schema_path=schema_path,
            logger=logger
        )

    def _validation_error(e: ValidationError):
        return jsonify({
            "valid": False,
            "validation_error": {
                "message": e.message,
                "path": list(e.absolute_path),
                "schema_path": list(e.absolute_schema_path)
            }
        }), 400

    def _parse_error(e: TableParseError):
        return jsonify({"error": str(e), "kind": type(e).__name__}), 400

    @blueprint.route('/files', methods=['GET'])
    def list_files():
        """
        List available table files.

        Returns:
            JSON with list of filenames
        """
        try:
            files = _get_loader().list_available_files()
            return jsonify({
                "files": files,
                "count": len(files)
            }), 200
        except Exception as e:
            logger.error(f"Error listing table files: {e}")
            return jsonify({"error": str(e)}), 500

    @blueprint.route('/csv', methods=['GET'])
    def get_csv():
        """
        Return the CSV form of a stored table.

        Query parameters:
            name: Table filename
            row_key: Row key field for JSON/YAML files (default "id")
        """
        name = request.args.get('name')
        if not name:
            return jsonify({"error": "name parameter is required"}), 400

        try:
            table = _get_loader().load_from_file(name, request.args.get('row_key', 'id'))
            return Response(table.to_csv(), mimetype='text/csv'), 200
        except FileNotFoundError as e:
            logger.error(f"Table file not found: {e}")
            return jsonify({"error": f"Table file not found: {name}"}), 404
        except TableParseError as e:
            logger.warning(f"Table {name} failed to parse: {e}")
            return _parse_error(e)
        except ValidationError as e:
            logger.warning(f"Table {name} failed schema validation: {e.message}")
            return _validation_error(e)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.error(f"Error serving table {name}: {e}")
            return jsonify({"error": str(e)}), 500

    def _with_table(handler: Callable[[SparseTable], Any]):
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "JSON object body is required"}), 400

        try:
            table = table_from_payload(payload)
            return handler(table)
        except TableParseError as e:
            logger.warning(f"CSV parse failed: {e}")
            return _parse_error(e)
        except ValidationError as e:
            logger.warning(f"Record validation failed: {e.message}")
            return _validation_error(e)
        except ValueError as e:
            # includes json.JSONDecodeError
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.error(f"Error processing table: {e}")
            return jsonify({"error": str(e)}), 500

    @blueprint.route('/parse', methods=['POST'])
    def parse_table():
        """
        Parse CSV or JSON records and return the table snapshot.

        Returns:
            JSON with title, rows, cols, stored cells and default
        """
        return _with_table(lambda table: (jsonify(table.to_dict()), 200))

    @blueprint.route('/rank', methods=['POST'])
    def rank_rows():
        """
        Rank rows by the sum of their numeric values, highest first.

        Returns:
            JSON with the ordered row keys
        """
        return _with_table(lambda table: (jsonify({"rows": table.rows_descending(row_total)}), 200))

    return blueprint
