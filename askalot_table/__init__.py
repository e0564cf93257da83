"""
Askalot Table Module

Sparse two-dimensional tables keyed by (row, column) with CSV and JSON snapshots.
"""

from askalot_table.models import SparseTable, NO_VALUE
from askalot_table.errors import TableParseError, RowShapeError, CellTypeError
from askalot_table.core import TableLoader, parse_csv, to_csv, parse_json
from askalot_table.api import create_table_blueprint

__version__ = "1.0.0"

__all__ = [
    # Models
    "SparseTable",
    "NO_VALUE",
    # Errors
    "TableParseError",
    "RowShapeError",
    "CellTypeError",
    # Serialization
    "TableLoader",
    "parse_csv",
    "to_csv",
    "parse_json",
    # API
    "create_table_blueprint",
]
