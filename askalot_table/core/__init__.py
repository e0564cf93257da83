"""Table serialization and file loading."""

from askalot_table.core.csv_codec import parse_csv, to_csv
from askalot_table.core.json_codec import parse_json, table_from_records
from askalot_table.core.table_loader import TableLoader

__all__ = ["parse_csv", "to_csv", "parse_json", "table_from_records", "TableLoader"]
