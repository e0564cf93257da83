"""Table file loader for CSV, JSON and YAML snapshots."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from askalot_table.core.csv_codec import parse_csv, to_csv
from askalot_table.core.json_codec import table_from_records
from askalot_table.models.table import SparseTable


class TableLoader:
    """
    Load tables from files and write CSV snapshots back.

    The parser is picked from the file suffix:
        .csv          CSV with integer cells
        .json         JSON array of flat records
        .yaml / .yml  YAML list of flat records

    Environment Variables:
        TABLE_DIR: Default directory containing table files
        TABLE_SCHEMA: Optional JSON schema applied to JSON and YAML record documents
    """

    SUPPORTED_SUFFIXES = ('.csv', '.json', '.yaml', '.yml')

    def __init__(
        self,
        table_dir: Optional[str | Path] = None,
        schema_path: Optional[str | Path] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize table loader.

        Args:
            table_dir: Directory containing table files. Falls back to TABLE_DIR env var.
            schema_path: Path to a JSON schema for record documents. Falls back to TABLE_SCHEMA env var.
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.table_dir = Path(table_dir) if table_dir else self._path_from_env('TABLE_DIR', Path("data/tables"))
        self.schema_path = Path(schema_path) if schema_path else self._path_from_env('TABLE_SCHEMA', must_exist=True)

        self.logger.info(f"TableLoader initialized with table_dir={self.table_dir}, schema_path={self.schema_path}")

    def _path_from_env(self, var: str, default: Optional[Path] = None, must_exist: bool = False) -> Optional[Path]:
        """
        Read a path setting from the environment.

        Args:
            var: Environment variable name
            default: Returned when the variable is unset
            must_exist: Treat a path that doesn't exist as unset (returns None)
        """
        value = os.environ.get(var)
        if not value:
            level = logging.WARNING if default is not None else logging.DEBUG
            self.logger.log(level, f"{var} environment variable not set, using {default}")
            return default

        path = Path(value)
        if must_exist and not path.exists():
            self.logger.warning(f"{var} path does not exist: {value}")
            return None
        return path

    def _load_schema(self) -> Optional[Dict[str, Any]]:
        if not self.schema_path or not self.schema_path.exists():
            return None
        with open(self.schema_path, 'r', encoding='utf-8') as schema_file:
            return json.load(schema_file)

    def load_from_file(self, filename: str, row_key_field: str = "id", overwrite: bool = True) -> SparseTable:
        """
        Load a table file relative to table_dir.

        Args:
            filename: Name of the table file
            row_key_field: Row key field for JSON and YAML records
            overwrite: CSV only, see parse_csv()

        Returns:
            Parsed table
        """
        return self.load_from_path(self.get_file_path(filename), row_key_field, overwrite)

    def load_from_path(self, file_path: str | Path, row_key_field: str = "id", overwrite: bool = True) -> SparseTable:
        """
        Load a table from a full path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the suffix is not supported
            TableParseError: If CSV content is malformed
            ValidationError: If record content doesn't match the schemas
        """
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise ValueError(f"Unsupported table file type: {file_path.name}")

        if not file_path.exists():
            raise FileNotFoundError(f"Table file not found: {file_path}")

        content = file_path.read_text(encoding='utf-8')
        self.logger.info(f"Loaded table file: {file_path}")

        if suffix == '.csv':
            return parse_csv(content, overwrite=overwrite)

        if suffix == '.json':
            records = json.loads(content)
        else:
            records = yaml.safe_load(content)
        return table_from_records(records, row_key_field, schema=self._load_schema())

    def save_csv(self, table: SparseTable, filename: str) -> Path:
        """
        Write the CSV form of a table into table_dir.

        Returns:
            Path of the written file
        """
        file_path = self.get_file_path(filename)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(to_csv(table), encoding='utf-8')
        self.logger.info(f"Saved table '{table.title}' to {file_path}")
        return file_path

    def list_available_files(self) -> List[str]:
        """
        List all supported table files in table_dir.

        Returns:
            Sorted list of filenames
        """
        if not self.table_dir.exists():
            self.logger.warning(f"Table directory does not exist: {self.table_dir}")
            return []

        files = [f.name for f in self.table_dir.iterdir()
                 if f.is_file() and f.suffix.lower() in self.SUPPORTED_SUFFIXES]
        self.logger.info(f"Found {len(files)} table files")

        return sorted(files)

    def get_file_path(self, filename: str) -> Path:
        """
        Resolve a filename inside table_dir.

        Raises:
            ValueError: If the resolved path falls outside table_dir
        """
        base = self.table_dir.resolve()
        file_path = (base / filename).resolve()
        if not file_path.is_relative_to(base):
            raise ValueError(f"Table file is outside the table directory: {filename}")
        return file_path
