import operator
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Tuple, Union

from typing_extensions import NotRequired, TypedDict


class _NoValue:
    """Marker for a cell whose row or column is not registered in the table."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NO_VALUE"

    def __reduce__(self):
        return (_NoValue, ())


NO_VALUE = _NoValue()


class TableSnapshot(TypedDict):
    """JSON-serializable view of a table, as returned by SparseTable.to_dict()."""
    title: str
    rows: List[Hashable]
    cols: List[Hashable]
    cells: List[List[Any]]  # [row, col, value] triples
    default: NotRequired[Any]


class SparseTable:
    """
    A sparse two-dimensional table keyed by (row, column) pairs.

    Row and column membership is tracked separately from stored cells, so a
    cell can be in one of three states:
        - set: a value was stored at (row, col), get() returns it
        - default: row and col are both known but nothing is stored,
          get() returns the table's default value
        - absent: row or col is unknown, get() returns NO_VALUE

    Rows and columns are kept in insertion order; sort_rows_descending()
    is the only operation that reorders them.
    """

    def __init__(self, default_value: Any = 0, title: str = ""):
        """
        Initialize an empty table.

        Args:
            default_value: Value read for known-but-unset cells. Pass NO_VALUE
                           for a table without a default.
            title: Label printed in the first header field of the CSV form
        """
        # dicts used as ordered sets
        self._rows: Dict[Hashable, None] = {}
        self._cols: Dict[Hashable, None] = {}
        self._data: Dict[Tuple[Hashable, Hashable], Any] = {}
        self._default = default_value
        self._title = title

    @property
    def title(self) -> str:
        return self._title

    @property
    def default_value(self) -> Any:
        return self._default

    @property
    def rows(self) -> Tuple[Hashable, ...]:
        """Known row keys in iteration order."""
        return tuple(self._rows)

    @property
    def cols(self) -> Tuple[Hashable, ...]:
        """Known column keys in iteration order."""
        return tuple(self._cols)

    def __len__(self):
        """Number of stored cells."""
        return len(self._data)

    def __contains__(self, key):
        if isinstance(key, tuple) and len(key) == 2:
            return self.has(*key)
        return False

    def __getitem__(self, key):
        row, col = self._split_key(key)
        return self.get(row, col)

    def __setitem__(self, key, value):
        row, col = self._split_key(key)
        self.set(row, col, value)

    def __delitem__(self, key):
        row, col = self._split_key(key)
        self.remove(row, col)

    @staticmethod
    def _split_key(key) -> Tuple[Hashable, Hashable]:
        if isinstance(key, tuple) and len(key) == 2:
            return key
        raise TypeError("Table index must be a (row, col) tuple.")

    def __repr__(self):
        return (f"<SparseTable title={self._title!r} rows={len(self._rows)} "
                f"cols={len(self._cols)} cells={len(self._data)}>")

    def __eq__(self, other):
        if not isinstance(other, SparseTable):
            return False
        return (self._title == other._title and
                self._default == other._default and
                list(self._rows) == list(other._rows) and
                list(self._cols) == list(other._cols) and
                self._data == other._data)

    # Cell access

    def set(self, row: Hashable, col: Hashable, value: Any) -> None:
        """Store value at (row, col), registering the row and column."""
        self._data[(row, col)] = value
        self._rows.setdefault(row, None)
        self._cols.setdefault(col, None)

    def set_or_add(
        self,
        row: Hashable,
        col: Hashable,
        value: Any,
        combine: Callable[[Any, Any], Any] = operator.add
    ) -> None:
        """
        Combine value into the stored cell, or set it if nothing is stored.

        Args:
            row: Row key
            col: Column key
            value: Value to store or combine
            combine: Called as combine(previous, value); numeric addition by default
        """
        if self.has(row, col):
            self.set(row, col, combine(self._data[(row, col)], value))
        else:
            self.set(row, col, value)

    def get(self, row: Hashable, col: Hashable) -> Any:
        """
        Read a cell.

        Returns:
            The stored value, the default value if both row and col are known,
            otherwise NO_VALUE. Use has() to tell a stored value from the default.
        """
        key = (row, col)
        if key in self._data:
            return self._data[key]
        if row in self._rows and col in self._cols:
            return self._default
        return NO_VALUE

    def has(self, row: Hashable, col: Hashable) -> bool:
        """True only if a value is stored at (row, col)."""
        return (row, col) in self._data

    def ensure_has_row(self, row: Hashable) -> None:
        self._rows.setdefault(row, None)

    def ensure_has_col(self, col: Hashable) -> None:
        self._cols.setdefault(col, None)

    def get_row(self, row: Hashable) -> Union[List[Any], "_NoValue"]:
        """Values of a known row across all columns, or NO_VALUE for an unknown row."""
        if row not in self._rows:
            return NO_VALUE
        return [self.get(row, col) for col in self._cols]

    def get_col(self, col: Hashable) -> Union[List[Any], "_NoValue"]:
        """Values of a known column across all rows, or NO_VALUE for an unknown column."""
        if col not in self._cols:
            return NO_VALUE
        return [self.get(row, col) for row in self._rows]

    # Removal

    def remove(self, row: Hashable, col: Hashable) -> None:
        """
        Delete the cell at (row, col) if stored.

        Afterwards the column is dropped if no row still stores a cell in it,
        then the row is dropped if no remaining column stores a cell in it.
        Both checks run even when nothing was stored at (row, col).
        """
        self._data.pop((row, col), None)

        if not any((r, col) in self._data for r in self._rows):
            self._cols.pop(col, None)

        if not any((row, c) in self._data for c in self._cols):
            self._rows.pop(row, None)

    def remove_row(self, row: Hashable) -> None:
        for col in list(self._cols):
            self.remove(row, col)

    def remove_col(self, col: Hashable) -> None:
        for row in list(self._rows):
            self.remove(row, col)

    # Ordering

    def rows_descending(self, score: Callable[[List[Any]], Any]) -> List[Hashable]:
        """
        Row keys ordered by score(get_row(row)), highest first.

        Rows are stable-sorted ascending and the result reversed, so rows with
        equal scores come out in reverse of their current order.
        """
        ordered = sorted(self._rows, key=lambda row: score(self.get_row(row)))
        ordered.reverse()
        return ordered

    def sort_rows_descending(self, score: Callable[[List[Any]], Any]) -> None:
        """Reorder the table's rows in place using rows_descending()."""
        self._rows = dict.fromkeys(self.rows_descending(score))

    # Serialization

    def to_dict(self) -> TableSnapshot:
        """
        Snapshot of the table suitable for JSON responses.

        Only stored cells are listed; the default is included when the table has one.
        """
        cells = [
            [row, col, self._data[(row, col)]]
            for row in self._rows
            for col in self._cols
            if (row, col) in self._data
        ]
        snapshot: TableSnapshot = {
            'title': self._title,
            'rows': list(self._rows),
            'cols': list(self._cols),
            'cells': cells,
        }
        if self._default is not NO_VALUE:
            snapshot['default'] = self._default
        return snapshot

    def to_csv(self) -> str:
        from askalot_table.core.csv_codec import to_csv
        return to_csv(self)

    @classmethod
    def parse(cls, csv: str, overwrite: bool = True) -> "SparseTable":
        """Build a table from CSV text. See askalot_table.core.csv_codec.parse_csv."""
        from askalot_table.core.csv_codec import parse_csv
        return parse_csv(csv, overwrite=overwrite)

    @classmethod
    def parse_json(cls, json_text: str, row_key_field: str) -> "SparseTable":
        """Build a table from a JSON array of flat records. See askalot_table.core.json_codec."""
        from askalot_table.core.json_codec import parse_json
        return parse_json(json_text, row_key_field)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        row_key_field: str
    ) -> "SparseTable":
        """
        Build a table from flat records.

        Each record's row_key_field value is its row key; every other field
        becomes a column. The table has no default value and is titled after
        row_key_field.

        Raises:
            KeyError: If a record lacks row_key_field
        """
        table = cls(NO_VALUE, row_key_field)
        for record in records:
            row_key = record[row_key_field]
            for col, value in record.items():
                if col == row_key_field:
                    continue
                table.set(row_key, col, value)
        return table
