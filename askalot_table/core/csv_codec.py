"""
CSV form of a SparseTable.

Layout:
    <title>,<col1>,<col2>,...
    <row1>,<cell>,<cell>,...

Fields are separated by plain commas with no quoting. Commas inside keys or
values are stripped on output, so such keys do not survive a round-trip.
Cells are written as JSON literals and read back as integers.
"""

import json
import logging
import re
from typing import Any

from askalot_table.errors import CellTypeError, RowShapeError
from askalot_table.models.table import NO_VALUE, SparseTable

logger = logging.getLogger(__name__)

SEPARATOR = ","
INTEGER = re.compile(r"[+-]?[0-9]+")


def _field(text: Any) -> str:
    return str(text).replace(SEPARATOR, "")


def _cell(value: Any) -> str:
    if value is NO_VALUE:
        return ""
    return _field(json.dumps(value, ensure_ascii=False, separators=(",", ":")))


def to_csv(table: SparseTable) -> str:
    """
    Render a table as CSV text.

    Every known row is written, with each cell rendered through table.get(),
    so registered-but-empty cells print the default value. Each line,
    including the last, ends with a newline.
    """
    # With no columns the header is the bare title, no trailing separator, so it
    # parses back into a column-less table.
    lines = [SEPARATOR.join([_field(table.title)] + [_field(col) for col in table.cols])]
    for row in table.rows:
        fields = [_field(row)] + [_cell(table.get(row, col)) for col in table.cols]
        lines.append(SEPARATOR.join(fields))
    return "".join(line + "\n" for line in lines)


def parse_csv(text: str, overwrite: bool = True) -> SparseTable:
    """
    Parse CSV text into a new table with default value 0.

    Args:
        text: CSV text; the first line holds the title and column keys
        overwrite: Store cells with set() if True, otherwise with set_or_add()
                   so repeated row keys accumulate

    Returns:
        Parsed table titled with the first header field

    Raises:
        RowShapeError: If a data row's field count differs from the header's
        CellTypeError: If a cell is not an integer
    """
    text = text.strip()
    if not text:
        return SparseTable(0, "")

    lines = [line.rstrip("\r").split(SEPARATOR) for line in text.split("\n")]
    headers = lines[0]
    table = SparseTable(0, headers[0])

    for r in range(1, len(lines)):
        cells = lines[r]
        if len(cells) != len(headers):
            raise RowShapeError(r, len(cells), len(headers))

        row_key = cells[0]
        for c in range(1, len(headers)):
            # ASCII digits only; int() alone also takes underscores and other scripts' digits
            text_value = cells[c].strip()
            if not INTEGER.fullmatch(text_value):
                raise CellTypeError(r, c, cells[c])
            value = int(text_value)

            if overwrite:
                table.set(row_key, headers[c], value)
            else:
                table.set_or_add(row_key, headers[c], value)

    logger.debug(f"Parsed CSV table '{table.title}': {len(table.rows)} rows, {len(table.cols)} cols")
    return table
