"""Errors raised while parsing table text."""


class TableParseError(ValueError):
    """Base class for CSV parse failures. No partial table is returned."""


class RowShapeError(TableParseError):
    """A data row has a different number of fields than the header."""

    def __init__(self, row_index: int, length: int, header_length: int):
        self.row_index = row_index
        self.length = length
        self.header_length = header_length
        super().__init__(
            f"Row {row_index}'s length ({length}) is unequal to the header's length ({header_length})."
        )


class CellTypeError(TableParseError):
    """A cell does not parse as an integer."""

    def __init__(self, row_index: int, col_index: int, text: str):
        self.row_index = row_index
        self.col_index = col_index
        self.text = text
        super().__init__(f"Cell {row_index},{col_index} = {text!r} is not a number.")
