"""Table data models."""

from askalot_table.models.table import SparseTable, NO_VALUE, TableSnapshot

__all__ = ["SparseTable", "NO_VALUE", "TableSnapshot"]
