"""Table API endpoints."""

from askalot_table.api.table_blueprint import create_table_blueprint

__all__ = ["create_table_blueprint"]
