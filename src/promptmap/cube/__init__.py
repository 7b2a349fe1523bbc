"""Data table snapshot model and provider."""

from .models import Cell, ColumnInfo, DataTable, format_number
from .provider import DataTableProvider

__all__ = [
    "Cell",
    "ColumnInfo",
    "DataTable",
    "DataTableProvider",
    "format_number",
]
