"""Data models for the data table (hypercube) snapshot."""

import math
from typing import Optional

from pydantic import BaseModel, Field, model_validator


def format_number(value: float) -> str:
    """Format a number the way the host displays it (no trailing .0)."""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return str(value)


class Cell(BaseModel):
    """A single cell of the data table."""

    text: Optional[str] = None  # Display text
    num: Optional[float] = None  # Numeric value, if any

    @property
    def display_value(self) -> str:
        """Display text, falling back to the formatted number."""
        if self.text:
            return self.text
        if self.num is not None and not math.isnan(self.num):
            return format_number(self.num)
        return ""

    @property
    def numeric_value(self) -> float:
        """Numeric content coerced to float, 0 when not numeric."""
        if self.num is not None and not math.isnan(self.num):
            return float(self.num)
        if self.text:
            try:
                value = float(self.text)
            except ValueError:
                return 0.0
            return value if not math.isnan(value) else 0.0
        return 0.0


class ColumnInfo(BaseModel):
    """Descriptor of a dimension or measure column."""

    title: str  # Fallback title shown to users
    expression: Optional[str] = None  # Field definition or measure expression


class DataTable(BaseModel):
    """Snapshot of the data table: dimensions first, then measures."""

    dimensions: list[ColumnInfo] = Field(default_factory=list)
    measures: list[ColumnInfo] = Field(default_factory=list)
    rows: list[list[Cell]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_row_width(self) -> "DataTable":
        width = self.width
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells, expected {width} "
                    f"({len(self.dimensions)} dimensions + {len(self.measures)} measures)"
                )
        return self

    @property
    def width(self) -> int:
        return len(self.dimensions) + len(self.measures)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def column_titles(self) -> list[str]:
        """All column titles in row order."""
        return [d.title for d in self.dimensions] + [m.title for m in self.measures]

    def find_dimension(self, name: str) -> Optional[int]:
        """
        Find a dimension column index by title.

        Exact matches win over case-insensitive ones; among equals, the first
        column wins.

        Args:
            name: The dimension title to look for

        Returns:
            Column index, or None if no dimension has that title
        """
        for index, dim in enumerate(self.dimensions):
            if dim.title == name:
                return index
        folded = name.lower()
        for index, dim in enumerate(self.dimensions):
            if dim.title.lower() == folded:
                return index
        return None

    def find_measure(self, name: str) -> Optional[int]:
        """Find a measure's row offset by title (exact first, then case-insensitive)."""
        for index, measure in enumerate(self.measures):
            if measure.title == name:
                return len(self.dimensions) + index
        folded = name.lower()
        for index, measure in enumerate(self.measures):
            if measure.title.lower() == folded:
                return len(self.dimensions) + index
        return None

    def column(self, index: int) -> list[Cell]:
        """All cells in one column."""
        return [row[index] for row in self.rows]

    def distinct_values(self, index: int) -> list[str]:
        """Distinct non-empty display values of a column, in first-seen order."""
        seen: dict[str, None] = {}
        for cell in self.column(index):
            value = cell.display_value
            if value and value not in seen:
                seen[value] = None
        return list(seen)

    def dimension_summary(self, index: int, limit: int) -> str:
        """First `limit` distinct values of a dimension joined for prompt text."""
        return ", ".join(self.distinct_values(index)[:limit])

    def measure_summary(self, index: int, limit: int) -> str:
        """First `limit` numeric values of a measure joined for prompt text."""
        values = [cell.numeric_value for cell in self.column(index)[:limit]]
        return ", ".join(format_number(v) for v in values)
