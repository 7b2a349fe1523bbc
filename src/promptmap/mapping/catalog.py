"""Catalog of fields exposed by the data table."""

from pydantic import BaseModel, Field

from ..cube.models import DataTable
from .models import FieldDescriptor, FieldKind


class FieldCatalog(BaseModel):
    """Dimensions and measures available for mapping, in table order."""

    dimensions: list[FieldDescriptor] = Field(default_factory=list)
    measures: list[FieldDescriptor] = Field(default_factory=list)

    @classmethod
    def from_table(cls, table: DataTable) -> "FieldCatalog":
        """Project a data table's column descriptors into a catalog."""
        return cls(
            dimensions=[
                FieldDescriptor(
                    name=dim.title,
                    kind=FieldKind.DIMENSION,
                    expression=dim.expression or dim.title,
                )
                for dim in table.dimensions
            ],
            measures=[
                FieldDescriptor(
                    name=measure.title,
                    kind=FieldKind.MEASURE,
                    expression=measure.expression or measure.title,
                )
                for measure in table.measures
            ],
        )

    def all_fields(self) -> list[FieldDescriptor]:
        """Dimensions followed by measures."""
        return [*self.dimensions, *self.measures]

    def names(self) -> list[str]:
        return [field.name for field in self.all_fields()]

    def get(self, name: str):
        """First field with this exact name, or None."""
        return next((field for field in self.all_fields() if field.name == name), None)


def get_available_fields(table: DataTable) -> FieldCatalog:
    """Build the field catalog for a data table."""
    return FieldCatalog.from_table(table)
