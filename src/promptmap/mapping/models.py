"""Data models for placeholder-to-field mapping."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..placeholders.models import PromptSource


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class FieldKind(str, Enum):
    """Kind of a data field."""

    DIMENSION = "dimension"
    MEASURE = "measure"


class FieldDescriptor(BaseModel):
    """A named field available in the data table."""

    name: str
    kind: FieldKind
    expression: str  # Field definition (dimension) or aggregation (measure)


class FieldMapping(BaseModel):
    """Resolution state of one distinct placeholder."""

    placeholder: str  # Literal token, e.g. "{{Region}}"; the mapping key
    field_name: str  # Trimmed inner text of the token
    mapped_field: Optional[str] = None  # Field the user (or auto-map) chose
    confidence: int = 0  # 0-100 match score of suggested_field
    source: PromptSource = PromptSource.USER
    keep_as_text: bool = False  # Deliberately left as literal text
    suggested_field: Optional[FieldDescriptor] = None

    @property
    def is_resolved(self) -> bool:
        return self.mapped_field is not None or self.keep_as_text


class ResolutionStats(BaseModel):
    """Completion counts over a mapping list."""

    total: int = 0
    mapped: int = 0
    kept_as_text: int = 0
    unresolved: int = 0

    @property
    def resolved(self) -> int:
        return self.mapped + self.kept_as_text

    @property
    def complete(self) -> bool:
        return self.total > 0 and self.unresolved == 0


class SessionState(BaseModel):
    """Editing session persisted between visits."""

    system_prompt: str = ""
    user_prompt: str = ""
    field_mappings: list[FieldMapping] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utc_now)


class MappingNotFoundError(Exception):
    """Exception raised when a placeholder has no mapping entry."""

    pass
