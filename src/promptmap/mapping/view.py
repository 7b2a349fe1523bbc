"""Display-independent view model of the mapping state."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .models import FieldMapping, ResolutionStats
from .store import compute_stats


class ConfidenceBand(str, Enum):
    """Coarse confidence level used for display."""

    HIGH = "high"  # >= 80
    MEDIUM = "medium"  # >= 60
    LOW = "low"


class MappingEntryView(BaseModel):
    """Status of one mapping entry."""

    placeholder: str
    field_name: str
    source: str
    status: str  # "mapped", "kept_as_text" or "unresolved"
    mapped_field: Optional[str] = None
    suggested_field: Optional[str] = None
    confidence: int = 0
    band: ConfidenceBand = ConfidenceBand.LOW


class SuggestionGroups(BaseModel):
    """Placeholders grouped by what the user still has to do."""

    mapped: list[str] = Field(default_factory=list)
    high_confidence: list[str] = Field(default_factory=list)
    medium_confidence: list[str] = Field(default_factory=list)
    needs_manual_mapping: list[str] = Field(default_factory=list)


class MappingOverview(BaseModel):
    """Everything a mapping panel needs to render."""

    stats: ResolutionStats
    status_message: str
    entries: list[MappingEntryView] = Field(default_factory=list)
    groups: SuggestionGroups = Field(default_factory=SuggestionGroups)
    auto_suggested: int = 0


def confidence_band(confidence: int) -> ConfidenceBand:
    if confidence >= 80:
        return ConfidenceBand.HIGH
    if confidence >= 60:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW


def status_message(stats: ResolutionStats) -> str:
    """One-line completion status for the mapping panel."""
    if stats.total == 0:
        return "Add {{field}} placeholders to your prompts"
    if stats.resolved == 0:
        return f"{stats.total} fields need mapping"
    if stats.unresolved:
        return (
            f"{stats.resolved}/{stats.total} fields resolved - "
            f"{stats.unresolved} remaining"
        )
    return f"All {stats.total} fields mapped and ready to save"


def _entry_status(mapping: FieldMapping) -> str:
    if mapping.mapped_field is not None:
        return "mapped"
    if mapping.keep_as_text:
        return "kept_as_text"
    return "unresolved"


def build_overview(mappings: list[FieldMapping], auto_map_threshold: int = 80) -> MappingOverview:
    """
    Compute the mapping panel view model.

    Args:
        mappings: Current mapping list
        auto_map_threshold: Confidence counted as auto-suggestable

    Returns:
        MappingOverview with stats, message, per-entry status and groups
    """
    stats = compute_stats(mappings)
    groups = SuggestionGroups()
    entries = []

    for mapping in mappings:
        entries.append(
            MappingEntryView(
                placeholder=mapping.placeholder,
                field_name=mapping.field_name,
                source=mapping.source.value,
                status=_entry_status(mapping),
                mapped_field=mapping.mapped_field,
                suggested_field=mapping.suggested_field.name if mapping.suggested_field else None,
                confidence=mapping.confidence,
                band=confidence_band(mapping.confidence),
            )
        )

        if mapping.is_resolved:
            groups.mapped.append(mapping.placeholder)
        elif mapping.confidence >= auto_map_threshold and mapping.suggested_field:
            groups.high_confidence.append(mapping.placeholder)
        elif 40 <= mapping.confidence < auto_map_threshold:
            groups.medium_confidence.append(mapping.placeholder)
        else:
            groups.needs_manual_mapping.append(mapping.placeholder)

    auto_suggested = sum(
        1 for m in mappings if m.confidence >= auto_map_threshold and m.suggested_field
    )

    return MappingOverview(
        stats=stats,
        status_message=status_message(stats),
        entries=entries,
        groups=groups,
        auto_suggested=auto_suggested,
    )
