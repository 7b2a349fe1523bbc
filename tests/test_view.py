"""Tests for the mapping panel view model."""

from promptmap.mapping import FieldKind, FieldMapping, build_overview
from promptmap.mapping.models import FieldDescriptor, ResolutionStats
from promptmap.mapping.view import ConfidenceBand, confidence_band, status_message


def suggestion(placeholder: str, field: str, confidence: int, **kwargs) -> FieldMapping:
    return FieldMapping(
        placeholder=placeholder,
        field_name=placeholder.strip("{}"),
        confidence=confidence,
        suggested_field=FieldDescriptor(name=field, kind=FieldKind.DIMENSION, expression=field),
        **kwargs,
    )


class TestStatusMessage:
    """Test the one-line status message."""

    def test_no_placeholders(self):
        assert status_message(ResolutionStats()) == "Add {{field}} placeholders to your prompts"

    def test_nothing_resolved(self):
        assert status_message(ResolutionStats(total=3, unresolved=3)) == "3 fields need mapping"

    def test_partially_resolved(self):
        stats = ResolutionStats(total=3, mapped=1, kept_as_text=1, unresolved=1)
        assert status_message(stats) == "2/3 fields resolved - 1 remaining"

    def test_complete(self):
        stats = ResolutionStats(total=2, mapped=2)
        assert status_message(stats) == "All 2 fields mapped and ready to save"


class TestConfidenceBand:
    """Test confidence banding."""

    def test_bands(self):
        assert confidence_band(100) == ConfidenceBand.HIGH
        assert confidence_band(80) == ConfidenceBand.HIGH
        assert confidence_band(60) == ConfidenceBand.MEDIUM
        assert confidence_band(40) == ConfidenceBand.LOW


class TestBuildOverview:
    """Test the full view model."""

    def test_groups_and_entries(self):
        """Test each entry lands in exactly one group."""
        mappings = [
            suggestion("{{Region}}", "Region", 100, mapped_field="Region"),
            suggestion("{{Cust}}", "Customer", 80),
            suggestion("{{Sales Amount}}", "Sales", 40),
            FieldMapping(placeholder="{{Profit}}", field_name="Profit"),
            FieldMapping(placeholder="{{Note}}", field_name="Note", keep_as_text=True),
        ]

        overview = build_overview(mappings)

        assert overview.groups.mapped == ["{{Region}}", "{{Note}}"]
        assert overview.groups.high_confidence == ["{{Cust}}"]
        assert overview.groups.medium_confidence == ["{{Sales Amount}}"]
        assert overview.groups.needs_manual_mapping == ["{{Profit}}"]
        assert overview.auto_suggested == 2
        assert overview.stats.total == 5
        assert overview.status_message == "2/5 fields resolved - 3 remaining"

        statuses = {entry.placeholder: entry.status for entry in overview.entries}
        assert statuses == {
            "{{Region}}": "mapped",
            "{{Cust}}": "unresolved",
            "{{Sales Amount}}": "unresolved",
            "{{Profit}}": "unresolved",
            "{{Note}}": "kept_as_text",
        }
        assert overview.entries[1].suggested_field == "Customer"
        assert overview.entries[1].band == ConfidenceBand.HIGH

    def test_empty(self):
        """Test the overview of an empty mapping list."""
        overview = build_overview([])
        assert overview.entries == []
        assert overview.status_message == "Add {{field}} placeholders to your prompts"
