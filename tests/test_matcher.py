"""Tests for field catalog and placeholder-to-field matching."""

import pytest

from promptmap.cube import ColumnInfo, DataTable
from promptmap.mapping import (
    FieldCatalog,
    FieldKind,
    FieldMapping,
    FieldMatcher,
    get_available_fields,
    suggest_mappings,
)
from promptmap.mapping.models import FieldDescriptor
from promptmap.placeholders import PromptSource, detect_placeholders


def make_catalog(dimensions: list[str], measures: list[str] = None) -> FieldCatalog:
    return FieldCatalog.from_table(
        DataTable(
            dimensions=[ColumnInfo(title=name) for name in dimensions],
            measures=[ColumnInfo(title=name) for name in measures or []],
        )
    )


class TestFieldCatalog:
    """Test catalog construction from a data table."""

    def test_from_table_keeps_order_and_kind(self, sample_table):
        """Test dimensions come before measures with the right kinds."""
        catalog = get_available_fields(sample_table)

        assert catalog.names() == ["Region", "Customer", "Sales"]
        assert [f.kind for f in catalog.all_fields()] == [
            FieldKind.DIMENSION,
            FieldKind.DIMENSION,
            FieldKind.MEASURE,
        ]

    def test_expression_is_carried_over(self, sample_catalog):
        """Test the column expression is exposed on the descriptor."""
        assert sample_catalog.get("Sales").expression == "Sum(Sales)"
        assert sample_catalog.get("Region").expression == "[Region]"

    def test_expression_defaults_to_title(self):
        """Test a column without an expression uses its title."""
        catalog = make_catalog(["Region"])
        assert catalog.get("Region").expression == "Region"

    def test_get_missing_field(self, sample_catalog):
        """Test get returns None for unknown names."""
        assert sample_catalog.get("Profit") is None

    def test_empty_table(self):
        """Test an empty table gives an empty catalog."""
        assert get_available_fields(DataTable()).all_fields() == []


class TestFieldMatcherScore:
    """Test the individual matching tiers."""

    @pytest.fixture
    def matcher(self):
        return FieldMatcher(auto_map_threshold=80)

    def test_exact_match_is_case_insensitive(self, matcher):
        """Test equal names score 100 regardless of case."""
        assert matcher.score("Region", "Region") == 100
        assert matcher.score("region", "REGION") == 100

    def test_contains(self, matcher):
        """Test a field containing the placeholder name scores 80."""
        assert matcher.score("Cust", "Customer") == 80
        assert matcher.score("sales", "Sum of Sales") == 80

    def test_first_word(self, matcher):
        """Test the field's first word inside the placeholder name scores 40."""
        assert matcher.score("Sales Amount", "Sales") == 40
        assert matcher.score("region_code", "Region Name") == 40

    def test_no_match(self, matcher):
        """Test unrelated names score 0."""
        assert matcher.score("Profit", "Region") == 0

    def test_empty_placeholder_name(self, matcher):
        """Test an empty placeholder name never matches."""
        assert matcher.score("", "Region") == 0

    def test_empty_candidate(self, matcher):
        """Test an empty field name has no first word to match."""
        assert matcher.score("Region", "") == 0


class TestFieldMatcherMatch:
    """Test best-field selection across a catalog."""

    def test_exact_match(self, sample_catalog):
        """Test an exact name match gives confidence 100."""
        best, confidence = FieldMatcher().match("Region", sample_catalog)
        assert best.name == "Region"
        assert confidence == 100

    def test_no_match_returns_none(self, sample_catalog):
        """Test that nothing is suggested below the lowest tier."""
        best, confidence = FieldMatcher().match("Profit", sample_catalog)
        assert best is None
        assert confidence == 0

    def test_ties_go_to_catalog_order(self):
        """Test the first field reaching the best tier wins."""
        catalog = make_catalog(["Total Sales", "Sales Region"])
        best, confidence = FieldMatcher().match("Sales", catalog)
        assert best.name == "Total Sales"
        assert confidence == 80

    def test_exact_beats_earlier_partial(self):
        """Test a later exact match replaces an earlier partial one."""
        catalog = make_catalog(["Sales Region"], ["Sales"])
        best, confidence = FieldMatcher().match("sales", catalog)
        assert best.name == "Sales"
        assert best.kind == FieldKind.MEASURE
        assert confidence == 100

    def test_empty_catalog(self):
        """Test matching against an empty catalog."""
        assert FieldMatcher().match("Region", FieldCatalog()) == (None, 0)


class TestSuggest:
    """Test suggestion building."""

    def test_suggest_one_per_placeholder(self, sample_catalog):
        """Test each detected placeholder gets an unmapped suggestion."""
        placeholders = detect_placeholders("Act as {{Role}}", "Show {{Region}} and {{Cust}}")
        suggestions = suggest_mappings(placeholders, sample_catalog)

        assert [s.placeholder for s in suggestions] == ["{{Role}}", "{{Region}}", "{{Cust}}"]
        assert all(s.mapped_field is None for s in suggestions)
        assert suggestions[0].suggested_field is None
        assert suggestions[0].confidence == 0
        assert suggestions[0].source == PromptSource.SYSTEM
        assert suggestions[1].suggested_field.name == "Region"
        assert suggestions[1].confidence == 100
        assert suggestions[2].suggested_field.name == "Customer"
        assert suggestions[2].confidence == 80


class TestIsAutoMappable:
    """Test the auto-map rule."""

    def _mapping(self, confidence: int, **kwargs) -> FieldMapping:
        return FieldMapping(
            placeholder="{{Region}}",
            field_name="Region",
            confidence=confidence,
            suggested_field=FieldDescriptor(
                name="Region", kind=FieldKind.DIMENSION, expression="Region"
            ),
            **kwargs,
        )

    def test_at_threshold(self):
        """Test confidence equal to the threshold is auto-mappable."""
        assert FieldMatcher(auto_map_threshold=80).is_auto_mappable(self._mapping(80))

    def test_below_threshold(self):
        """Test confidence below the threshold is not auto-mappable."""
        assert not FieldMatcher(auto_map_threshold=80).is_auto_mappable(self._mapping(60))

    def test_already_mapped(self):
        """Test mapped entries are left alone."""
        mapping = self._mapping(100, mapped_field="Customer")
        assert not FieldMatcher().is_auto_mappable(mapping)

    def test_kept_as_text(self):
        """Test keep-as-text entries are never auto-mapped."""
        mapping = self._mapping(100, keep_as_text=True)
        assert not FieldMatcher().is_auto_mappable(mapping)

    def test_without_suggestion(self):
        """Test entries without a suggested field are not auto-mappable."""
        mapping = FieldMapping(placeholder="{{X}}", field_name="X", confidence=100)
        assert not FieldMatcher().is_auto_mappable(mapping)
