"""Tiered matching of placeholder names against catalog fields."""

import logging
from typing import Optional

from ..config import settings
from ..placeholders.models import Placeholder
from .catalog import FieldCatalog
from .models import FieldDescriptor, FieldMapping

logger = logging.getLogger(__name__)

EXACT_SCORE = 100
CONTAINS_SCORE = 80
PREFIX_SCORE = 60
FIRST_WORD_SCORE = 40


class FieldMatcher:
    """
    Score placeholder names against catalog fields.

    Tiers, highest first:
      100 - names equal (case-insensitive)
       80 - field name contains the placeholder name
       60 - field name starts with the placeholder name
       40 - placeholder name contains the field name's first word

    The first field reaching the best tier wins, so ties go to catalog
    order (dimensions before measures).
    """

    def __init__(self, auto_map_threshold: Optional[int] = None):
        self.auto_map_threshold = (
            auto_map_threshold if auto_map_threshold is not None else settings.auto_map_threshold
        )

    def score(self, field_name: str, candidate: str) -> int:
        """
        Score one candidate field name for a placeholder name.

        Args:
            field_name: Placeholder field name
            candidate: Catalog field name

        Returns:
            Confidence from 0 to 100
        """
        wanted = field_name.lower()
        available = candidate.lower()
        if not wanted:
            return 0

        if available == wanted:
            return EXACT_SCORE
        if wanted in available:
            return CONTAINS_SCORE
        if available.startswith(wanted):
            return PREFIX_SCORE

        words = available.split()
        if words and words[0] in wanted:
            return FIRST_WORD_SCORE
        return 0

    def match(
        self, field_name: str, catalog: FieldCatalog
    ) -> tuple[Optional[FieldDescriptor], int]:
        """
        Find the best catalog field for a placeholder name.

        Args:
            field_name: Placeholder field name
            catalog: Available fields

        Returns:
            (best field or None, confidence)
        """
        best: Optional[FieldDescriptor] = None
        best_score = 0

        for candidate in catalog.all_fields():
            score = self.score(field_name, candidate.name)
            if score > best_score:
                best, best_score = candidate, score
                if score == EXACT_SCORE:
                    break

        return best, best_score

    def is_auto_mappable(self, mapping: FieldMapping) -> bool:
        """True when a mapping is unresolved and confidently suggested."""
        return (
            mapping.mapped_field is None
            and not mapping.keep_as_text
            and mapping.suggested_field is not None
            and mapping.confidence >= self.auto_map_threshold
        )

    def suggest(self, placeholders: list[Placeholder], catalog: FieldCatalog) -> list[FieldMapping]:
        """
        Build an unmapped suggestion for each detected placeholder.

        Args:
            placeholders: Detected placeholders (one entry per occurrence)
            catalog: Available fields

        Returns:
            One FieldMapping per placeholder, mapped_field left unset
        """
        suggestions = []
        for placeholder in placeholders:
            best, confidence = self.match(placeholder.field_name, catalog)
            suggestions.append(
                FieldMapping(
                    placeholder=placeholder.raw,
                    field_name=placeholder.field_name,
                    source=placeholder.source,
                    suggested_field=best,
                    confidence=confidence,
                )
            )
            logger.debug(
                f"Suggested {best.name if best else None} for {placeholder.raw} "
                f"({confidence}%)"
            )
        return suggestions


def suggest_mappings(placeholders: list[Placeholder], catalog: FieldCatalog) -> list[FieldMapping]:
    """Suggest a field for each placeholder."""
    return FieldMatcher().suggest(placeholders, catalog)
