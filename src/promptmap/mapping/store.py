"""Working set of placeholder-to-field mappings for one editing session."""

import logging
from typing import Optional

from ..placeholders.scanner import PlaceholderScanner
from .catalog import FieldCatalog
from .matcher import FieldMatcher
from .models import FieldMapping, MappingNotFoundError, ResolutionStats

logger = logging.getLogger(__name__)


def _index_by_placeholder(mappings: list[FieldMapping]) -> dict[str, FieldMapping]:
    """Index mappings by placeholder string, first entry wins."""
    index: dict[str, FieldMapping] = {}
    for mapping in mappings:
        index.setdefault(mapping.placeholder, mapping)
    return index


def merge_mappings(
    detected: list[FieldMapping],
    persisted: list[FieldMapping],
    auto_map: bool = True,
    matcher: Optional[FieldMatcher] = None,
) -> list[FieldMapping]:
    """
    Reconcile fresh suggestions with previously saved mappings.

    1. One entry per distinct placeholder string, in detection order.
    2. A saved non-null mapped_field (or keep_as_text) is copied over.
    3. Entries still unresolved are auto-mapped when confidently suggested.

    Merging the result with itself changes nothing.

    Args:
        detected: Suggestions for the current scan
        persisted: Saved mappings from an earlier scan or session
        auto_map: Apply step 3
        matcher: Matcher deciding auto-mappability (default threshold otherwise)

    Returns:
        New FieldMapping list; inputs are not modified
    """
    matcher = matcher or FieldMatcher()
    prior = _index_by_placeholder(persisted)

    merged = []
    for placeholder, entry in _index_by_placeholder(detected).items():
        working = entry.model_copy(deep=True)
        saved = prior.get(placeholder)
        if saved is not None:
            if saved.mapped_field is not None:
                working.mapped_field = saved.mapped_field
                working.keep_as_text = False
            elif saved.keep_as_text:
                working.mapped_field = None
                working.keep_as_text = True

        if auto_map and matcher.is_auto_mappable(working):
            working.mapped_field = working.suggested_field.name
            logger.debug(f"Auto-mapped {placeholder} -> {working.mapped_field}")

        merged.append(working)

    return merged


def compute_stats(mappings: list[FieldMapping]) -> ResolutionStats:
    """Count mapped, kept-as-text and unresolved entries."""
    mapped = sum(1 for m in mappings if m.mapped_field is not None)
    kept = sum(1 for m in mappings if m.mapped_field is None and m.keep_as_text)
    return ResolutionStats(
        total=len(mappings),
        mapped=mapped,
        kept_as_text=kept,
        unresolved=len(mappings) - mapped - kept,
    )


class MappingStore:
    """
    Authoritative mapping list for an open editing session.

    Owned by whoever has the session open and passed around explicitly.
    Recomputing from the prompts is idempotent, so every edit can simply
    call refresh() again.
    """

    def __init__(
        self,
        matcher: Optional[FieldMatcher] = None,
        scanner: Optional[PlaceholderScanner] = None,
        persisted: Optional[list[FieldMapping]] = None,
    ):
        """
        Initialize the store.

        Args:
            matcher: Field matcher (created if not provided)
            scanner: Placeholder scanner (created if not provided)
            persisted: Mappings loaded from durable storage, if any
        """
        self.matcher = matcher or FieldMatcher()
        self.scanner = scanner or PlaceholderScanner()
        self._persisted: list[FieldMapping] = list(persisted or [])
        self._mappings: dict[str, FieldMapping] = {}
        # Placeholders the user cleared; auto-map leaves these alone
        self._cleared: set[str] = set()

    @property
    def mappings(self) -> list[FieldMapping]:
        return list(self._mappings.values())

    def __len__(self) -> int:
        return len(self._mappings)

    def __contains__(self, placeholder: str) -> bool:
        return placeholder in self._mappings

    def load(self, persisted: list[FieldMapping]):
        """Replace the saved mappings consulted for placeholders not yet seen."""
        self._persisted = list(persisted)

    def get(self, placeholder: str) -> FieldMapping:
        """Get the mapping for a placeholder string."""
        try:
            return self._mappings[placeholder]
        except KeyError:
            raise MappingNotFoundError(f"No mapping for placeholder '{placeholder}'") from None

    def refresh(
        self, system_prompt: str, user_prompt: str, catalog: FieldCatalog
    ) -> list[FieldMapping]:
        """
        Rescan the prompts and rebuild the working set.

        Choices made in this session take precedence over saved ones.
        Placeholders no longer present in the prompts are dropped.

        Args:
            system_prompt: System prompt text
            user_prompt: User prompt text
            catalog: Available fields

        Returns:
            The rebuilt mapping list
        """
        placeholders = self.scanner.detect(system_prompt, user_prompt)
        suggestions = self.matcher.suggest(placeholders, catalog)

        prior = _index_by_placeholder(self._persisted)
        prior.update(self._mappings)

        merged = merge_mappings(
            suggestions, list(prior.values()), auto_map=False, matcher=self.matcher
        )
        self._mappings = {m.placeholder: m for m in merged}
        self._cleared &= set(self._mappings)
        self.auto_map_high_confidence()

        logger.info(
            f"Refreshed mappings: {len(placeholders)} placeholders detected, "
            f"{len(self._mappings)} distinct"
        )
        return self.mappings

    def set_mapping(self, placeholder: str, field_name: Optional[str]) -> FieldMapping:
        """Map a placeholder to a field; None clears the mapping."""
        if field_name is None:
            return self.clear_mapping(placeholder)

        mapping = self.get(placeholder)
        mapping.mapped_field = field_name
        mapping.keep_as_text = False
        self._cleared.discard(placeholder)
        logger.info(f"Mapped {placeholder} -> {field_name}")
        return mapping

    def clear_mapping(self, placeholder: str) -> FieldMapping:
        """Return a placeholder to the unresolved state."""
        mapping = self.get(placeholder)
        mapping.mapped_field = None
        mapping.keep_as_text = False
        self._cleared.add(placeholder)
        logger.info(f"Cleared mapping for {placeholder}")
        return mapping

    def mark_keep_as_text(self, placeholder: str) -> FieldMapping:
        """Resolve a placeholder by leaving it as literal text."""
        mapping = self.get(placeholder)
        mapping.mapped_field = None
        mapping.keep_as_text = True
        self._cleared.discard(placeholder)
        logger.info(f"Keeping {placeholder} as text")
        return mapping

    def auto_map_high_confidence(self) -> int:
        """
        Apply confident suggestions to unresolved entries.

        Returns:
            Number of entries mapped
        """
        applied = 0
        for placeholder, mapping in self._mappings.items():
            if placeholder in self._cleared:
                continue
            if self.matcher.is_auto_mappable(mapping):
                mapping.mapped_field = mapping.suggested_field.name
                applied += 1
        if applied:
            logger.info(f"Auto-mapped {applied} placeholders")
        return applied

    def resolution_stats(self) -> ResolutionStats:
        return compute_stats(self.mappings)

    def export(self) -> list[FieldMapping]:
        """Deep copies of the current mappings, for persistence."""
        return [m.model_copy(deep=True) for m in self._mappings.values()]
