"""Placeholder-to-field mapping: catalog, matching, working set and persistence."""

from .models import (
    FieldKind,
    FieldDescriptor,
    FieldMapping,
    ResolutionStats,
    SessionState,
    MappingNotFoundError,
)
from .catalog import FieldCatalog, get_available_fields
from .matcher import FieldMatcher, suggest_mappings
from .store import MappingStore, merge_mappings, compute_stats
from .storage import KeyValueStore, MemoryKeyValueStore, SQLiteKeyValueStore
from .session import SessionPersistence
from .view import MappingOverview, build_overview

__all__ = [
    "FieldKind",
    "FieldDescriptor",
    "FieldMapping",
    "ResolutionStats",
    "SessionState",
    "MappingNotFoundError",
    "FieldCatalog",
    "get_available_fields",
    "FieldMatcher",
    "suggest_mappings",
    "MappingStore",
    "merge_mappings",
    "compute_stats",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "SessionPersistence",
    "MappingOverview",
    "build_overview",
]
