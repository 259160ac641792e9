"""
Semantic Store

A metadata-rich store for semantic entries with boosted similarity search.

Features:
- Exhaustive payload validation with field-level violations
- Threshold cut plus recency, preference and boost-factor re-ranking
- Redis record storage with a ZSET index of creation times
- Pluggable record storage and vector store backends
"""

__version__ = "0.1.0"

from semantic_store.core.config import StoreConfig
from semantic_store.core.errors import (
    CollaboratorUnavailable,
    EntryConflict,
    SemanticStoreError,
    UnsupportedOperation,
    ValidationFailure,
    Violation,
)
from semantic_store.core.models import Entry, RankedHit, RankedResults
from semantic_store.core.ranking import rank
from semantic_store.core.service import SemanticSearchService

__all__ = [
    "SemanticSearchService",
    "StoreConfig",
    "Entry",
    "RankedHit",
    "RankedResults",
    "rank",
    "SemanticStoreError",
    "ValidationFailure",
    "Violation",
    "CollaboratorUnavailable",
    "UnsupportedOperation",
    "EntryConflict",
]
