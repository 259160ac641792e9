"""Core components for the semantic store."""

from semantic_store.core.config import (
    ApiSettings,
    ChromaConfig,
    RedisConfig,
    StorageBackendConfig,
    StoreConfig,
    VectorStoreConfig,
)
from semantic_store.core.models import Entry, RankedHit, RankedResults, SearchMetadata
from semantic_store.core.service import SemanticSearchService

__all__ = [
    "SemanticSearchService",
    "StoreConfig",
    "ApiSettings",
    "ChromaConfig",
    "RedisConfig",
    "StorageBackendConfig",
    "VectorStoreConfig",
    "Entry",
    "RankedHit",
    "RankedResults",
    "SearchMetadata",
]
