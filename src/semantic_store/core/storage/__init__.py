"""Storage collaborator for semantic entries.

- EntryStore: Interface the service needs (store/fetch/replace/delete/search)
- EntryRepository: EntryStore built from a record backend and a vector store
- MemoryStorageBackend: In-memory record storage for development/testing
- RedisStorageBackend: Redis-based record storage for production
- VectorStore: Abstract interface for vector similarity search
- ChromaVectorStore: ChromaDB vector store implementation
- MemoryVectorStore: Exact in-memory cosine index
"""

from semantic_store.core.storage.base import EntryStore, SearchFilter
from semantic_store.core.storage.chroma import ChromaVectorStore
from semantic_store.core.storage.config import (
    create_repository,
    create_storage_backend,
    create_vector_store,
)
from semantic_store.core.storage.memory import MemoryStorageBackend
from semantic_store.core.storage.memory_vector import MemoryVectorStore
from semantic_store.core.storage.redis import RedisStorageBackend
from semantic_store.core.storage.repository import EntryRepository
from semantic_store.core.storage.vector import VectorStore

__all__ = [
    "EntryStore",
    "SearchFilter",
    "EntryRepository",
    "MemoryStorageBackend",
    "RedisStorageBackend",
    "VectorStore",
    "ChromaVectorStore",
    "MemoryVectorStore",
    "create_repository",
    "create_storage_backend",
    "create_vector_store",
]
