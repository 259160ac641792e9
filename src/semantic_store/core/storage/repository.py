"""Entry repository combining a record backend with a vector index."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any

from semantic_store.core.errors import CollaboratorUnavailable, SemanticStoreError
from semantic_store.core.models import Entry, SimilarityCandidate, parse_timestamp
from semantic_store.core.storage.base import EntryStore, SearchFilter
from semantic_store.core.storage.vector import VectorStore

if TYPE_CHECKING:
    from semantic_store.core.storage.memory import MemoryStorageBackend
    from semantic_store.core.storage.redis import RedisStorageBackend

    StorageType = MemoryStorageBackend | RedisStorageBackend

logger = logging.getLogger(__name__)


@contextmanager
def _backend_call(operation: str) -> Iterator[None]:
    """Re-raise backend exceptions as CollaboratorUnavailable."""
    try:
        yield
    except SemanticStoreError:
        raise
    except Exception as exc:
        logger.error("Storage backend failure during %s: %s", operation, exc)
        raise CollaboratorUnavailable(operation, str(exc)) from exc


def _creation_score(entry: Entry) -> float:
    return entry.created_at.timestamp() if entry.created_at else 0.0


class EntryRepository(EntryStore):
    """Storage collaborator backed by two stores.

    - StorageBackend: full entry records keyed by id, scored by creation time
    - VectorStore: primary embeddings plus filterable metadata

    Writes go to the vector store first and are rolled back there if the
    record write fails. Vectors whose records have disappeared are pruned
    when a search encounters them.

    Example:
        from semantic_store.core.storage import (
            ChromaVectorStore, EntryRepository, MemoryStorageBackend,
        )

        repository = EntryRepository(
            storage=MemoryStorageBackend(),
            vector_store=ChromaVectorStore(collection_name="semantic_search"),
        )
    """

    def __init__(self, storage: StorageType, vector_store: VectorStore) -> None:
        self._storage = storage
        self._vector_store = vector_store

    @property
    def storage(self) -> Any:
        return self._storage

    @property
    def vector_store(self) -> VectorStore:
        return self._vector_store

    def _index(self, entry: Entry) -> None:
        self._vector_store.add(
            ids=[entry.id],
            embeddings=[entry.primary_embedding],
            metadata=[entry.vector_metadata()],
        )

    def _discard_vectors(self, ids: list[str]) -> None:
        try:
            self._vector_store.delete(ids=ids)
        except Exception as exc:
            logger.warning("Could not remove vectors %s: %s", ids, exc)

    def store(self, entry: Entry) -> bool:
        with _backend_call("store"):
            if self._storage.exists(entry.id):
                return False
            self._index(entry)
            try:
                added = self._storage.add(entry.id, entry.to_dict(), score=_creation_score(entry))
            except Exception:
                self._discard_vectors([entry.id])
                raise
            if not added:
                self._discard_vectors([entry.id])
            return added

    def fetch_by_id(self, entry_id: str) -> Entry | None:
        with _backend_call("fetch"):
            data = self._storage.get(entry_id)
        return Entry.from_dict(data) if data is not None else None

    def replace(self, entry_id: str, entry: Entry) -> Entry | None:
        with _backend_call("replace"):
            existing = self._storage.get(entry_id)
            if existing is None:
                return None

            created_at = parse_timestamp(existing.get("created_at"))
            updated_at = entry.updated_at
            if created_at and updated_at and updated_at < created_at:
                updated_at = created_at
            replacement = dataclasses.replace(
                entry, id=entry_id, created_at=created_at, updated_at=updated_at
            )

            self._vector_store.delete(ids=[entry_id])
            try:
                self._index(replacement)
                self._storage.set(
                    entry_id, replacement.to_dict(), score=_creation_score(replacement)
                )
            except Exception:
                self._discard_vectors([entry_id])
                self._index(Entry.from_dict(existing))
                raise
        return replacement

    def delete_by_id(self, entry_id: str) -> bool:
        with _backend_call("delete"):
            deleted = self._storage.delete(entry_id)
            self._vector_store.delete(ids=[entry_id])
        return deleted

    def search_similar(
        self, vector: list[float], filter: SearchFilter | None, limit: int
    ) -> list[SimilarityCandidate]:
        stale: list[str] = []
        candidates: list[SimilarityCandidate] = []
        with _backend_call("search"):
            hits = self._vector_store.search(query_embedding=vector, k=limit, filter=filter)
            for entry_id, similarity in hits:
                data = self._storage.get(entry_id)
                if data is None:
                    stale.append(entry_id)
                    continue
                candidates.append(
                    SimilarityCandidate(entry=Entry.from_dict(data), similarity=similarity)
                )

        if stale:
            logger.info("Pruning %d vectors without records", len(stale))
            self._discard_vectors(stale)
        return candidates

    def iter_entries(self) -> Iterator[Entry]:
        with _backend_call("list"):
            records = [self._storage.get(key) for key in list(self._storage.keys())]
        return iter([Entry.from_dict(r) for r in records if r is not None])

    def count_created_since(self, since: datetime) -> int:
        with _backend_call("count"):
            return self._storage.count_by_score(since.timestamp())

    def size(self) -> int:
        with _backend_call("count"):
            return self._storage.size()

    def ping(self) -> None:
        with _backend_call("ping"):
            self._storage.ping()
            self._vector_store.ping()

    def clear(self) -> None:
        """Remove every entry and vector."""
        with _backend_call("clear"):
            self._storage.clear()
            self._vector_store.clear()

    def close(self) -> None:
        """Clean up resources."""
        self._storage.close()
        self._vector_store.close()

    def __enter__(self) -> "EntryRepository":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
        return None
