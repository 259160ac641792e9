"""Exact in-memory vector index.

Brute-force cosine similarity over every stored vector. Useful for tests and
small deployments where running ChromaDB is unnecessary.
"""

import threading
from typing import Any

from semantic_store.core.storage.base import SearchFilter
from semantic_store.core.storage.vector import VectorStore
from semantic_store.core.utils import cosine_similarity


class MemoryVectorStore(VectorStore):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._vectors: dict[str, list[float]] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def add(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        metadata: list[dict[str, Any]],
    ) -> None:
        with self._lock:
            for entry_id, embedding, meta in zip(ids, embeddings, metadata):
                if entry_id in self._vectors:
                    raise ValueError(f"ID {entry_id} already exists in vector store")
                self._vectors[entry_id] = list(embedding)
                self._metadata[entry_id] = dict(meta)

    def search(
        self,
        query_embedding: list[float],
        k: int = 10,
        filter: SearchFilter | None = None,
    ) -> list[tuple[str, float]]:
        with self._lock:
            scored = [
                (entry_id, cosine_similarity(query_embedding, vector))
                for entry_id, vector in self._vectors.items()
                if filter is None or filter.matches(self._metadata[entry_id])
            ]
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:k]

    def delete(self, ids: list[str]) -> None:
        with self._lock:
            for entry_id in ids:
                self._vectors.pop(entry_id, None)
                self._metadata.pop(entry_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._vectors)

    def clear(self) -> None:
        with self._lock:
            self._vectors.clear()
            self._metadata.clear()

    def close(self) -> None:
        pass
