"""Vector store interface for similarity search."""

from abc import ABC, abstractmethod
from typing import Any

from semantic_store.core.storage.base import SearchFilter


class VectorStore(ABC):
    """Abstract interface for vector storage backends.

    Metadata passed to add() holds the filterable fields of an entry:
    "user_id", "content_type" and "tags" (a list of strings).
    """

    @abstractmethod
    def add(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        metadata: list[dict[str, Any]],
    ) -> None:
        """Add entries to the vector store."""
        ...

    @abstractmethod
    def search(
        self,
        query_embedding: list[float],
        k: int = 10,
        filter: SearchFilter | None = None,
    ) -> list[tuple[str, float]]:
        """Search for similar embeddings.

        Returns (id, cosine similarity) pairs, most similar first.
        """
        ...

    @abstractmethod
    def delete(self, ids: list[str]) -> None:
        """Delete entries by ID."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""
        ...

    def ping(self) -> None:
        """Raise if the store cannot be reached."""
        self.count()

    @abstractmethod
    def close(self) -> None:
        """Clean up resources."""
        ...
