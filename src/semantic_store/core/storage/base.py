"""Interface the service requires from its storage collaborator."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from semantic_store.core.models import Entry, SimilarityCandidate


@dataclass
class SearchFilter:
    """Filter for similarity search.

    Attributes:
        user_id: Only entries owned by this user
        content_types: Only entries whose content_type is one of these
        tags: Only entries carrying at least one of these tags
    """

    user_id: str | None = None
    content_types: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.user_id is None and not self.content_types and not self.tags

    def matches(self, metadata: dict[str, Any]) -> bool:
        """Check indexed metadata against the filter."""
        if self.user_id is not None and metadata.get("user_id") != self.user_id:
            return False
        if self.content_types and metadata.get("content_type") not in self.content_types:
            return False
        if self.tags and not set(self.tags) & set(metadata.get("tags") or []):
            return False
        return True


class EntryStore(ABC):
    """Storage and similarity-search collaborator.

    Not-found outcomes are reported through return values; backend failures
    raise CollaboratorUnavailable.
    """

    @abstractmethod
    def store(self, entry: Entry) -> bool:
        """Write a new entry. Returns False if the identifier is taken."""
        ...

    @abstractmethod
    def fetch_by_id(self, entry_id: str) -> Entry | None:
        ...

    @abstractmethod
    def replace(self, entry_id: str, entry: Entry) -> Entry | None:
        """Substitute an entry, keeping its stored created_at.

        Returns the stored replacement, or None if the entry does not exist.
        """
        ...

    @abstractmethod
    def delete_by_id(self, entry_id: str) -> bool:
        ...

    @abstractmethod
    def search_similar(
        self, vector: list[float], filter: SearchFilter | None, limit: int
    ) -> list[SimilarityCandidate]:
        """Filtered top-K cosine similarity search, most similar first."""
        ...

    @abstractmethod
    def iter_entries(self) -> Iterator[Entry]:
        ...

    @abstractmethod
    def count_created_since(self, since: datetime) -> int:
        ...

    @abstractmethod
    def ping(self) -> None:
        """Raise CollaboratorUnavailable if the backends cannot be reached."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...
