"""Semantic search service: validation, storage and ranking wired together."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, NoReturn

from semantic_store.core.config import StoreConfig
from semantic_store.core.errors import (
    EntryConflict,
    UnsupportedOperation,
    ValidationFailure,
    Violation,
)
from semantic_store.core.models import (
    Entry,
    EntryPage,
    RankedResults,
    generate_entry_id,
    utcnow,
)
from semantic_store.core.ranking import rank
from semantic_store.core.storage.base import EntryStore, SearchFilter
from semantic_store.core.validation import (
    EntrySchema,
    validate_entry,
    validate_entry_id,
    validate_replacement,
    validate_search_query,
    validate_user_id,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = ("created_at", "updated_at", "title")
SORT_ORDERS = ("asc", "desc")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _entry_from_record(
    record: EntrySchema, entry_id: str, created_at: datetime, updated_at: datetime
) -> Entry:
    data = record.to_record()
    data.update(id=entry_id, created_at=created_at, updated_at=updated_at)
    return Entry.from_dict(data)


def _sort_key(field: str) -> Callable[[Entry], Any]:
    if field == "title":
        return lambda entry: entry.title
    # entries without a timestamp sort as oldest
    return lambda entry: getattr(entry, field) or _OLDEST


class SemanticSearchService:
    """Entry lifecycle and similarity search over an injected collaborator.

    The service validates every payload before any storage call, so a
    rejected payload never causes a write. Not-found outcomes are returned
    as None/False; backend failures propagate as CollaboratorUnavailable.

    Example:
        from semantic_store.core.storage import create_repository

        config = StoreConfig()
        service = SemanticSearchService(create_repository(config), config=config)

        entry = service.create_entry({...})
        results = service.search({"embedding": [...], "boost_recent": True})
    """

    def __init__(
        self,
        repository: EntryStore,
        config: StoreConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or StoreConfig()
        self._repository = repository
        self._clock = clock or utcnow

    @property
    def repository(self) -> EntryStore:
        return self._repository

    def now(self) -> datetime:
        return self._clock()

    def create_entry(self, payload: Any) -> Entry:
        """Validate and store a new entry.

        Raises:
            ValidationFailure: If the payload violates the create schema
            EntryConflict: If the generated identifier is already taken
        """
        record = validate_entry(payload).unwrap()
        now = self.now()
        entry = _entry_from_record(record, generate_entry_id(), now, now)
        if not self._repository.store(entry):
            raise EntryConflict(entry.id)
        logger.info("Created entry %s (content_type=%s)", entry.id, entry.content_type)
        return entry

    def get_entry(self, entry_id: str) -> Entry | None:
        entry_id = validate_entry_id(entry_id)
        return self._repository.fetch_by_id(entry_id)

    def replace_entry(self, entry_id: str, payload: Any) -> Entry | None:
        """Replace an entry wholesale, keeping its id and created_at.

        Returns:
            The stored replacement, or None if the entry does not exist
        """
        entry_id = validate_entry_id(entry_id)
        record = validate_replacement(payload).unwrap()
        now = self.now()
        # created_at here is a placeholder; the repository keeps the stored value
        replacement = _entry_from_record(record, entry_id, now, now)
        stored = self._repository.replace(entry_id, replacement)
        if stored is None:
            logger.info("Replace skipped: entry %s not found", entry_id)
            return None
        logger.info("Replaced entry %s", entry_id)
        return stored

    def patch_entry(self, entry_id: str, payload: Any) -> NoReturn:
        """Partial updates are disabled; replacement is the only update path."""
        validate_entry_id(entry_id)
        raise UnsupportedOperation(
            "Partial update", "Use full replacement (PUT) instead."
        )

    def delete_entry(self, entry_id: str) -> bool:
        entry_id = validate_entry_id(entry_id)
        deleted = self._repository.delete_by_id(entry_id)
        if deleted:
            logger.info("Deleted entry %s", entry_id)
        return deleted

    def search(self, payload: Any) -> RankedResults:
        """Run a filtered similarity search and rank the hits."""
        query = validate_search_query(payload).unwrap()
        search_filter = SearchFilter(
            user_id=str(query.user_id) if query.user_id else None,
            content_types=list(query.content_type or []),
            tags=list(query.tags or []),
        )
        candidates = self._repository.search_similar(
            query.embedding, search_filter, query.limit
        )
        results = rank(
            candidates,
            threshold=query.similarity_threshold,
            boost=query.boost,
            now=self.now(),
        )
        logger.debug(
            "Search returned %d/%d hits above %.2f",
            results.total,
            len(candidates),
            query.similarity_threshold,
        )
        return results

    def list_user_entries(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        content_type: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> EntryPage:
        """Page through one user's entries."""
        violations: list[Violation] = []
        try:
            user_id = validate_user_id(user_id)
        except ValidationFailure as exc:
            violations.extend(exc.violations)
        if page < 1:
            violations.append(Violation("page", "page: must be at least 1", page))
        if not 1 <= limit <= 100:
            violations.append(Violation("limit", "limit: must be between 1 and 100 inclusive", limit))
        if sort_by not in SORT_FIELDS:
            violations.append(
                Violation("sort_by", f"sort_by: must be one of {', '.join(SORT_FIELDS)}", sort_by)
            )
        if sort_order not in SORT_ORDERS:
            violations.append(
                Violation("sort_order", "sort_order: must be 'asc' or 'desc'", sort_order)
            )
        if violations:
            raise ValidationFailure(violations)

        entries = [
            entry
            for entry in self._repository.iter_entries()
            if entry.user_id == user_id
            and (content_type is None or entry.content_type == content_type)
        ]
        entries.sort(key=_sort_key(sort_by), reverse=sort_order == "desc")
        start = (page - 1) * limit
        return EntryPage(
            entries=entries[start : start + limit],
            page=page,
            limit=limit,
            total=len(entries),
        )

    def list_entries_by_type(
        self,
        content_type: str,
        limit: int | None = None,
        user_id: str | None = None,
    ) -> list[Entry]:
        """Newest entries with the given content type."""
        if not content_type or not content_type.strip():
            raise ValidationFailure(
                [Violation("content_type", "content_type: must not be empty", content_type)]
            )
        if user_id is not None:
            user_id = validate_user_id(user_id)
        limit = limit or self.config.type_listing_limit
        entries = [
            entry
            for entry in self._repository.iter_entries()
            if entry.content_type == content_type
            and (user_id is None or entry.user_id == user_id)
        ]
        entries.sort(key=_sort_key("created_at"), reverse=True)
        return entries[:limit]

    def stats(self) -> dict[str, Any]:
        """Get store statistics."""
        now = self.now()
        entries = list(self._repository.iter_entries())
        distribution = Counter(entry.content_type for entry in entries)
        since = now - timedelta(days=self.config.recent_window_days)
        return {
            "total_entries": len(entries),
            "recent_entries": self._repository.count_created_since(since),
            "content_type_distribution": [
                {"content_type": name, "count": count}
                for name, count in distribution.most_common()
            ],
            "last_updated": now.isoformat(),
        }

    def health(self) -> dict[str, Any]:
        """Report whether the storage collaborator is reachable."""
        checked_at = self.now().isoformat()
        try:
            self._repository.ping()
        except Exception as exc:
            logger.warning("Health check failed: %s", exc)
            return {"status": "unhealthy", "connected": False, "error": str(exc), "timestamp": checked_at}
        return {
            "status": "healthy",
            "connected": True,
            "collection": self.config.collection_name,
            "timestamp": checked_at,
        }

    def close(self) -> None:
        self._repository.close()

    def __enter__(self) -> "SemanticSearchService":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
        return None
