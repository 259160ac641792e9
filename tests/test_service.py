"""Tests for SemanticSearchService."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from semantic_store.core.errors import (
    CollaboratorUnavailable,
    EntryConflict,
    UnsupportedOperation,
    ValidationFailure,
)
from semantic_store.core.service import SemanticSearchService

from conftest import FIXED_NOW, USER_ID, FakeClock, make_payload, make_vector

OTHER_USER = "0b5f1e2a-8c3d-4f6e-9a7b-1c2d3e4f5a6b"
UNKNOWN_ID = "00000000-0000-4000-8000-000000000000"


class TestEntryLifecycle:
    """Test cases for create/get/replace/delete."""

    def test_create_assigns_identity(self, service: SemanticSearchService) -> None:
        entry = service.create_entry(make_payload())
        assert entry.id
        assert entry.user_id == USER_ID
        assert entry.created_at == FIXED_NOW
        assert entry.updated_at == FIXED_NOW
        assert service.get_entry(entry.id) == entry

    def test_create_ignores_client_id(self, service: SemanticSearchService) -> None:
        entry = service.create_entry(make_payload(id=UNKNOWN_ID))
        assert entry.id != UNKNOWN_ID

    def test_create_rejects_invalid_payload(self, service: SemanticSearchService) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            service.create_entry(make_payload(primary_embedding=[0.1, 0.2]))
        assert exc_info.value.fields == ["primary_embedding"]
        assert service.repository.size() == 0

    def test_create_conflict(self, service: SemanticSearchService) -> None:
        with patch("semantic_store.core.service.generate_entry_id", return_value=UNKNOWN_ID):
            service.create_entry(make_payload())
            with pytest.raises(EntryConflict):
                service.create_entry(make_payload())

    def test_get_missing(self, service: SemanticSearchService) -> None:
        assert service.get_entry(UNKNOWN_ID) is None

    def test_get_invalid_id(self, service: SemanticSearchService) -> None:
        with pytest.raises(ValidationFailure):
            service.get_entry("abc")

    def test_replace_preserves_id_and_created_at(
        self, service: SemanticSearchService, clock: FakeClock
    ) -> None:
        entry = service.create_entry(make_payload())
        clock.now = FIXED_NOW + timedelta(hours=3)
        replaced = service.replace_entry(entry.id, make_payload(title="Evening walk", tags=[]))
        assert replaced.id == entry.id
        assert replaced.created_at == FIXED_NOW
        assert replaced.updated_at == clock.now
        assert replaced.tags == []
        assert service.get_entry(entry.id).title == "Evening walk"

    def test_failed_replacement_leaves_entry_untouched(
        self, service: SemanticSearchService
    ) -> None:
        entry = service.create_entry(make_payload())
        with pytest.raises(ValidationFailure):
            service.replace_entry(entry.id, {"title": "Only a title"})
        assert service.get_entry(entry.id) == entry

    def test_replace_missing(self, service: SemanticSearchService) -> None:
        assert service.replace_entry(UNKNOWN_ID, make_payload()) is None

    def test_patch_is_unsupported(self, service: SemanticSearchService) -> None:
        entry = service.create_entry(make_payload())
        with pytest.raises(UnsupportedOperation, match="Use full replacement"):
            service.patch_entry(entry.id, {"title": "x"})
        assert service.get_entry(entry.id) == entry

    def test_delete(self, service: SemanticSearchService) -> None:
        entry = service.create_entry(make_payload())
        assert service.delete_entry(entry.id)
        assert not service.delete_entry(entry.id)
        assert service.get_entry(entry.id) is None


class TestSearch:
    """Test cases for search()."""

    def test_search_threshold_and_filter(self, service: SemanticSearchService) -> None:
        close = service.create_entry(make_payload(title="close"))
        service.create_entry(make_payload(title="orthogonal", primary_embedding=make_vector(0.0, 1.0)))
        service.create_entry(make_payload(title="other user", user_id=OTHER_USER))

        results = service.search({"embedding": make_vector(1.0), "user_id": USER_ID})
        assert [hit.entry.id for hit in results.results] == [close.id]
        assert results.similarity_threshold == 0.7
        assert not results.boost_applied

    def test_search_content_type_and_tags(self, service: SemanticSearchService) -> None:
        service.create_entry(make_payload(title="journal"))
        task = service.create_entry(make_payload(title="task", content_type="task", tags=["work"]))

        by_type = service.search({"embedding": make_vector(1.0), "content_type": ["task"]})
        assert [hit.entry.id for hit in by_type.results] == [task.id]
        by_tag = service.search({"embedding": make_vector(1.0), "tags": ["work", "gym"]})
        assert [hit.entry.id for hit in by_tag.results] == [task.id]

    def test_search_with_recency_boost(
        self, service: SemanticSearchService, clock: FakeClock
    ) -> None:
        clock.now = FIXED_NOW - timedelta(days=30)
        old = service.create_entry(make_payload(title="old", primary_embedding=make_vector(0.8, 0.6)))
        clock.now = FIXED_NOW
        new = service.create_entry(make_payload(title="new", primary_embedding=make_vector(0.78, 0.6258)))

        plain = service.search({"embedding": make_vector(1.0)})
        assert [hit.entry.id for hit in plain.results] == [old.id, new.id]

        boosted = service.search({"embedding": make_vector(1.0), "boost_recent": True})
        assert [hit.entry.id for hit in boosted.results] == [new.id, old.id]
        assert boosted.boost_applied
        assert boosted.results[0].similarity > boosted.results[0].original_similarity

    def test_search_invalid_query(self, service: SemanticSearchService) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            service.search({"embedding": make_vector(1.0), "limit": 0})
        assert exc_info.value.fields == ["limit"]

    def test_search_empty_store(self, service: SemanticSearchService) -> None:
        assert service.search({"embedding": make_vector(1.0)}).total == 0


class TestListings:
    """Test cases for user and content-type listings."""

    def test_list_user_entries_paginates(
        self, service: SemanticSearchService, clock: FakeClock
    ) -> None:
        for i in range(5):
            clock.now = FIXED_NOW + timedelta(minutes=i)
            service.create_entry(make_payload(title=f"entry {i}"))
        service.create_entry(make_payload(user_id=OTHER_USER))

        page = service.list_user_entries(USER_ID, page=1, limit=2)
        assert [e.title for e in page.entries] == ["entry 4", "entry 3"]
        assert page.total == 5
        assert page.pages == 3

        last = service.list_user_entries(USER_ID, page=3, limit=2, sort_order="desc")
        assert [e.title for e in last.entries] == ["entry 0"]

        ascending = service.list_user_entries(USER_ID, limit=2, sort_order="asc")
        assert [e.title for e in ascending.entries] == ["entry 0", "entry 1"]

    def test_list_user_entries_content_type(self, service: SemanticSearchService) -> None:
        service.create_entry(make_payload())
        service.create_entry(make_payload(content_type="task"))
        page = service.list_user_entries(USER_ID, content_type="task")
        assert [e.content_type for e in page.entries] == ["task"]

    def test_list_user_entries_sort_by_title(self, service: SemanticSearchService) -> None:
        for title in ("b", "c", "a"):
            service.create_entry(make_payload(title=title))
        page = service.list_user_entries(USER_ID, sort_by="title", sort_order="asc")
        assert [e.title for e in page.entries] == ["a", "b", "c"]

    def test_list_user_entries_validation(self, service: SemanticSearchService) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            service.list_user_entries("bob", page=0, limit=500, sort_by="size", sort_order="up")
        assert exc_info.value.fields == ["user_id", "page", "limit", "sort_by", "sort_order"]

    def test_list_entries_by_type(
        self, service: SemanticSearchService, clock: FakeClock
    ) -> None:
        for i in range(3):
            clock.now = FIXED_NOW + timedelta(minutes=i)
            service.create_entry(make_payload(content_type="dream", title=f"dream {i}"))
        service.create_entry(make_payload(content_type="journal"))

        entries = service.list_entries_by_type("dream", limit=2)
        assert [e.title for e in entries] == ["dream 2", "dream 1"]
        assert len(service.list_entries_by_type("dream")) == 3
        assert service.list_entries_by_type("dream", user_id=OTHER_USER) == []

    def test_list_entries_by_type_empty_name(self, service: SemanticSearchService) -> None:
        with pytest.raises(ValidationFailure):
            service.list_entries_by_type("  ")


class TestStatsAndHealth:
    def test_stats(self, service: SemanticSearchService, clock: FakeClock) -> None:
        clock.now = FIXED_NOW - timedelta(days=10)
        service.create_entry(make_payload(content_type="journal"))
        clock.now = FIXED_NOW
        service.create_entry(make_payload(content_type="journal"))
        service.create_entry(make_payload(content_type="task"))

        stats = service.stats()
        assert stats["total_entries"] == 3
        assert stats["recent_entries"] == 2
        assert stats["content_type_distribution"] == [
            {"content_type": "journal", "count": 2},
            {"content_type": "task", "count": 1},
        ]
        assert stats["last_updated"] == FIXED_NOW.isoformat()

    def test_health(self, service: SemanticSearchService) -> None:
        health = service.health()
        assert health["status"] == "healthy"
        assert health["connected"]

    def test_health_unhealthy(self, service: SemanticSearchService) -> None:
        with patch.object(
            service.repository, "ping", side_effect=CollaboratorUnavailable("ping", "refused")
        ):
            health = service.health()
        assert health["status"] == "unhealthy"
        assert "refused" in health["error"]

    def test_backend_failure_propagates(self, service: SemanticSearchService) -> None:
        with patch.object(
            service.repository.storage, "get", side_effect=ConnectionError("down")
        ):
            with pytest.raises(CollaboratorUnavailable):
                service.get_entry(UNKNOWN_ID)
