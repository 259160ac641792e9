"""Shared test fixtures."""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from semantic_store.core.config import StoreConfig, StorageBackendConfig, VectorStoreConfig
from semantic_store.core.service import SemanticSearchService
from semantic_store.core.storage import EntryRepository, MemoryStorageBackend, MemoryVectorStore

DIMENSION = 768
FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def make_vector(*head: float, dimension: int = DIMENSION) -> list[float]:
    """A vector whose leading components are ``head`` and the rest zero."""
    return list(head) + [0.0] * (dimension - len(head))


def make_payload(**overrides: Any) -> dict[str, Any]:
    """A valid create payload with the given fields replaced."""
    payload: dict[str, Any] = {
        "user_id": USER_ID,
        "content_type": "journal",
        "title": "Morning walk",
        "content": "Walked along the river before work.",
        "primary_embedding": make_vector(1.0),
        "tags": ["walk", "river"],
    }
    payload.update(overrides)
    return payload


class FakeClock:
    """Settable clock for services under test."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def memory_config() -> StoreConfig:
    return StoreConfig(
        storage=StorageBackendConfig(backend_type="memory"),
        vector_store=VectorStoreConfig(store_type="memory"),
    )


def memory_repository() -> EntryRepository:
    return EntryRepository(storage=MemoryStorageBackend(), vector_store=MemoryVectorStore())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock: FakeClock) -> SemanticSearchService:
    return SemanticSearchService(memory_repository(), config=memory_config(), clock=clock)


@pytest.fixture
def chroma_collection_name() -> str:
    """Unique collection name so ChromaDB tests do not share state."""
    return f"test_entries_{uuid.uuid4().hex[:8]}"
