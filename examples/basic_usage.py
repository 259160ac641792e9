"""
Example: Storing entries and running a boosted search without the HTTP API.

Uses the in-memory backends, so nothing needs to be running.
"""

import random

from semantic_store import SemanticSearchService
from semantic_store.core.config import StorageBackendConfig, StoreConfig, VectorStoreConfig
from semantic_store.core.storage import create_repository

USER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def random_embedding(seed: int) -> list[float]:
    rng = random.Random(seed)
    return [rng.uniform(-1.0, 1.0) for _ in range(768)]


def main():
    config = StoreConfig(
        storage=StorageBackendConfig(backend_type="memory"),
        vector_store=VectorStoreConfig(store_type="memory"),
    )

    with SemanticSearchService(create_repository(config), config=config) as service:
        print("=== Creating entries ===")

        base = random_embedding(1)
        service.create_entry(
            {
                "user_id": USER_ID,
                "content_type": "journal",
                "title": "Morning walk",
                "content": "Walked along the river before work.",
                "primary_embedding": base,
                "tags": ["walk", "river"],
                "search_metadata": {"user_preference_alignment": 0.9},
            }
        )
        service.create_entry(
            {
                "user_id": USER_ID,
                "content_type": "journal",
                "title": "Evening walk",
                "content": "Same river, different light.",
                "primary_embedding": [v + 0.2 * n for v, n in zip(base, random_embedding(2))],
                "tags": ["walk"],
                "search_metadata": {"boost_factor": 1.5},
            }
        )

        print("=== Searching ===")

        results = service.search(
            {
                "embedding": base,
                "user_id": USER_ID,
                "similarity_threshold": 0.5,
                "boost_recent": True,
                "boost_preferences": True,
            }
        )
        for hit in results.results:
            print(f"\n{hit.entry.title}")
            print(f"Similarity: {hit.similarity:.3f} (raw {hit.original_similarity:.3f})")

        print("\n=== Store Statistics ===")
        for key, value in service.stats().items():
            print(f"{key}: {value}")


if __name__ == "__main__":
    main()
