from dotenv import load_dotenv

from semantic_store.core import (
    ChromaConfig,
    RedisConfig,
    SemanticSearchService,
    StorageBackendConfig,
    StoreConfig,
    VectorStoreConfig,
)
from semantic_store.core.storage import create_repository


def example_memory_store():
    config = StoreConfig(
        storage=StorageBackendConfig(backend_type="memory"),
        vector_store=VectorStoreConfig(
            store_type="chroma",
            chroma=ChromaConfig(mode="ephemeral"),
            collection_name="my_entries",
        ),
    )

    service = SemanticSearchService(create_repository(config), config=config)
    print(service.health())
    service.close()


def example_redis_store():
    """Redis record storage with a ChromaDB server."""
    config = StoreConfig(
        collection_name="my_entries",
        storage=StorageBackendConfig(
            backend_type="redis",
            redis=RedisConfig(host="localhost", port=6379, db=0, password=None),
            prefix="my_app:",
        ),
        vector_store=VectorStoreConfig(
            store_type="chroma",
            chroma=ChromaConfig(mode="client", host="localhost", port=8000),
            collection_name="my_entries",
        ),
    )

    service = SemanticSearchService(create_repository(config), config=config)
    print(service.health())
    service.close()


def example_env_based_store():
    """Read backend settings from the environment or a .env file.

    Expected variables:
    - REDIS_URL=redis://localhost:6379/0
    - CHROMADB_MODE=client
    - CHROMADB_HOST=localhost
    - CHROMADB_PORT=8000
    """
    load_dotenv()
    config = StoreConfig(
        storage=StorageBackendConfig(backend_type="redis"),
        vector_store=VectorStoreConfig(store_type="chroma"),
    )

    service = SemanticSearchService(create_repository(config), config=config)
    print(service.stats())
    service.close()


if __name__ == "__main__":
    example_memory_store()
