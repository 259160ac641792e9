"""ChromaDB vector store implementation."""

from typing import Any

import chromadb
from chromadb.api import ClientAPI
from chromadb.config import Settings

from semantic_store.core.storage.base import SearchFilter
from semantic_store.core.storage.vector import VectorStore

# Chroma metadata values must be scalars, so each tag is indexed as its own flag.
TAG_KEY_PREFIX = "tag::"


def flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Convert entry metadata into Chroma-compatible scalar metadata."""
    flat = {
        "user_id": metadata["user_id"],
        "content_type": metadata["content_type"],
    }
    for tag in metadata.get("tags") or []:
        flat[f"{TAG_KEY_PREFIX}{tag}"] = True
    return flat


def build_where(filter: SearchFilter | None) -> dict[str, Any] | None:
    """Translate a SearchFilter into a Chroma ``where`` clause."""
    if filter is None or filter.is_empty():
        return None

    clauses: list[dict[str, Any]] = []
    if filter.user_id is not None:
        clauses.append({"user_id": filter.user_id})
    if filter.content_types:
        clauses.append({"content_type": {"$in": list(filter.content_types)}})
    if filter.tags:
        tag_clauses = [{f"{TAG_KEY_PREFIX}{tag}": True} for tag in filter.tags]
        clauses.append(tag_clauses[0] if len(tag_clauses) == 1 else {"$or": tag_clauses})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaVectorStore(VectorStore):
    """ChromaDB vector store for cosine similarity search."""

    def __init__(
        self,
        collection_name: str = "semantic_search",
        host: str | None = None,
        port: int | None = None,
        path: str | None = None,
        mode: str = "ephemeral",
    ) -> None:
        self._collection_name = collection_name
        self._host = host
        self._port = port
        self._path = path
        self._mode = mode
        self._client: ClientAPI | None = None
        self._collection: chromadb.Collection | None = None

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def get_client(self) -> ClientAPI:
        self._init_client()
        assert self._client is not None
        return self._client

    def get_collection(self) -> chromadb.Collection:
        self._init_client()
        assert self._collection is not None
        return self._collection

    def _init_client(self) -> None:
        if self._client is not None:
            return

        settings = Settings(anonymized_telemetry=False)

        if self._mode == "client" and self._host:
            self._client = chromadb.HttpClient(
                host=self._host,
                port=self._port or 8000,
                settings=settings,
            )
        elif self._mode == "persistent" and self._path:
            self._client = chromadb.PersistentClient(path=self._path, settings=settings)
        else:
            self._client = chromadb.Client(settings=settings)

        self._collection = self._client.get_or_create_collection(
            name=self._collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def add(
        self,
        ids: list[str],
        embeddings: list[list[float]],
        metadata: list[dict[str, Any]],
    ) -> None:
        collection = self.get_collection()
        collection.add(
            ids=ids,
            embeddings=embeddings,
            metadatas=[flatten_metadata(m) for m in metadata],
        )

    def search(
        self,
        query_embedding: list[float],
        k: int = 10,
        filter: SearchFilter | None = None,
    ) -> list[tuple[str, float]]:
        collection = self.get_collection()
        if collection.count() == 0:
            return []
        results = collection.query(
            query_embeddings=[query_embedding],
            n_results=k,
            where=build_where(filter),
            include=["distances"],
        )
        if not results.get("ids") or not results["ids"][0]:
            return []
        distances = results["distances"][0] if results.get("distances") else []
        # cosine space: distance = 1 - similarity
        return [
            (entry_id, 1.0 - (distances[idx] if idx < len(distances) else 1.0))
            for idx, entry_id in enumerate(results["ids"][0])
        ]

    def delete(self, ids: list[str]) -> None:
        self.get_collection().delete(ids=ids)

    def count(self) -> int:
        return self.get_collection().count()

    def clear(self) -> None:
        c = self.get_client()
        c.delete_collection(self._collection_name)
        self._collection = c.create_collection(
            name=self._collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def ping(self) -> None:
        self.get_client().heartbeat()

    def close(self) -> None:
        self._client = None
        self._collection = None
