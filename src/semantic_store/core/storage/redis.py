"""Redis storage backend implementation.

String + ZSET layout for production record storage.
"""

import json
from typing import Any, Iterator

import redis


class RedisStorageBackend:
    """Redis record storage with a ZSET index of creation timestamps.

    Uses Redis data structures:
    - String: Store entry JSON (key: {prefix}entry:{id})
    - ZSET: Store entry scores (creation epoch seconds) (key: {prefix}scores)
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        url: str | None = None,
        prefix: str = "semantic_store:",
    ) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._password = password
        self._url = url
        self._prefix = prefix
        self._client: redis.Redis | None = None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            if self._url:
                self._client = redis.from_url(self._url, decode_responses=True)
            else:
                self._client = redis.Redis(
                    host=self._host,
                    port=self._port,
                    db=self._db,
                    password=self._password,
                    decode_responses=True,
                )
        return self._client

    def _entry_key(self, key: str) -> str:
        return f"{self._prefix}entry:{key}"

    def _scores_key(self) -> str:
        return f"{self._prefix}scores"

    def _serialize(self, value: dict[str, Any]) -> str:
        return json.dumps(value, default=str)

    def _deserialize(self, data: str | None) -> dict[str, Any] | None:
        if data is None:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            return None

    def get(self, key: str) -> dict[str, Any] | None:
        client = self._get_client()
        data = client.get(self._entry_key(key))
        return self._deserialize(data)

    def set(self, key: str, value: dict[str, Any], score: float = 0.0) -> None:
        client = self._get_client()
        pipe = client.pipeline()
        pipe.set(self._entry_key(key), self._serialize(value))
        pipe.zadd(self._scores_key(), {key: score})
        pipe.execute()

    def add(self, key: str, value: dict[str, Any], score: float = 0.0) -> bool:
        """Set only if the key is absent. Returns False on conflict."""
        client = self._get_client()
        created = client.set(self._entry_key(key), self._serialize(value), nx=True)
        if not created:
            return False
        client.zadd(self._scores_key(), {key: score})
        return True

    def delete(self, key: str) -> bool:
        client = self._get_client()
        pipe = client.pipeline()
        pipe.delete(self._entry_key(key))
        pipe.zrem(self._scores_key(), key)
        results = pipe.execute()
        return results[0] > 0

    def exists(self, key: str) -> bool:
        client = self._get_client()
        return client.exists(self._entry_key(key)) > 0

    def keys(self) -> Iterator[str]:
        client = self._get_client()
        pattern = f"{self._prefix}entry:*"
        prefix_len = len(f"{self._prefix}entry:")
        for key in client.scan_iter(match=pattern):
            yield key[prefix_len:]

    def clear(self) -> None:
        client = self._get_client()
        for key in client.scan_iter(match=f"{self._prefix}entry:*"):
            client.delete(key)
        client.delete(self._scores_key())

    def size(self) -> int:
        client = self._get_client()
        return client.zcard(self._scores_key())

    def get_score(self, key: str) -> float | None:
        client = self._get_client()
        return client.zscore(self._scores_key(), key)

    def count_by_score(self, min_score: float) -> int:
        """Count keys whose score is at least min_score."""
        client = self._get_client()
        return client.zcount(self._scores_key(), min_score, "+inf")

    def ping(self) -> bool:
        return bool(self._get_client().ping())

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
