"""In-memory storage backend implementation.

Simplified implementation for development and testing.
"""

import threading
from typing import Any, Iterator


class MemoryStorageBackend:
    """In-memory record storage using Python dict.

    Thread-safe implementation for local use. Each record carries a score
    (its creation timestamp) used for time-window counts.
    For production, use RedisStorageBackend.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._data: dict[str, dict[str, Any]] = {}
        self._scores: dict[str, float] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self._data.get(key)
            return dict(entry) if entry else None

    def set(self, key: str, value: dict[str, Any], score: float = 0.0) -> None:
        with self._lock:
            self._data[key] = dict(value)
            self._scores[key] = score

    def add(self, key: str, value: dict[str, Any], score: float = 0.0) -> bool:
        """Set only if the key is absent. Returns False on conflict."""
        with self._lock:
            if key in self._data:
                return False
            self.set(key, value, score)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            deleted = self._data.pop(key, None) is not None
            self._scores.pop(key, None)
            return deleted

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def keys(self) -> Iterator[str]:
        with self._lock:
            yield from list(self._data.keys())

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._scores.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def get_score(self, key: str) -> float | None:
        with self._lock:
            return self._scores.get(key)

    def count_by_score(self, min_score: float) -> int:
        """Count keys whose score is at least min_score."""
        with self._lock:
            return sum(1 for score in self._scores.values() if score >= min_score)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
