"""Data models for semantic entries and search results."""

import json
import math
import uuid as uuid_lib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

PRIMARY_EMBEDDING_DIMENSION = 768

MAX_TITLE_LENGTH = 1000
MAX_CONTENT_LENGTH = 10000
MAX_CONTENT_TYPE_LENGTH = 100
MAX_TAGS = 20
MAX_TAG_LENGTH = 100
MAX_EMOTION_LENGTH = 50

DEFAULT_BOOST_FACTOR = 1.0
MAX_BOOST_FACTOR = 10.0
DEFAULT_RECENCY_WEIGHT = 0.5
DEFAULT_PREFERENCE_ALIGNMENT = 0.5

DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100


def generate_entry_id() -> str:
    """Generate a new identifier for an entry."""
    return str(uuid_lib.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp, treating naive values as UTC.

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class SearchMetadata:
    """Secondary ranking knobs carried by every entry.

    Attributes:
        boost_factor: Multiplier applied to the adjusted similarity (0-10)
        recency_weight: Weight of the recency boost (0-1)
        user_preference_alignment: Weight of the preference boost (0-1)
    """

    boost_factor: float = DEFAULT_BOOST_FACTOR
    recency_weight: float = DEFAULT_RECENCY_WEIGHT
    user_preference_alignment: float = DEFAULT_PREFERENCE_ALIGNMENT

    def to_dict(self) -> dict[str, float]:
        return {
            "boost_factor": self.boost_factor,
            "recency_weight": self.recency_weight,
            "user_preference_alignment": self.user_preference_alignment,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "SearchMetadata":
        """Build metadata, falling back to the defaults for absent values."""
        data = data or {}
        values = {}
        for name, default in DEFAULT_SEARCH_METADATA.to_dict().items():
            value = data.get(name)
            values[name] = default if value is None else float(value)
        return cls(**values)


DEFAULT_SEARCH_METADATA = SearchMetadata()


@dataclass
class LinkedEntities:
    """Named entities an entry refers to."""

    people: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "people": list(self.people),
            "locations": list(self.locations),
            "events": list(self.events),
            "topics": list(self.topics),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LinkedEntities":
        data = data or {}
        return cls(
            people=list(data.get("people") or []),
            locations=list(data.get("locations") or []),
            events=list(data.get("events") or []),
            topics=list(data.get("topics") or []),
        )


@dataclass
class EmotionalContext:
    primary_emotion: str | None = None
    intensity: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"primary_emotion": self.primary_emotion, "intensity": self.intensity}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "EmotionalContext | None":
        if not data:
            return None
        return cls(
            primary_emotion=data.get("primary_emotion"),
            intensity=float(data.get("intensity", 0.0)),
        )


@dataclass
class TemporalContext:
    hour_of_day: int | None = None
    day_of_week: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"hour_of_day": self.hour_of_day, "day_of_week": self.day_of_week}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "TemporalContext | None":
        if not data:
            return None
        return cls(
            hour_of_day=data.get("hour_of_day"),
            day_of_week=data.get("day_of_week"),
        )


@dataclass
class Entry:
    """A stored semantic entry.

    Attributes:
        id: Unique identifier, assigned at creation and never changed
        user_id: Identifier of the submitting user
        content_type: Free-form category label used for filtering
        title: Entry title
        content: Entry body
        primary_embedding: Vector used for similarity search
        tags: Short labels used for filtering
        linked_entities: People, locations, events and topics referenced
        search_metadata: Secondary ranking knobs
        session_id: Optional session the entry was captured in
        emotional_context: Optional emotion label and intensity
        temporal_context: Optional hour/day the entry refers to
        created_at: When the entry was first stored (preserved on replacement)
        updated_at: When the entry was last written
    """

    id: str
    user_id: str
    content_type: str
    title: str
    content: str
    primary_embedding: list[float]
    tags: list[str] = field(default_factory=list)
    linked_entities: LinkedEntities = field(default_factory=LinkedEntities)
    search_metadata: SearchMetadata = field(default_factory=SearchMetadata)
    session_id: str | None = None
    emotional_context: EmotionalContext | None = None
    temporal_context: TemporalContext | None = None
    created_at: datetime | None = field(default_factory=utcnow)
    updated_at: datetime | None = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Serialize entry to dict for JSON storage."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "content_type": self.content_type,
            "title": self.title,
            "content": self.content,
            "primary_embedding": list(self.primary_embedding),
            "tags": list(self.tags),
            "linked_entities": self.linked_entities.to_dict(),
            "search_metadata": self.search_metadata.to_dict(),
            "session_id": self.session_id,
            "emotional_context": (
                self.emotional_context.to_dict() if self.emotional_context else None
            ),
            "temporal_context": (
                self.temporal_context.to_dict() if self.temporal_context else None
            ),
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        """Deserialize entry from dict.

        A missing created_at stays None so ranking can treat the entry as stale.
        """
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            content_type=data["content_type"],
            title=data["title"],
            content=data["content"],
            primary_embedding=[float(v) for v in data["primary_embedding"]],
            tags=list(data.get("tags") or []),
            linked_entities=LinkedEntities.from_dict(data.get("linked_entities")),
            search_metadata=SearchMetadata.from_dict(data.get("search_metadata")),
            session_id=data.get("session_id"),
            emotional_context=EmotionalContext.from_dict(data.get("emotional_context")),
            temporal_context=TemporalContext.from_dict(data.get("temporal_context")),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "Entry":
        return cls.from_dict(json.loads(json_str))

    def vector_metadata(self) -> dict[str, Any]:
        """Filterable fields indexed alongside the embedding."""
        return {
            "user_id": self.user_id,
            "content_type": self.content_type,
            "tags": list(self.tags),
        }


@dataclass
class SimilarityCandidate:
    """A raw hit from the similarity search collaborator."""

    entry: Entry
    similarity: float


@dataclass
class RankedHit:
    """A ranked search result.

    similarity is the adjusted score; original_similarity is the raw cosine
    similarity returned by the search, so the effect of boosting is auditable.
    """

    entry: Entry
    similarity: float
    original_similarity: float

    @property
    def boost_delta(self) -> float:
        return self.similarity - self.original_similarity

    def to_dict(self) -> dict[str, Any]:
        data = self.entry.to_dict()
        data["similarity"] = self.similarity
        data["original_similarity"] = self.original_similarity
        return data


@dataclass(frozen=True)
class BoostOptions:
    boost_recent: bool = False
    boost_preferences: bool = False

    @property
    def enabled(self) -> bool:
        return self.boost_recent or self.boost_preferences


@dataclass
class RankedResults:
    """Final ordered result set of a similarity search."""

    results: list[RankedHit]
    similarity_threshold: float
    boost_applied: bool = False

    @property
    def total(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [hit.to_dict() for hit in self.results],
            "total": self.total,
            "similarity_threshold": self.similarity_threshold,
            "boost_applied": self.boost_applied,
        }


@dataclass
class EntryPage:
    """One page of a user's entries."""

    entries: list[Entry]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "pages": self.pages,
            },
        }
