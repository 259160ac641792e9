"""Utility functions for scoring and vector math.

This module contains the scoring primitives used by the ranking engine and
the cosine similarity used by the in-memory vector index. None of these
functions hold state.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from semantic_store.core.models import SearchMetadata

RECENCY_DECAY_RATE = 0.1
BOOST_SCALE = 0.1
MAX_SIMILARITY = 1.0

SECONDS_PER_DAY = 86400.0


def compute_age_days(created_at: datetime | None, now: datetime) -> float:
    """Age of an entry in days, clamped to zero.

    A missing creation time is treated as infinitely old.

    Example:
        >>> now = datetime(2024, 1, 31, tzinfo=timezone.utc)
        >>> compute_age_days(datetime(2024, 1, 1, tzinfo=timezone.utc), now)
        30.0
    """
    if created_at is None:
        return math.inf
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    delta = (now - created_at).total_seconds() / SECONDS_PER_DAY
    return max(delta, 0.0)


def compute_recency_boost(
    age_days: float,
    recency_weight: float,
    decay_rate: float = RECENCY_DECAY_RATE,
    scale: float = BOOST_SCALE,
) -> float:
    """Exponentially decaying recency contribution.

    Formula:
        boost = exp(-decay_rate * age_days) * recency_weight * scale

    A same-day entry contributes close to ``scale * recency_weight``; the
    contribution approaches zero as the entry ages.

    Example:
        >>> round(compute_recency_boost(0.0, 0.5), 4)
        0.05
        >>> round(compute_recency_boost(30.0, 0.5), 4)
        0.0025
    """
    return math.exp(-decay_rate * age_days) * recency_weight * scale


def compute_preference_boost(alignment: float, scale: float = BOOST_SCALE) -> float:
    return alignment * scale


def compute_adjusted_similarity(
    similarity: float,
    metadata: SearchMetadata,
    created_at: datetime | None,
    now: datetime,
    boost_recent: bool = False,
    boost_preferences: bool = False,
) -> float:
    """Apply recency/preference boosts and the entry boost factor to a raw score.

    The additive boosts are applied first, then the multiplicative
    ``boost_factor`` (only when it differs from 1.0), then the result is
    capped at 1.0.

    Args:
        similarity: Raw cosine similarity (-1 to 1)
        metadata: The entry's search metadata
        created_at: Entry creation time, or None if unknown
        now: Reference time for the recency computation
        boost_recent: Whether to add the recency boost
        boost_preferences: Whether to add the preference boost

    Returns:
        Adjusted similarity, never greater than 1.0
    """
    adjusted = similarity
    if boost_recent:
        age_days = compute_age_days(created_at, now)
        adjusted += compute_recency_boost(age_days, metadata.recency_weight)
    if boost_preferences:
        adjusted += compute_preference_boost(metadata.user_preference_alignment)
    if metadata.boost_factor != 1.0:
        adjusted *= metadata.boost_factor
    return min(adjusted, MAX_SIMILARITY)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two equal-length vectors; 0.0 if either is zero."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)
