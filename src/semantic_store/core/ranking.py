"""Post-retrieval ranking of similarity search hits.

The search collaborator returns an approximate top-K by vector distance
alone. Ranking then applies the similarity threshold and, when requested,
re-scores each surviving candidate:

    adjusted = raw
    if boost_recent:      adjusted += exp(-0.1 * age_days) * recency_weight * 0.1
    if boost_preferences: adjusted += user_preference_alignment * 0.1
    if boost_factor != 1: adjusted *= boost_factor
    adjusted = min(adjusted, 1.0)

and re-sorts by the adjusted score. Ties keep their input order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from semantic_store.core.models import (
    DEFAULT_SIMILARITY_THRESHOLD,
    BoostOptions,
    RankedHit,
    RankedResults,
    SimilarityCandidate,
    utcnow,
)
from semantic_store.core.utils import compute_adjusted_similarity

logger = logging.getLogger(__name__)


def apply_threshold(
    candidates: Sequence[SimilarityCandidate], threshold: float
) -> list[SimilarityCandidate]:
    """Drop candidates whose raw similarity is strictly below the threshold."""
    return [c for c in candidates if c.similarity >= threshold]


def apply_boosting(
    candidates: Sequence[SimilarityCandidate],
    boost: BoostOptions,
    now: datetime,
) -> list[RankedHit]:
    """Re-score candidates and sort them by adjusted similarity, descending."""
    hits = [
        RankedHit(
            entry=c.entry,
            similarity=compute_adjusted_similarity(
                similarity=c.similarity,
                metadata=c.entry.search_metadata,
                created_at=c.entry.created_at,
                now=now,
                boost_recent=boost.boost_recent,
                boost_preferences=boost.boost_preferences,
            ),
            original_similarity=c.similarity,
        )
        for c in candidates
    ]
    # sorted() is stable, so equal scores keep the collaborator's order
    return sorted(hits, key=lambda h: h.similarity, reverse=True)


def rank(
    candidates: Sequence[SimilarityCandidate],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    boost: BoostOptions | None = None,
    now: datetime | None = None,
) -> RankedResults:
    """Rank raw similarity hits.

    Args:
        candidates: Hits in the collaborator's similarity order
        threshold: Minimum raw similarity to keep (0-1)
        boost: Which boosts to apply; no boosting when None
        now: Reference time for recency; defaults to the current UTC time

    Returns:
        RankedResults with the ordered hits, the threshold used and whether
        boosting was applied

    Raises:
        ValueError: If threshold is outside 0-1
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
    boost = boost or BoostOptions()

    kept = apply_threshold(candidates, threshold)
    if boost.enabled:
        results = apply_boosting(kept, boost, now or utcnow())
    else:
        results = [
            RankedHit(entry=c.entry, similarity=c.similarity, original_similarity=c.similarity)
            for c in kept
        ]

    logger.debug(
        "Ranked %d of %d candidates (threshold=%.3f, boost=%s)",
        len(results),
        len(candidates),
        threshold,
        boost.enabled,
    )
    return RankedResults(
        results=results, similarity_threshold=threshold, boost_applied=boost.enabled
    )
