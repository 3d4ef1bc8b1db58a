"""Rating aggregation and ranking.

Aggregation:
1. Group (business_id, rating) pairs by business
2. Accumulate sum and count per business
3. average = sum / count (only computed when count > 0)

Ranking logic:
1. Keep businesses with count >= min_reviews
2. Sort by average DESC (exact, unrounded)
3. Then by count DESC
4. Equal keys keep their input order (stable sort)

Display:
- Every rating returned to clients is rounded half-up to one decimal.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


@dataclass(frozen=True)
class ReviewRating:
    """Minimal review projection needed for aggregation."""

    business_id: str
    rating: float


@dataclass(frozen=True)
class RatingSummary:
    """Derived per-business rating statistics (request-scoped, never persisted)."""

    business_id: str
    total: float = 0
    count: int = 0

    @property
    def average(self) -> float:
        if self.count <= 0:
            return 0.0
        return self.total / self.count

    @property
    def display_rating(self) -> float:
        return round_rating(self.average)


class SortMode(str, Enum):
    """Explore listing sort modes."""

    RATING = "rating"
    REVIEWS = "reviews"
    RECENT = "recent"

    @classmethod
    def parse(cls, value: str | None) -> "SortMode":
        """Parse a query value, falling back to rating for anything unknown."""
        if not value:
            return cls.RATING
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.RATING


def round_rating(value: float) -> float:
    """Round half-up to one decimal place (4.75 -> 4.8, 4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate_ratings(
    reviews: Iterable[ReviewRating],
    business_ids: Iterable[str] | None = None,
) -> dict[str, RatingSummary]:
    """Compute per-business rating summaries.

    Args:
        reviews: Review projections (business reference + rating).
        business_ids: Optional target set; reviews for other businesses are ignored.

    Returns:
        Mapping business_id -> RatingSummary. Businesses without reviews are absent.
    """
    targets = set(business_ids) if business_ids is not None else None
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}

    for review in reviews:
        if targets is not None and review.business_id not in targets:
            continue
        totals[review.business_id] = totals.get(review.business_id, 0) + review.rating
        counts[review.business_id] = counts.get(review.business_id, 0) + 1

    return {
        business_id: RatingSummary(business_id=business_id, total=totals[business_id], count=count)
        for business_id, count in counts.items()
    }


def summary_for(summaries: Mapping[str, RatingSummary], business_id: str) -> RatingSummary:
    """Get the summary for a business, treating a missing entry as zero reviews."""
    return summaries.get(business_id) or RatingSummary(business_id=business_id)


def _rating_key(summary: RatingSummary) -> tuple[float, int]:
    return (-summary.average, -summary.count)


def rank_businesses(
    business_ids: Sequence[str],
    summaries: Mapping[str, RatingSummary],
    min_reviews: int = 0,
) -> list[str]:
    """Rank businesses by average rating DESC, then review count DESC.

    Args:
        business_ids: Candidate ids in their original order.
        summaries: Output of aggregate_ratings().
        min_reviews: Minimum review count for a business to be eligible.

    Returns:
        Eligible ids in ranked order.
    """
    eligible = [
        business_id
        for business_id in business_ids
        if summary_for(summaries, business_id).count >= min_reviews
    ]
    return sorted(eligible, key=lambda business_id: _rating_key(summary_for(summaries, business_id)))


def sort_business_ids(
    business_ids: Sequence[str],
    summaries: Mapping[str, RatingSummary],
    mode: SortMode = SortMode.RATING,
    created_at: Mapping[str, datetime | None] | None = None,
) -> list[str]:
    """Order ids for the explore listing according to the requested mode."""
    if mode is SortMode.REVIEWS:
        return sorted(business_ids, key=lambda business_id: -summary_for(summaries, business_id).count)

    if mode is SortMode.RECENT:
        created_at = created_at or {}

        def _recent_key(business_id: str) -> tuple[int, float]:
            ts = created_at.get(business_id)
            # Missing timestamps sort last
            if ts is None:
                return (1, 0.0)
            return (0, -ts.timestamp())

        return sorted(business_ids, key=_recent_key)

    return rank_businesses(business_ids, summaries)
