"""Read-side contract between the listing services and the data store.

The explore and landing services only talk to a `DirectorySource`; the
Postgres implementation lives in `reviewhub.stores.directory`. Every method is
one sequential round trip and returns plain records, never ORM objects.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from reviewhub.services.ratings import ReviewRating


@dataclass(frozen=True)
class BusinessRecord:
    id: str
    name: str
    location: str | None = None
    address: str | None = None
    description: str | None = None
    website: str | None = None
    created_at: datetime | None = None
    category_name: str | None = None  # first linked category (alphabetical)


@dataclass(frozen=True)
class CategoryRecord:
    id: str
    name: str
    icon: str | None = None
    bg_color: str | None = None
    business_count: int = 0


@dataclass(frozen=True)
class RecentReviewRecord:
    id: str
    rating: int
    comment: str | None
    created_at: datetime | None
    business_name: str | None
    business_website: str | None
    reviewer_name: str | None


@dataclass(frozen=True)
class FeaturedSubcategoryRecord:
    subcategory_id: str
    subcategory_name: str | None
    category_id: str | None
    category_name: str | None


class DirectorySource(Protocol):
    """Queries used by the explore pipeline and the landing feed.

    Every business-returning query excludes banned businesses.
    """

    # Explore candidate sets
    async def active_business_ids(self) -> list[str]: ...

    async def search_business_ids(self, query: str) -> list[str]: ...

    async def category_ids_matching(self, query: str) -> list[str]: ...

    async def subcategory_ids_matching(self, query: str) -> list[str]: ...

    async def business_ids_in_categories(self, category_ids: Sequence[str]) -> list[str]: ...

    async def business_ids_in_subcategories(self, subcategory_ids: Sequence[str]) -> list[str]: ...

    async def find_subcategory_id(self, name: str) -> str | None: ...

    # Business details and reviews
    async def fetch_businesses(self, business_ids: Sequence[str]) -> list[BusinessRecord]: ...

    async def fetch_review_ratings(self, business_ids: Sequence[str]) -> list[ReviewRating]: ...

    async def fetch_primary_images(self, business_ids: Sequence[str]) -> dict[str, str]: ...

    async def fetch_cover_images(self, business_ids: Sequence[str]) -> dict[str, str]: ...

    # Landing feed
    async def count_profiles(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> int: ...

    async def count_active_businesses(self) -> int: ...

    async def count_reviews(self) -> int: ...

    async def list_categories_with_counts(self) -> list[CategoryRecord]: ...

    async def recent_reviews(self, offset: int, limit: int) -> tuple[list[RecentReviewRecord], int]: ...

    async def active_featured_subcategories(self) -> list[FeaturedSubcategoryRecord]: ...
