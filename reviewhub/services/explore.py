"""Explore listing pipeline.

Pipeline:
1. Candidate set
   - With a search query: UNION of text matches (name/location/address),
     businesses in categories whose name matches, and businesses in
     subcategories whose name matches
   - Without a query: all non-banned businesses
2. Category filter (INTERSECTION with the category's members)
3. Subcategory filter (INTERSECTION; unknown subcategory -> empty)
4. Empty candidate set at any stage -> empty page, no more store calls
5. Fetch details + review ratings, aggregate, sort, paginate
6. Decorate the page with primary images and first category name
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from reviewhub.schemas import ExploreBusiness, ExplorePagination, ExploreResponse
from reviewhub.services.directory import BusinessRecord, DirectorySource
from reviewhub.services.pagination import PageWindow
from reviewhub.services.ratings import (
    RatingSummary,
    SortMode,
    aggregate_ratings,
    sort_business_ids,
    summary_for,
)
from reviewhub.settings import get_settings

logger = logging.getLogger("uvicorn.error")

ALL_CATEGORIES = "all"


@dataclass
class ExploreFilters:
    """Normalized explore query parameters."""

    search: str = ""
    category: str | None = None
    subcategory: str | None = None
    sort: SortMode = SortMode.RATING
    page: int = 1
    limit: int = 12

    def __post_init__(self) -> None:
        self.search = (self.search or "").strip()
        if self.category is not None:
            self.category = self.category.strip() or None
        if self.category == ALL_CATEGORIES:
            self.category = None
        if self.subcategory is not None:
            self.subcategory = self.subcategory.strip() or None
        self.page = max(1, self.page)
        self.limit = max(1, self.limit)


@dataclass
class CandidateSet:
    """Ordered set of business ids surviving the current pipeline stage."""

    ids: list[str] = field(default_factory=list)

    @classmethod
    def union(cls, *groups: Iterable[str]) -> "CandidateSet":
        seen: dict[str, None] = {}
        for group in groups:
            for business_id in group:
                seen.setdefault(business_id, None)
        return cls(ids=list(seen))

    def intersect(self, members: Iterable[str]) -> "CandidateSet":
        allowed = set(members)
        return CandidateSet(ids=[business_id for business_id in self.ids if business_id in allowed])

    def __len__(self) -> int:
        return len(self.ids)

    def __bool__(self) -> bool:
        return bool(self.ids)


def empty_explore_response(page: int) -> ExploreResponse:
    return ExploreResponse(
        businesses=[],
        pagination=ExplorePagination(
            current_page=page,
            total_pages=0,
            total_count=0,
            has_next=False,
            has_prev=False,
        ),
    )


async def build_candidate_set(source: DirectorySource, filters: ExploreFilters) -> CandidateSet:
    """Run the filter stages and return the surviving business ids."""
    if filters.search:
        text_ids = await source.search_business_ids(filters.search)

        category_ids = await source.category_ids_matching(filters.search)
        category_member_ids = await source.business_ids_in_categories(category_ids) if category_ids else []

        subcategory_ids = await source.subcategory_ids_matching(filters.search)
        subcategory_member_ids = (
            await source.business_ids_in_subcategories(subcategory_ids) if subcategory_ids else []
        )

        candidates = CandidateSet.union(text_ids, category_member_ids, subcategory_member_ids)
    else:
        candidates = CandidateSet.union(await source.active_business_ids())

    if not candidates:
        return candidates

    if filters.category:
        members = await source.business_ids_in_categories([filters.category])
        candidates = candidates.intersect(members)
        if not candidates:
            return candidates

    if filters.subcategory:
        subcategory_id = await source.find_subcategory_id(filters.subcategory)
        if subcategory_id is None:
            return CandidateSet()
        members = await source.business_ids_in_subcategories([subcategory_id])
        candidates = candidates.intersect(members)

    return candidates


def _to_row(
    business: BusinessRecord,
    summary: RatingSummary,
    images: dict[str, str],
) -> ExploreBusiness:
    settings = get_settings()
    return ExploreBusiness(
        id=business.id,
        name=business.name,
        location=business.location or "",
        address=business.address or "",
        description=business.description or "",
        rating=summary.display_rating,
        review_count=summary.count,
        image_url=images.get(business.id) or settings.placeholder_image_url,
        category=business.category_name or settings.uncategorized_label,
    )


async def explore_businesses(source: DirectorySource, filters: ExploreFilters) -> ExploreResponse:
    """Get a ranked, paginated slice of businesses matching the filters.

    Args:
        source: Directory queries for the current request.
        filters: Normalized query parameters.

    Returns:
        ExploreResponse with the page of businesses and pagination info.
    """
    candidates = await build_candidate_set(source, filters)
    if not candidates:
        return empty_explore_response(filters.page)

    businesses = await source.fetch_businesses(candidates.ids)
    if not businesses:
        return empty_explore_response(filters.page)

    by_id = {business.id: business for business in businesses}
    ordered_ids = [business.id for business in businesses]

    reviews = await source.fetch_review_ratings(ordered_ids)
    summaries = aggregate_ratings(reviews, business_ids=ordered_ids)

    sorted_ids = sort_business_ids(
        ordered_ids,
        summaries,
        mode=filters.sort,
        created_at={business.id: business.created_at for business in businesses},
    )

    window = PageWindow(page=filters.page, limit=filters.limit, total=len(sorted_ids))
    page_ids = window.slice(sorted_ids)

    images = await source.fetch_primary_images(page_ids) if page_ids else {}

    rows = [_to_row(by_id[business_id], summary_for(summaries, business_id), images) for business_id in page_ids]

    logger.debug(
        f"[explore] search={filters.search!r} category={filters.category} subcategory={filters.subcategory} "
        f"sort={filters.sort.value} eligible={window.total} page={window.page}/{window.total_pages}"
    )

    return ExploreResponse(
        businesses=rows,
        pagination=ExplorePagination(
            current_page=window.page,
            total_pages=window.total_pages,
            total_count=window.total,
            has_next=window.has_next,
            has_prev=window.has_prev,
        ),
    )
