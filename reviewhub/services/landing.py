"""Landing feed service.

Builds the landing page payload:
- stats: user/business/review counts and month-over-month user growth
- categories: every category with its number of listed businesses
- featuredServices: top-rated businesses with enough reviews (ranked)
- recentReviews: newest-first page of reviews
- bestInCategories: top businesses for each active featured subcategory

The payload is cached in Redis for a short TTL. If Redis is unavailable
(e.g. tests / local minimal env), the service still works but skips caching.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from reviewhub.schemas import (
    BestInBusiness,
    BestInCategory,
    FeaturedService,
    LandingCategory,
    LandingResponse,
    LandingStats,
    RecentReview,
    ReviewPagination,
)
from reviewhub.services.directory import DirectorySource, FeaturedSubcategoryRecord
from reviewhub.services.pagination import PageWindow
from reviewhub.services.ratings import aggregate_ratings, rank_businesses, summary_for
from reviewhub.settings import get_settings
from reviewhub.stores.redis import clear_landing_cache, get_landing_cache, set_landing_cache

logger = logging.getLogger("uvicorn.error")

GROWTH_WINDOW = timedelta(days=30)


def monthly_growth(recent: int, older: int) -> int:
    """Percent change of recent vs previous window, 0 when there is no baseline."""
    if older <= 0:
        return 0
    return round((recent - older) / older * 100)


async def _stats(source: DirectorySource, now: datetime) -> LandingStats:
    last_month = now - GROWTH_WINDOW
    two_months_ago = now - 2 * GROWTH_WINDOW

    users = await source.count_profiles()
    businesses = await source.count_active_businesses()
    reviews = await source.count_reviews()
    recent_users = await source.count_profiles(since=last_month)
    older_users = await source.count_profiles(since=two_months_ago, until=last_month)

    return LandingStats(
        users=users,
        businesses=businesses,
        reviews=reviews,
        monthly_growth=monthly_growth(recent_users, older_users),
    )


async def _categories(source: DirectorySource) -> list[LandingCategory]:
    return [
        LandingCategory(
            id=category.id,
            name=category.name,
            icon=category.icon,
            bg_color=category.bg_color,
            count=category.business_count,
            description=f"{category.name} services",
        )
        for category in await source.list_categories_with_counts()
    ]


async def featured_services(source: DirectorySource) -> list[FeaturedService]:
    """Top businesses with at least `best_in_min_reviews` reviews, in ranked order."""
    settings = get_settings()

    business_ids = await source.active_business_ids()
    if not business_ids:
        return []

    reviews = await source.fetch_review_ratings(business_ids)
    summaries = aggregate_ratings(reviews, business_ids=business_ids)
    top_ids = rank_businesses(business_ids, summaries, min_reviews=settings.best_in_min_reviews)[
        : settings.featured_limit
    ]
    if not top_ids:
        return []

    businesses = {business.id: business for business in await source.fetch_businesses(top_ids)}
    images = await source.fetch_cover_images(top_ids)

    featured: list[FeaturedService] = []
    for business_id in top_ids:
        business = businesses.get(business_id)
        if business is None:
            continue
        summary = summary_for(summaries, business_id)
        featured.append(
            FeaturedService(
                id=business.id,
                name=business.name or "Unnamed Business",
                category=business.category_name or settings.uncategorized_label,
                rating=summary.display_rating,
                review_count=summary.count,
                image_url=images.get(business_id) or settings.placeholder_image_url,
            )
        )
    return featured


async def best_in_subcategory(
    source: DirectorySource,
    featured: FeaturedSubcategoryRecord,
) -> BestInCategory:
    """Top businesses of one featured subcategory meeting the review threshold."""
    settings = get_settings()
    section = BestInCategory(
        category_name=f"{featured.category_name or 'Unknown'} - {featured.subcategory_name or 'Unknown'}",
        category_id=featured.category_id,
        subcategory_id=featured.subcategory_id,
        subcategory_name=featured.subcategory_name,
    )

    member_ids = await source.business_ids_in_subcategories([featured.subcategory_id])
    if not member_ids:
        return section

    businesses = await source.fetch_businesses(member_ids)
    if not businesses:
        return section

    visible_ids = [business.id for business in businesses]
    reviews = await source.fetch_review_ratings(visible_ids)
    summaries = aggregate_ratings(reviews, business_ids=visible_ids)
    ranked = rank_businesses(visible_ids, summaries, min_reviews=settings.best_in_min_reviews)

    by_id = {business.id: business for business in businesses}
    section.businesses = [
        BestInBusiness(
            id=business_id,
            business_name=by_id[business_id].name or "",
            website=by_id[business_id].website,
            rating=summary_for(summaries, business_id).display_rating,
            review_count=summary_for(summaries, business_id).count,
        )
        for business_id in ranked[: settings.best_in_category_limit]
    ]
    return section


async def build_landing(
    source: DirectorySource,
    page: int,
    limit: int,
    now: datetime | None = None,
) -> LandingResponse:
    """Build the landing payload from the directory (no caching)."""
    now = now or datetime.now(timezone.utc)

    stats = await _stats(source, now)
    categories = await _categories(source)
    featured = await featured_services(source)

    window = PageWindow(page=page, limit=limit, total=0)
    review_rows, total_reviews = await source.recent_reviews(offset=window.offset, limit=limit)
    window = PageWindow(page=page, limit=limit, total=total_reviews)

    recent = [
        RecentReview(
            id=row.id,
            rating=row.rating,
            comment=row.comment,
            created_at=row.created_at,
            business_name=row.business_name or "Unknown Business",
            reviewer_name=row.reviewer_name or "Anonymous User",
            business_website=row.business_website,
        )
        for row in review_rows
    ]

    best_in: list[BestInCategory] = []
    for featured_sub in await source.active_featured_subcategories():
        best_in.append(await best_in_subcategory(source, featured_sub))

    return LandingResponse(
        stats=stats,
        categories=categories,
        featured_services=featured,
        recent_reviews=recent,
        best_in_categories=best_in,
        pagination=ReviewPagination(
            current_page=window.page,
            total_pages=window.total_pages,
            total_reviews=window.total,
            has_next=window.has_next,
            has_prev=window.has_prev,
        ),
    )


async def get_landing(source: DirectorySource, page: int, limit: int) -> LandingResponse:
    """Get the landing payload, using Redis cache when available."""
    ttl = get_settings().landing_cache_ttl

    if ttl > 0:
        cached = await _try_get_cached_landing(page, limit)
        if cached is not None:
            return cached

    landing = await build_landing(source, page=page, limit=limit)

    if ttl > 0:
        await _try_set_cached_landing(page, limit, landing, ttl)
    return landing


async def _try_get_cached_landing(page: int, limit: int) -> LandingResponse | None:
    try:
        payload = await get_landing_cache(page, limit)
    except RuntimeError:
        return None
    except Exception as e:
        logger.warning(f"Redis cache read failed: {e}")
        return None
    if not payload:
        return None

    try:
        return LandingResponse.model_validate(payload)
    except ValueError as e:
        logger.warning(f"Discarding malformed landing cache entry page={page} limit={limit}: {e}")
        return None


async def _try_set_cached_landing(page: int, limit: int, landing: LandingResponse, ttl: int) -> None:
    try:
        await set_landing_cache(page, limit, landing.model_dump(mode="json", by_alias=True), ttl)
    except RuntimeError:
        return
    except Exception as e:
        logger.warning(f"Redis cache write failed: {e}")


async def invalidate_landing_cache() -> None:
    """Drop cached landing payloads. Call only after the write has committed."""
    try:
        await clear_landing_cache()
    except RuntimeError:
        return
    except Exception as e:
        logger.warning(f"Redis landing cache invalidation failed: {e}")
