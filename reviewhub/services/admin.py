"""Admin moderation service.

Every operation requires Capability.MODERATE on the injected
AuthorizationContext. Writes commit before the cached landing payload is
dropped, so a landing request can never re-cache rows the write replaced.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.models import (
    Business,
    BusinessCategory,
    Category,
    FeaturedSubcategory,
    Profile,
    Review,
    Subcategory,
)
from reviewhub.schemas import (
    AdminBusiness,
    AdminReview,
    AdminStats,
    AdminUser,
    BusinessModeration,
    CategoryIn,
    CategoryOut,
    FeaturedSubcategoryIn,
    FeaturedSubcategoryOut,
    FeaturedSubcategoryUpdate,
    RankedBusiness,
    ReviewModeration,
    ReviewOut,
    SubcategoryIn,
    SubcategoryOut,
    UserModeration,
)
from reviewhub.services.authz import AuthorizationContext, Capability
from reviewhub.services.directory import DirectorySource
from reviewhub.services.errors import InvalidRequestError, NotFoundError
from reviewhub.services.landing import invalidate_landing_cache
from reviewhub.services.ratings import aggregate_ratings, rank_businesses, summary_for
from reviewhub.services.reviews import review_to_schema
from reviewhub.settings import get_settings

logger = logging.getLogger("uvicorn.error")

RECENT_REVIEWS_LIMIT = 10
BEST_IN_CANDIDATES_LIMIT = 20


async def _commit_and_invalidate(session: AsyncSession) -> None:
    await session.commit()
    await invalidate_landing_cache()


# ============================================================
# Dashboard
# ============================================================


async def get_stats(
    session: AsyncSession,
    auth: AuthorizationContext,
    now: datetime | None = None,
) -> AdminStats:
    """User/business profile counts and reviews created in the last 7 days."""
    auth.require(Capability.MODERATE)
    now = now or datetime.now(timezone.utc)

    users = await session.execute(select(func.count(Profile.id)).where(Profile.role == "user"))
    businesses = await session.execute(select(func.count(Profile.id)).where(Profile.role == "business"))
    reviews = await session.execute(
        select(func.count(Review.id)).where(Review.created_at >= now - timedelta(days=7))
    )

    return AdminStats(
        users=users.scalar() or 0,
        businesses=businesses.scalar() or 0,
        reviews_this_week=reviews.scalar() or 0,
    )


async def list_recent_reviews(
    session: AsyncSession,
    auth: AuthorizationContext,
    limit: int = RECENT_REVIEWS_LIMIT,
) -> list[AdminReview]:
    """Newest reviews across all businesses, banned ones included."""
    auth.require(Capability.MODERATE)

    result = await session.execute(
        select(Review, Business.business_name, Profile.name)
        .outerjoin(Business, Business.id == Review.reviewee_id)
        .outerjoin(Profile, Profile.id == Review.reviewer_id)
        .order_by(Review.created_at.desc())
        .limit(limit)
    )
    return [
        AdminReview(
            id=review.id,
            business_name=business_name or "Unknown Business",
            reviewer_name=reviewer_name or "Anonymous",
            rating=review.rating,
            created_at=review.created_at,
        )
        for review, business_name, reviewer_name in result.all()
    ]


# ============================================================
# Reviews
# ============================================================


async def update_review(
    session: AsyncSession,
    auth: AuthorizationContext,
    review_id: str,
    changes: ReviewModeration,
) -> ReviewOut:
    auth.require(Capability.MODERATE)

    review = await session.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")

    if changes.rating is not None:
        review.rating = changes.rating
    if changes.comment is not None:
        review.comment = changes.comment.strip() or None
    if changes.is_verified is not None:
        review.is_verified = changes.is_verified

    await _commit_and_invalidate(session)
    await session.refresh(review)
    logger.info(f"[admin] updated review_id={review_id} by={auth.user_id}")
    return review_to_schema(review)


async def delete_review(session: AsyncSession, auth: AuthorizationContext, review_id: str) -> None:
    auth.require(Capability.MODERATE)

    review = await session.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")

    await session.delete(review)
    await _commit_and_invalidate(session)
    logger.info(f"[admin] deleted review_id={review_id} by={auth.user_id}")


# ============================================================
# Businesses and users
# ============================================================


async def set_business_ban(
    session: AsyncSession,
    auth: AuthorizationContext,
    business_id: str,
    changes: BusinessModeration,
) -> None:
    auth.require(Capability.MODERATE)

    business = await session.get(Business, business_id)
    if business is None:
        raise NotFoundError("Business not found")

    business.is_banned = changes.is_banned
    await _commit_and_invalidate(session)
    logger.info(f"[admin] business_id={business_id} is_banned={changes.is_banned} by={auth.user_id}")


async def update_user(
    session: AsyncSession,
    auth: AuthorizationContext,
    user_id: str,
    changes: UserModeration,
) -> None:
    auth.require(Capability.MODERATE)

    profile = await session.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("User not found")

    if changes.is_banned is not None:
        profile.is_banned = changes.is_banned
    if changes.role is not None:
        profile.role = changes.role
    await session.flush()
    logger.info(
        f"[admin] user_id={user_id} is_banned={changes.is_banned} role={changes.role} by={auth.user_id}"
    )


async def list_users(session: AsyncSession, auth: AuthorizationContext) -> list[AdminUser]:
    """Profiles newest first with the number of reviews each has written."""
    auth.require(Capability.MODERATE)

    review_counts = (
        select(Review.reviewer_id, func.count(Review.id).label("review_count"))
        .group_by(Review.reviewer_id)
        .subquery()
    )
    result = await session.execute(
        select(Profile, func.coalesce(review_counts.c.review_count, 0))
        .outerjoin(review_counts, review_counts.c.reviewer_id == Profile.id)
        .order_by(Profile.created_at.desc())
    )
    return [
        AdminUser(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            is_banned=bool(profile.is_banned),
            created_at=profile.created_at,
            review_count=review_count or 0,
        )
        for profile, review_count in result.all()
    ]


async def list_businesses(session: AsyncSession, auth: AuthorizationContext) -> list[AdminBusiness]:
    """All businesses newest first, banned ones included, with owner and first category."""
    auth.require(Capability.MODERATE)
    settings = get_settings()

    first_category = (
        select(BusinessCategory.business_id, func.min(Category.name).label("category_name"))
        .join(Category, Category.id == BusinessCategory.category_id)
        .group_by(BusinessCategory.business_id)
        .subquery()
    )
    result = await session.execute(
        select(Business, Profile.name, Profile.email, first_category.c.category_name)
        .outerjoin(Profile, Profile.id == Business.business_owner_id)
        .outerjoin(first_category, first_category.c.business_id == Business.id)
        .order_by(Business.created_at.desc())
    )
    return [
        AdminBusiness(
            id=business.id,
            business_name=business.business_name,
            category_name=category_name or settings.uncategorized_label,
            owner_name=owner_name or "Unknown",
            owner_email=owner_email or "Unknown",
            is_banned=bool(business.is_banned),
            created_at=business.created_at,
        )
        for business, owner_name, owner_email, category_name in result.all()
    ]


# ============================================================
# Featured subcategories (best-in-category sections)
# ============================================================


async def _featured_out(session: AsyncSession, featured_id: str) -> FeaturedSubcategoryOut:
    result = await session.execute(
        select(FeaturedSubcategory, Subcategory.name, Category.name)
        .outerjoin(Subcategory, Subcategory.id == FeaturedSubcategory.subcategory_id)
        .outerjoin(Category, Category.id == Subcategory.category_id)
        .where(FeaturedSubcategory.id == featured_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Featured subcategory not found")
    featured, subcategory_name, category_name = row
    return FeaturedSubcategoryOut(
        id=featured.id,
        subcategory_id=featured.subcategory_id,
        subcategory_name=subcategory_name,
        category_name=category_name,
        is_active=bool(featured.is_active),
        created_at=featured.created_at,
    )


async def list_featured_subcategories(
    session: AsyncSession,
    auth: AuthorizationContext,
) -> list[FeaturedSubcategoryOut]:
    auth.require(Capability.MODERATE)

    result = await session.execute(
        select(FeaturedSubcategory, Subcategory.name, Category.name)
        .outerjoin(Subcategory, Subcategory.id == FeaturedSubcategory.subcategory_id)
        .outerjoin(Category, Category.id == Subcategory.category_id)
        .order_by(FeaturedSubcategory.created_at.asc())
    )
    return [
        FeaturedSubcategoryOut(
            id=featured.id,
            subcategory_id=featured.subcategory_id,
            subcategory_name=subcategory_name,
            category_name=category_name,
            is_active=bool(featured.is_active),
            created_at=featured.created_at,
        )
        for featured, subcategory_name, category_name in result.all()
    ]


async def create_featured_subcategory(
    session: AsyncSession,
    auth: AuthorizationContext,
    payload: FeaturedSubcategoryIn,
) -> FeaturedSubcategoryOut:
    auth.require(Capability.MODERATE)

    if await session.get(Subcategory, payload.subcategory_id) is None:
        raise NotFoundError("Subcategory not found")

    featured = FeaturedSubcategory(subcategory_id=payload.subcategory_id, is_active=payload.is_active)
    session.add(featured)
    await _commit_and_invalidate(session)
    return await _featured_out(session, featured.id)


async def update_featured_subcategory(
    session: AsyncSession,
    auth: AuthorizationContext,
    payload: FeaturedSubcategoryUpdate,
) -> FeaturedSubcategoryOut:
    auth.require(Capability.MODERATE)

    featured = await session.get(FeaturedSubcategory, payload.id)
    if featured is None:
        raise NotFoundError("Featured subcategory not found")

    if payload.subcategory_id is not None:
        if await session.get(Subcategory, payload.subcategory_id) is None:
            raise NotFoundError("Subcategory not found")
        featured.subcategory_id = payload.subcategory_id
    if payload.is_active is not None:
        featured.is_active = payload.is_active

    await _commit_and_invalidate(session)
    return await _featured_out(session, featured.id)


async def delete_featured_subcategory(
    session: AsyncSession,
    auth: AuthorizationContext,
    featured_id: str,
) -> None:
    auth.require(Capability.MODERATE)

    featured = await session.get(FeaturedSubcategory, featured_id)
    if featured is None:
        raise NotFoundError("Featured subcategory not found")

    await session.delete(featured)
    await _commit_and_invalidate(session)


async def ranked_category_businesses(
    source: DirectorySource,
    auth: AuthorizationContext,
    category_id: str | None,
) -> list[RankedBusiness]:
    """Best-in candidates of one category: ranked, at least `best_in_min_reviews` reviews."""
    auth.require(Capability.MODERATE)
    if not category_id:
        raise InvalidRequestError("Category ID is required")

    member_ids = await source.business_ids_in_categories([category_id])
    if not member_ids:
        return []

    businesses = await source.fetch_businesses(member_ids)
    if not businesses:
        return []

    visible_ids = [business.id for business in businesses]
    summaries = aggregate_ratings(await source.fetch_review_ratings(visible_ids), business_ids=visible_ids)
    ranked = rank_businesses(visible_ids, summaries, min_reviews=get_settings().best_in_min_reviews)

    names = {business.id: business.name for business in businesses}
    candidates: list[RankedBusiness] = []
    for business_id in ranked[:BEST_IN_CANDIDATES_LIMIT]:
        summary = summary_for(summaries, business_id)
        candidates.append(
            RankedBusiness(
                id=business_id,
                business_name=names[business_id] or "",
                rating=summary.display_rating,
                review_count=summary.count,
            )
        )
    return candidates


# ============================================================
# Category taxonomy
# ============================================================


async def create_category(
    session: AsyncSession,
    auth: AuthorizationContext,
    payload: CategoryIn,
) -> CategoryOut:
    auth.require(Capability.MODERATE)

    name = (payload.name or "").strip()
    if not name:
        raise InvalidRequestError("Category name is required")

    category = Category(name=name, icon=payload.icon, bg_color=payload.bg_color)
    session.add(category)
    await _commit_and_invalidate(session)
    await session.refresh(category)
    logger.info(f"[admin] created category_id={category.id} name={name!r} by={auth.user_id}")
    return CategoryOut(
        id=category.id,
        name=category.name,
        icon=category.icon,
        bg_color=category.bg_color,
        created_at=category.created_at,
    )


async def delete_category(session: AsyncSession, auth: AuthorizationContext, category_id: str) -> None:
    """Delete a category; its subcategories and business links cascade."""
    auth.require(Capability.MODERATE)

    category = await session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")

    await session.delete(category)
    await _commit_and_invalidate(session)
    logger.info(f"[admin] deleted category_id={category_id} by={auth.user_id}")


async def create_subcategory(
    session: AsyncSession,
    auth: AuthorizationContext,
    payload: SubcategoryIn,
) -> SubcategoryOut:
    auth.require(Capability.MODERATE)

    name = (payload.name or "").strip()
    if not name or not payload.category_id:
        raise InvalidRequestError("Subcategory name and category ID are required")
    if await session.get(Category, payload.category_id) is None:
        raise NotFoundError("Category not found")

    subcategory = Subcategory(name=name, category_id=payload.category_id)
    session.add(subcategory)
    await _commit_and_invalidate(session)
    return SubcategoryOut(id=subcategory.id, name=subcategory.name, category_id=subcategory.category_id)
