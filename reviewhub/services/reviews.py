"""Review writing and business-owner views.

- create_review: a user submits a rating (1-5) against a visible business;
  the landing cache is dropped once the review is committed
- list_owned_businesses: a business owner sees their listings, rating
  summaries (same aggregator as the public listings) and reviews
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.models import Business, Review
from reviewhub.schemas import OwnedBusiness, ReviewCreate, ReviewOut
from reviewhub.services.authz import AuthorizationContext, Capability
from reviewhub.services.errors import NotFoundError
from reviewhub.services.landing import invalidate_landing_cache
from reviewhub.services.ratings import ReviewRating, aggregate_ratings, summary_for

logger = logging.getLogger("uvicorn.error")


def review_to_schema(review: Review) -> ReviewOut:
    return ReviewOut(
        id=review.id,
        rating=review.rating,
        comment=review.comment,
        business_id=review.reviewee_id,
        reviewer_id=review.reviewer_id,
        is_verified=bool(review.is_verified),
        created_at=review.created_at,
    )


async def create_review(
    session: AsyncSession,
    auth: AuthorizationContext,
    payload: ReviewCreate,
) -> ReviewOut:
    """Create a review by the caller.

    Raises:
        NotAuthenticated / PermissionDenied: caller may not write reviews.
        NotFoundError: business unknown or banned.
    """
    auth.require(Capability.WRITE_REVIEW)

    business = await session.get(Business, payload.business_id)
    if business is None or business.is_banned:
        raise NotFoundError("Business not found")

    comment = payload.comment.strip() if payload.comment else None
    review = Review(
        rating=payload.rating,
        comment=comment or None,
        reviewee_id=business.id,
        reviewer_id=auth.user_id,
    )
    session.add(review)
    await session.commit()
    await session.refresh(review)
    await invalidate_landing_cache()

    logger.info(f"[reviews] created review_id={review.id} business_id={business.id} rating={review.rating}")
    return review_to_schema(review)


async def list_owned_businesses(
    session: AsyncSession,
    auth: AuthorizationContext,
) -> list[OwnedBusiness]:
    """Businesses owned by the caller with rating summaries and newest-first reviews."""
    auth.require(Capability.MANAGE_OWN_BUSINESS)

    result = await session.execute(
        select(Business)
        .where(Business.business_owner_id == auth.user_id)
        .order_by(Business.created_at.asc())
    )
    businesses = list(result.scalars().all())
    if not businesses:
        return []

    business_ids = [business.id for business in businesses]
    reviews_result = await session.execute(
        select(Review).where(Review.reviewee_id.in_(business_ids)).order_by(Review.created_at.desc())
    )
    reviews = list(reviews_result.scalars().all())

    summaries = aggregate_ratings(
        (ReviewRating(business_id=review.reviewee_id, rating=review.rating) for review in reviews),
        business_ids=business_ids,
    )

    owned: list[OwnedBusiness] = []
    for business in businesses:
        summary = summary_for(summaries, business.id)
        owned.append(
            OwnedBusiness(
                id=business.id,
                name=business.business_name,
                is_banned=bool(business.is_banned),
                rating=summary.display_rating,
                review_count=summary.count,
                reviews=[review_to_schema(review) for review in reviews if review.reviewee_id == business.id],
            )
        )
    return owned
