"""Postgres implementation of the directory read queries.

One method per round trip; no ranking or filtering logic beyond what the
query itself expresses. Banned businesses are excluded at the query level.
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.models import (
    Business,
    BusinessCategory,
    BusinessImage,
    BusinessSubcategory,
    Category,
    FeaturedSubcategory,
    Profile,
    Review,
    Subcategory,
)
from reviewhub.services.directory import (
    BusinessRecord,
    CategoryRecord,
    FeaturedSubcategoryRecord,
    RecentReviewRecord,
)
from reviewhub.services.ratings import ReviewRating


def _contains(query: str) -> str:
    """Build an ILIKE pattern matching `query` anywhere, with wildcards escaped."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostgresDirectory:
    """Directory queries bound to one request-scoped session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _ids(self, query) -> list[str]:
        result = await self.session.execute(query)
        return [str(row) for row in result.scalars().all()]

    # ============================================================
    # Explore candidate sets
    # ============================================================

    async def active_business_ids(self) -> list[str]:
        return await self._ids(
            select(Business.id).where(Business.is_banned.is_(False)).order_by(Business.created_at.desc())
        )

    async def search_business_ids(self, query: str) -> list[str]:
        pattern = _contains(query)
        return await self._ids(
            select(Business.id)
            .where(Business.is_banned.is_(False))
            .where(
                or_(
                    Business.business_name.ilike(pattern, escape="\\"),
                    Business.location.ilike(pattern, escape="\\"),
                    Business.address.ilike(pattern, escape="\\"),
                )
            )
        )

    async def category_ids_matching(self, query: str) -> list[str]:
        return await self._ids(select(Category.id).where(Category.name.ilike(_contains(query), escape="\\")))

    async def subcategory_ids_matching(self, query: str) -> list[str]:
        return await self._ids(
            select(Subcategory.id).where(Subcategory.name.ilike(_contains(query), escape="\\"))
        )

    async def business_ids_in_categories(self, category_ids: Sequence[str]) -> list[str]:
        if not category_ids:
            return []
        return await self._ids(
            select(BusinessCategory.business_id)
            .where(BusinessCategory.category_id.in_(list(category_ids)))
            .distinct()
        )

    async def business_ids_in_subcategories(self, subcategory_ids: Sequence[str]) -> list[str]:
        if not subcategory_ids:
            return []
        return await self._ids(
            select(BusinessSubcategory.business_id)
            .where(BusinessSubcategory.subcategory_id.in_(list(subcategory_ids)))
            .distinct()
        )

    async def find_subcategory_id(self, name: str) -> str | None:
        result = await self.session.execute(
            select(Subcategory.id).where(func.lower(Subcategory.name) == name.lower()).limit(1)
        )
        value = result.scalar_one_or_none()
        return str(value) if value is not None else None

    # ============================================================
    # Business details and reviews
    # ============================================================

    async def fetch_businesses(self, business_ids: Sequence[str]) -> list[BusinessRecord]:
        if not business_ids:
            return []

        first_category = (
            select(
                BusinessCategory.business_id.label("business_id"),
                func.min(Category.name).label("category_name"),
            )
            .join(Category, Category.id == BusinessCategory.category_id)
            .group_by(BusinessCategory.business_id)
            .subquery()
        )

        result = await self.session.execute(
            select(Business, first_category.c.category_name)
            .outerjoin(first_category, first_category.c.business_id == Business.id)
            .where(Business.id.in_(list(business_ids)))
            .where(Business.is_banned.is_(False))
        )

        by_id: dict[str, BusinessRecord] = {}
        for business, category_name in result.all():
            by_id[business.id] = BusinessRecord(
                id=business.id,
                name=business.business_name,
                location=business.location,
                address=business.address,
                description=business.description,
                website=business.website,
                created_at=business.created_at,
                category_name=category_name,
            )

        # Preserve caller order (candidate order feeds the stable sort)
        return [by_id[business_id] for business_id in business_ids if business_id in by_id]

    async def fetch_review_ratings(self, business_ids: Sequence[str]) -> list[ReviewRating]:
        if not business_ids:
            return []
        result = await self.session.execute(
            select(Review.reviewee_id, Review.rating).where(Review.reviewee_id.in_(list(business_ids)))
        )
        return [ReviewRating(business_id=business_id, rating=rating) for business_id, rating in result.all()]

    async def fetch_primary_images(self, business_ids: Sequence[str]) -> dict[str, str]:
        if not business_ids:
            return {}
        result = await self.session.execute(
            select(BusinessImage.business_id, BusinessImage.image_url)
            .where(BusinessImage.business_id.in_(list(business_ids)))
            .where(BusinessImage.is_primary.is_(True))
            .order_by(BusinessImage.created_at.asc())
        )
        images: dict[str, str] = {}
        for business_id, image_url in result.all():
            images.setdefault(business_id, image_url)
        return images

    async def fetch_cover_images(self, business_ids: Sequence[str]) -> dict[str, str]:
        """Primary image per business, falling back to its oldest image."""
        if not business_ids:
            return {}
        result = await self.session.execute(
            select(BusinessImage.business_id, BusinessImage.image_url)
            .where(BusinessImage.business_id.in_(list(business_ids)))
            .order_by(BusinessImage.is_primary.desc(), BusinessImage.created_at.asc())
        )
        images: dict[str, str] = {}
        for business_id, image_url in result.all():
            images.setdefault(business_id, image_url)
        return images

    # ============================================================
    # Landing feed
    # ============================================================

    async def count_profiles(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> int:
        query = select(func.count(Profile.id))
        if since is not None:
            query = query.where(Profile.created_at >= since)
        if until is not None:
            query = query.where(Profile.created_at < until)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def count_active_businesses(self) -> int:
        result = await self.session.execute(
            select(func.count(Business.id)).where(Business.is_banned.is_(False))
        )
        return result.scalar() or 0

    async def count_reviews(self) -> int:
        result = await self.session.execute(
            select(func.count(Review.id))
            .join(Business, Business.id == Review.reviewee_id)
            .where(Business.is_banned.is_(False))
        )
        return result.scalar() or 0

    async def list_categories_with_counts(self) -> list[CategoryRecord]:
        active_links = (
            select(
                BusinessCategory.category_id.label("category_id"),
                func.count(BusinessCategory.business_id).label("business_count"),
            )
            .join(Business, Business.id == BusinessCategory.business_id)
            .where(Business.is_banned.is_(False))
            .group_by(BusinessCategory.category_id)
            .subquery()
        )
        result = await self.session.execute(
            select(Category, active_links.c.business_count)
            .outerjoin(active_links, active_links.c.category_id == Category.id)
            .order_by(Category.name.asc())
        )
        return [
            CategoryRecord(
                id=category.id,
                name=category.name,
                icon=category.icon,
                bg_color=category.bg_color,
                business_count=business_count or 0,
            )
            for category, business_count in result.all()
        ]

    async def recent_reviews(self, offset: int, limit: int) -> tuple[list[RecentReviewRecord], int]:
        visible = Business.is_banned.is_(False)

        count_result = await self.session.execute(
            select(func.count(Review.id)).join(Business, Business.id == Review.reviewee_id).where(visible)
        )
        total = count_result.scalar() or 0

        result = await self.session.execute(
            select(Review, Business.business_name, Business.website, Profile.name)
            .join(Business, Business.id == Review.reviewee_id)
            .outerjoin(Profile, Profile.id == Review.reviewer_id)
            .where(visible)
            .order_by(Review.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        rows = [
            RecentReviewRecord(
                id=review.id,
                rating=review.rating,
                comment=review.comment,
                created_at=review.created_at,
                business_name=business_name,
                business_website=website,
                reviewer_name=reviewer_name,
            )
            for review, business_name, website, reviewer_name in result.all()
        ]
        return rows, total

    async def active_featured_subcategories(self) -> list[FeaturedSubcategoryRecord]:
        result = await self.session.execute(
            select(
                FeaturedSubcategory.subcategory_id,
                Subcategory.name,
                Category.id,
                Category.name,
            )
            .outerjoin(Subcategory, Subcategory.id == FeaturedSubcategory.subcategory_id)
            .outerjoin(Category, Category.id == Subcategory.category_id)
            .where(FeaturedSubcategory.is_active.is_(True))
            .order_by(FeaturedSubcategory.created_at.asc())
        )
        return [
            FeaturedSubcategoryRecord(
                subcategory_id=subcategory_id,
                subcategory_name=subcategory_name,
                category_id=category_id,
                category_name=category_name,
            )
            for subcategory_id, subcategory_name, category_id, category_name in result.all()
        ]
