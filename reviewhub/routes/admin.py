"""Admin moderation endpoints.

Every route requires the MODERATE capability (admins only).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.routes.deps import get_db_session, get_directory, require_capability
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
    ModerationResult,
    RankedBusiness,
    ReviewModeration,
    ReviewOut,
    SubcategoryIn,
    SubcategoryOut,
    SuccessResponse,
    UserModeration,
)
from reviewhub.services import admin as admin_service
from reviewhub.services.authz import AuthorizationContext, Capability
from reviewhub.services.directory import DirectorySource

router = APIRouter()

require_moderator = require_capability(Capability.MODERATE)


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> AdminStats:
    return await admin_service.get_stats(session, auth)


@router.get("/reviews", response_model=list[AdminReview])
async def get_recent_reviews(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> list[AdminReview]:
    return await admin_service.list_recent_reviews(session, auth)


@router.patch("/reviews/{review_id}", response_model=ReviewOut)
async def patch_review(
    review_id: str,
    changes: ReviewModeration,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> ReviewOut:
    return await admin_service.update_review(session, auth, review_id, changes)


@router.delete("/reviews/{review_id}", response_model=SuccessResponse)
async def delete_review(
    review_id: str,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> SuccessResponse:
    await admin_service.delete_review(session, auth, review_id)
    return SuccessResponse()


@router.get("/businesses", response_model=list[AdminBusiness])
async def get_businesses(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> list[AdminBusiness]:
    return await admin_service.list_businesses(session, auth)


@router.patch("/businesses/{business_id}", response_model=ModerationResult)
async def patch_business(
    business_id: str,
    changes: BusinessModeration,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> ModerationResult:
    await admin_service.set_business_ban(session, auth, business_id, changes)
    return ModerationResult(id=business_id)


@router.get("/users", response_model=list[AdminUser])
async def get_users(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> list[AdminUser]:
    return await admin_service.list_users(session, auth)


@router.patch("/users/{user_id}", response_model=ModerationResult)
async def patch_user(
    user_id: str,
    changes: UserModeration,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> ModerationResult:
    await admin_service.update_user(session, auth, user_id, changes)
    return ModerationResult(id=user_id)


@router.get("/best-in-categories", response_model=list[FeaturedSubcategoryOut])
async def get_featured_subcategories(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> list[FeaturedSubcategoryOut]:
    return await admin_service.list_featured_subcategories(session, auth)


@router.post("/best-in-categories", response_model=FeaturedSubcategoryOut)
async def post_featured_subcategory(
    payload: FeaturedSubcategoryIn,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> FeaturedSubcategoryOut:
    return await admin_service.create_featured_subcategory(session, auth, payload)


@router.put("/best-in-categories", response_model=FeaturedSubcategoryOut)
async def put_featured_subcategory(
    payload: FeaturedSubcategoryUpdate,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> FeaturedSubcategoryOut:
    return await admin_service.update_featured_subcategory(session, auth, payload)


@router.delete("/best-in-categories", response_model=SuccessResponse)
async def delete_featured_subcategory(
    id: str = Query(min_length=1, description="Featured subcategory id"),
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> SuccessResponse:
    await admin_service.delete_featured_subcategory(session, auth, id)
    return SuccessResponse()


@router.get("/best-in-categories/businesses", response_model=list[RankedBusiness])
async def get_best_in_candidates(
    category_id: str | None = Query(default=None, description="Category to rank"),
    directory: DirectorySource = Depends(get_directory),
    auth: AuthorizationContext = Depends(require_moderator),
) -> list[RankedBusiness]:
    """Top 20 businesses of a category with enough reviews to be featured."""
    return await admin_service.ranked_category_businesses(directory, auth, category_id)


@router.post("/categories", response_model=CategoryOut)
async def post_category(
    payload: CategoryIn,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> CategoryOut:
    return await admin_service.create_category(session, auth, payload)


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: str,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> SuccessResponse:
    await admin_service.delete_category(session, auth, category_id)
    return SuccessResponse()


@router.post("/subcategories", response_model=SubcategoryOut)
async def post_subcategory(
    payload: SubcategoryIn,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(require_moderator),
) -> SubcategoryOut:
    return await admin_service.create_subcategory(session, auth, payload)
