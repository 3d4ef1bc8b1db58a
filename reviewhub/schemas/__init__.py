"""Pydantic schemas for API request/response validation."""

from reviewhub.schemas.admin import (
    AdminBusiness,
    AdminReview,
    AdminStats,
    AdminUser,
    BusinessModeration,
    CategoryIn,
    FeaturedSubcategoryIn,
    FeaturedSubcategoryOut,
    FeaturedSubcategoryUpdate,
    ModerationResult,
    RankedBusiness,
    ReviewModeration,
    SubcategoryIn,
    UserModeration,
)
from reviewhub.schemas.common import ErrorResponse, SuccessResponse
from reviewhub.schemas.directory import (
    CategoryOut,
    OwnedBusiness,
    ReviewCreate,
    ReviewOut,
    SubcategoryOut,
)
from reviewhub.schemas.explore import ExploreBusiness, ExplorePagination, ExploreResponse
from reviewhub.schemas.landing import (
    BestInBusiness,
    BestInCategory,
    FeaturedService,
    LandingCategory,
    LandingResponse,
    LandingStats,
    RecentReview,
    ReviewPagination,
)

__all__ = [
    "AdminBusiness",
    "AdminReview",
    "AdminStats",
    "AdminUser",
    "BusinessModeration",
    "CategoryIn",
    "FeaturedSubcategoryIn",
    "FeaturedSubcategoryOut",
    "FeaturedSubcategoryUpdate",
    "ModerationResult",
    "RankedBusiness",
    "ReviewModeration",
    "SubcategoryIn",
    "UserModeration",
    "ErrorResponse",
    "SuccessResponse",
    "CategoryOut",
    "OwnedBusiness",
    "ReviewCreate",
    "ReviewOut",
    "SubcategoryOut",
    "ExploreBusiness",
    "ExplorePagination",
    "ExploreResponse",
    "BestInBusiness",
    "BestInCategory",
    "FeaturedService",
    "LandingCategory",
    "LandingResponse",
    "LandingStats",
    "RecentReview",
    "ReviewPagination",
]
