"""Schemas for the admin moderation endpoints (/admin/*)."""

from datetime import datetime

from pydantic import BaseModel, Field


class AdminStats(BaseModel):
    users: int = Field(ge=0)
    businesses: int = Field(ge=0)
    reviews_this_week: int = Field(alias="reviewsThisWeek", ge=0)

    model_config = {"populate_by_name": True}


class AdminReview(BaseModel):
    id: str
    business_name: str = Field(alias="businessName")
    reviewer_name: str = Field(alias="reviewerName")
    rating: int
    status: str = "Published"
    created_at: datetime | None = Field(alias="createdAt", default=None)

    model_config = {"populate_by_name": True}


class ReviewModeration(BaseModel):
    """Partial update of a review by a moderator."""

    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=5000)
    is_verified: bool | None = Field(alias="isVerified", default=None)

    model_config = {"populate_by_name": True}


class BusinessModeration(BaseModel):
    is_banned: bool = Field(alias="isBanned")

    model_config = {"populate_by_name": True}


class UserModeration(BaseModel):
    is_banned: bool | None = Field(alias="isBanned", default=None)
    role: str | None = Field(default=None, pattern=r"^(user|business|admin)$")

    model_config = {"populate_by_name": True}


class ModerationResult(BaseModel):
    success: bool = True
    id: str


class FeaturedSubcategoryIn(BaseModel):
    subcategory_id: str = Field(alias="subcategoryId", min_length=1)
    is_active: bool = Field(alias="isActive", default=True)

    model_config = {"populate_by_name": True}


class FeaturedSubcategoryUpdate(BaseModel):
    id: str = Field(min_length=1)
    subcategory_id: str | None = Field(alias="subcategoryId", default=None)
    is_active: bool | None = Field(alias="isActive", default=None)

    model_config = {"populate_by_name": True}


class FeaturedSubcategoryOut(BaseModel):
    id: str
    subcategory_id: str = Field(alias="subcategoryId")
    subcategory_name: str | None = Field(alias="subcategoryName", default=None)
    category_name: str | None = Field(alias="categoryName", default=None)
    is_active: bool = Field(alias="isActive")
    created_at: datetime | None = Field(alias="createdAt", default=None)

    model_config = {"populate_by_name": True}


class AdminUser(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    role: str
    is_banned: bool = Field(alias="isBanned")
    created_at: datetime | None = Field(alias="createdAt", default=None)
    review_count: int = Field(alias="reviewCount", ge=0)

    model_config = {"populate_by_name": True}


class AdminBusiness(BaseModel):
    id: str
    business_name: str = Field(alias="businessName")
    category_name: str = Field(alias="categoryName")
    owner_name: str = Field(alias="ownerName")
    owner_email: str = Field(alias="ownerEmail")
    is_banned: bool = Field(alias="isBanned")
    created_at: datetime | None = Field(alias="createdAt", default=None)

    model_config = {"populate_by_name": True}


class RankedBusiness(BaseModel):
    """Candidate for a best-in-category section."""

    id: str
    business_name: str = Field(alias="businessName")
    rating: float
    review_count: int = Field(alias="reviewCount", ge=0)

    model_config = {"populate_by_name": True}


class CategoryIn(BaseModel):
    """Body for POST /admin/categories; a missing name is answered with 400."""

    name: str | None = None
    icon: str | None = None
    bg_color: str | None = Field(alias="bgColor", default=None)

    model_config = {"populate_by_name": True}


class SubcategoryIn(BaseModel):
    name: str | None = None
    category_id: str | None = Field(alias="categoryId", default=None)

    model_config = {"populate_by_name": True}
