"""Schemas for public directory endpoints (categories, reviews, owner views)."""

from datetime import datetime

from pydantic import BaseModel, Field


class SubcategoryOut(BaseModel):
    id: str
    name: str
    category_id: str = Field(alias="categoryId")

    model_config = {"populate_by_name": True, "from_attributes": True}


class CategoryOut(BaseModel):
    id: str
    name: str
    icon: str | None = None
    bg_color: str | None = Field(alias="bgColor", default=None)
    created_at: datetime | None = Field(alias="createdAt", default=None)
    subcategories: list[SubcategoryOut] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "from_attributes": True}


class ReviewCreate(BaseModel):
    """Request body for POST /reviews."""

    business_id: str = Field(alias="businessId", min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=5000)

    model_config = {"populate_by_name": True}


class ReviewOut(BaseModel):
    id: str
    rating: int
    comment: str | None = None
    business_id: str = Field(alias="businessId")
    reviewer_id: str = Field(alias="reviewerId")
    is_verified: bool = Field(alias="isVerified", default=False)
    created_at: datetime | None = Field(alias="createdAt", default=None)

    model_config = {"populate_by_name": True}


class OwnedBusiness(BaseModel):
    """A business owned by the caller with its rating summary and reviews."""

    id: str
    name: str
    is_banned: bool = Field(alias="isBanned")
    rating: float
    review_count: int = Field(alias="reviewCount", ge=0)
    reviews: list[ReviewOut] = Field(default_factory=list)

    model_config = {"populate_by_name": True}
