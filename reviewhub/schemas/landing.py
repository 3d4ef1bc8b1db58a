"""Schemas for the landing feed endpoint (/landing)."""

from datetime import datetime

from pydantic import BaseModel, Field


class LandingStats(BaseModel):
    users: int = Field(ge=0)
    businesses: int = Field(ge=0)
    reviews: int = Field(ge=0)
    monthly_growth: int = Field(alias="monthlyGrowth")

    model_config = {"populate_by_name": True}


class LandingCategory(BaseModel):
    """Category tile with the number of listed businesses."""

    id: str
    name: str
    icon: str | None = None
    bg_color: str | None = Field(alias="bgColor", default=None)
    count: int = Field(ge=0)
    description: str

    model_config = {"populate_by_name": True}


class FeaturedService(BaseModel):
    """Top-rated business card."""

    id: str
    name: str
    category: str
    rating: float
    review_count: int = Field(alias="reviewCount", ge=0)
    image_url: str = Field(alias="imageUrl")

    model_config = {"populate_by_name": True}


class RecentReview(BaseModel):
    id: str
    rating: int
    comment: str | None = None
    created_at: datetime | None = Field(alias="createdAt", default=None)
    business_name: str = Field(alias="businessName")
    reviewer_name: str = Field(alias="reviewerName")
    business_website: str | None = Field(alias="businessWebsite", default=None)

    model_config = {"populate_by_name": True}


class BestInBusiness(BaseModel):
    id: str
    business_name: str = Field(alias="businessName")
    website: str | None = None
    rating: float
    review_count: int = Field(alias="reviewCount", ge=0)

    model_config = {"populate_by_name": True}


class BestInCategory(BaseModel):
    """Featured subcategory section with its top businesses."""

    category_name: str = Field(alias="categoryName")
    category_id: str | None = Field(alias="categoryId", default=None)
    subcategory_id: str | None = Field(alias="subcategoryId", default=None)
    subcategory_name: str | None = Field(alias="subcategoryName", default=None)
    businesses: list[BestInBusiness] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ReviewPagination(BaseModel):
    current_page: int = Field(alias="currentPage", ge=1)
    total_pages: int = Field(alias="totalPages", ge=0)
    total_reviews: int = Field(alias="totalReviews", ge=0)
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    model_config = {"populate_by_name": True}


class LandingResponse(BaseModel):
    """Response payload for GET /landing."""

    stats: LandingStats
    categories: list[LandingCategory] = Field(default_factory=list)
    featured_services: list[FeaturedService] = Field(alias="featuredServices", default_factory=list)
    recent_reviews: list[RecentReview] = Field(alias="recentReviews", default_factory=list)
    best_in_categories: list[BestInCategory] = Field(alias="bestInCategories", default_factory=list)
    pagination: ReviewPagination

    model_config = {"populate_by_name": True}
