"""Schemas for the explore listing endpoint (/explore)."""

from pydantic import BaseModel, Field


class ExploreBusiness(BaseModel):
    """A single business row in the explore listing."""

    id: str
    name: str
    location: str = ""
    address: str = ""
    description: str = ""
    rating: float
    review_count: int = Field(alias="reviewCount", ge=0)
    image_url: str = Field(alias="imageUrl")
    category: str

    model_config = {"populate_by_name": True}


class ExplorePagination(BaseModel):
    current_page: int = Field(alias="currentPage", ge=1)
    total_pages: int = Field(alias="totalPages", ge=0)
    total_count: int = Field(alias="totalCount", ge=0)
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    model_config = {"populate_by_name": True}


class ExploreResponse(BaseModel):
    """Response payload for GET /explore."""

    businesses: list[ExploreBusiness] = Field(default_factory=list)
    pagination: ExplorePagination
