"""Explore listing endpoint.

GET /explore - Ranked, filtered, paginated businesses.

Routers are thin: call services for business logic.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from reviewhub.routes.deps import get_directory
from reviewhub.schemas import ExploreResponse
from reviewhub.services.directory import DirectorySource
from reviewhub.services.explore import ExploreFilters, explore_businesses
from reviewhub.services.pagination import coerce_positive_int
from reviewhub.services.ratings import SortMode
from reviewhub.settings import get_settings

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/explore", response_model=ExploreResponse)
async def get_explore(
    search: str | None = Query(default=None, description="Free-text query (name, location, address, category)"),
    category: str | None = Query(default=None, description="Category id, or 'all'"),
    subcategory: str | None = Query(default=None, description="Subcategory name (case-insensitive)"),
    sort: str | None = Query(default=None, description="rating | reviews | recent", examples=["rating"]),
    page: str | None = Query(default=None, description="1-based page number"),
    limit: str | None = Query(default=None, description="Page size"),
    directory: DirectorySource = Depends(get_directory),
) -> ExploreResponse:
    """Get a page of businesses matching the filters.

    Non-numeric page/limit values are coerced to 1 rather than rejected.
    """
    filters = ExploreFilters(
        search=search or "",
        category=category,
        subcategory=subcategory,
        sort=SortMode.parse(sort),
        page=coerce_positive_int(page, default=1),
        limit=coerce_positive_int(limit, default=get_settings().explore_default_limit),
    )

    try:
        return await explore_businesses(directory, filters)
    except Exception:
        logger.exception("Error in explore API")
        raise HTTPException(status_code=500, detail="Failed to load services")
