"""Landing feed endpoint.

GET /landing - Stats, categories, featured services, recent reviews and
best-in-category sections for the home page.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from reviewhub.routes.deps import get_directory
from reviewhub.schemas import LandingResponse
from reviewhub.services.directory import DirectorySource
from reviewhub.services.landing import get_landing
from reviewhub.services.pagination import coerce_positive_int
from reviewhub.settings import get_settings

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/landing", response_model=LandingResponse)
async def get_landing_feed(
    page: str | None = Query(default=None, description="1-based page of recent reviews"),
    limit: str | None = Query(default=None, description="Recent reviews per page"),
    directory: DirectorySource = Depends(get_directory),
) -> LandingResponse:
    """Get the landing page payload (cached briefly in Redis)."""
    page_number = coerce_positive_int(page, default=1)
    page_size = coerce_positive_int(limit, default=get_settings().landing_default_limit)

    try:
        return await get_landing(directory, page=page_number, limit=page_size)
    except Exception:
        logger.exception("Error fetching landing page data")
        raise HTTPException(status_code=500, detail="Failed to load landing page data")
