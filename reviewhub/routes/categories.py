"""Category taxonomy endpoint.

GET /categories - Categories with their subcategories.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.routes.deps import get_db_session
from reviewhub.schemas import CategoryOut
from reviewhub.services.categories import list_categories

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/categories", response_model=list[CategoryOut])
async def get_categories(session: AsyncSession = Depends(get_db_session)) -> list[CategoryOut]:
    try:
        return await list_categories(session)
    except Exception:
        logger.exception("Error fetching categories")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
