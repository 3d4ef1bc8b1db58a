"""Review endpoints.

POST /reviews          - Submit a review (users)
GET  /business/reviews - Reviews of the caller's own businesses (business owners)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.routes.deps import get_auth_context, get_db_session
from reviewhub.schemas import OwnedBusiness, ReviewCreate, ReviewOut
from reviewhub.services.authz import AuthorizationContext
from reviewhub.services.reviews import create_review, list_owned_businesses

router = APIRouter()


@router.post("/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
async def post_review(
    payload: ReviewCreate,
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(get_auth_context),
) -> ReviewOut:
    return await create_review(session, auth, payload)


@router.get("/business/reviews", response_model=list[OwnedBusiness])
async def get_own_business_reviews(
    session: AsyncSession = Depends(get_db_session),
    auth: AuthorizationContext = Depends(get_auth_context),
) -> list[OwnedBusiness]:
    return await list_owned_businesses(session, auth)
