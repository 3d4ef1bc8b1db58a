"""Shared FastAPI dependencies.

- get_db_session: one pooled session per request, committed on success
- get_directory: directory read queries bound to that session
- get_auth_context: caller identity resolved once per request
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.models import Profile
from reviewhub.services.authz import AuthorizationContext, Capability
from reviewhub.services.directory import DirectorySource
from reviewhub.services.identity import IdentityError, get_identity_client, parse_bearer_token
from reviewhub.stores.directory import PostgresDirectory
from reviewhub.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session() as session:
        yield session


def get_directory(session: AsyncSession = Depends(get_db_session)) -> DirectorySource:
    return PostgresDirectory(session)


async def get_auth_context(
    request: Request,
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_db_session),
) -> AuthorizationContext:
    """Resolve the caller from the bearer token and their profile row.

    Missing/invalid tokens, provider failures and missing profiles all resolve
    to the anonymous context; capability checks decide what that means.
    """
    cached = getattr(request.state, "auth", None)
    if isinstance(cached, AuthorizationContext):
        return cached

    auth = AuthorizationContext.anonymous()
    token = parse_bearer_token(authorization)
    if token:
        try:
            user = await get_identity_client().get_user(token)
        except IdentityError as e:
            logger.warning(f"Identity lookup failed, treating caller as anonymous: {e}")
            user = None

        if user is not None:
            profile = await session.get(Profile, user.id)
            if profile is not None:
                auth = AuthorizationContext.from_profile(
                    user_id=profile.id,
                    role=profile.role,
                    is_banned=profile.is_banned,
                    email=profile.email or user.email,
                )
            else:
                logger.warning(f"No profile for authenticated user_id={user.id}")

    request.state.auth = auth
    return auth


def require_capability(capability: Capability):
    """Dependency factory rejecting callers without `capability` (401/403)."""

    async def _require(auth: AuthorizationContext = Depends(get_auth_context)) -> AuthorizationContext:
        return auth.require(capability)

    return _require
