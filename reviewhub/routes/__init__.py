"""API routes."""

from fastapi import APIRouter

from reviewhub.routes import admin, categories, explore, landing, reviews

api_router = APIRouter()

# Public listing endpoints
api_router.include_router(explore.router, tags=["explore"])
api_router.include_router(landing.router, tags=["landing"])
api_router.include_router(categories.router, tags=["categories"])

# Authenticated review endpoints (users, business owners)
api_router.include_router(reviews.router, tags=["reviews"])

# Admin moderation endpoints
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
