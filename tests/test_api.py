"""HTTP-level tests: routing, error format and dependency wiring."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from conftest import FakeDirectory, FakeSession
from reviewhub.main import app
from reviewhub.models import Profile
from reviewhub.routes import deps
from reviewhub.routes import reviews as review_routes
from reviewhub.routes.deps import get_auth_context, get_db_session, get_directory
from reviewhub.schemas import AdminStats, ReviewOut
from reviewhub.services import admin as admin_service
from reviewhub.services.authz import AuthorizationContext
from reviewhub.services.errors import NotFoundError
from reviewhub.services.identity import IdentityUser


async def _no_session():
    yield None


def _as(auth: AuthorizationContext) -> None:
    app.dependency_overrides[get_db_session] = _no_session
    app.dependency_overrides[get_auth_context] = lambda: auth


class BrokenDirectory(FakeDirectory):
    async def active_business_ids(self) -> list[str]:
        raise RuntimeError("connection reset")

    async def count_profiles(self, since=None, until=None) -> int:
        raise RuntimeError("connection reset")


async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


async def test_explore_endpoint(client: AsyncClient, directory):
    app.dependency_overrides[get_directory] = lambda: directory

    response = await client.get("/explore", params={"category": "home", "sort": "reviews"})
    assert response.status_code == 200
    data = response.json()

    assert [row["id"] for row in data["businesses"]] == ["a", "b"]
    first = data["businesses"][0]
    assert first["reviewCount"] == 4
    assert first["rating"] == 4.8
    assert first["imageUrl"] == "https://img.example.com/a.jpg"
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalCount": 2,
        "hasNext": False,
        "hasPrev": False,
    }


async def test_explore_coerces_bad_paging(client: AsyncClient, directory):
    app.dependency_overrides[get_directory] = lambda: directory

    response = await client.get("/explore", params={"page": "abc", "limit": "2"})
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["currentPage"] == 1
    assert len(data["businesses"]) == 2

    # Unknown sort falls back to rating order
    response = await client.get("/explore", params={"sort": "nonsense"})
    assert [row["id"] for row in response.json()["businesses"]] == ["b", "a", "c"]


async def test_explore_store_failure_returns_error_payload(client: AsyncClient):
    app.dependency_overrides[get_directory] = lambda: BrokenDirectory()

    response = await client.get("/explore")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load services"}


async def test_landing_endpoint(client: AsyncClient, directory):
    app.dependency_overrides[get_directory] = lambda: directory

    response = await client.get("/landing", params={"limit": "0"})
    assert response.status_code == 200
    data = response.json()
    assert [service["id"] for service in data["featuredServices"]] == ["a", "c"]
    assert data["stats"]["reviews"] == 9
    assert data["pagination"]["currentPage"] == 1
    assert data["pagination"]["totalReviews"] == 0
    assert data["bestInCategories"] == []


async def test_landing_store_failure_returns_error_payload(client: AsyncClient):
    app.dependency_overrides[get_directory] = lambda: BrokenDirectory()

    response = await client.get("/landing")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load landing page data"}


async def test_admin_requires_login(client: AsyncClient):
    _as(AuthorizationContext.anonymous())

    response = await client.get("/admin/stats")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


async def test_admin_forbidden_for_regular_user(client: AsyncClient):
    _as(AuthorizationContext.from_profile("u1", "user", False))

    response = await client.patch("/admin/businesses/b1", json={"isBanned": True})
    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}


async def test_admin_stats(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    _as(AuthorizationContext.from_profile("a1", "admin", False))

    async def fake_get_stats(session, auth) -> AdminStats:
        return AdminStats(users=5, businesses=2, reviews_this_week=7)

    monkeypatch.setattr(admin_service, "get_stats", fake_get_stats)

    response = await client.get("/admin/stats")
    assert response.status_code == 200
    assert response.json() == {"users": 5, "businesses": 2, "reviewsThisWeek": 7}


async def test_admin_not_found_maps_to_404(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    _as(AuthorizationContext.from_profile("a1", "admin", False))

    async def fake_delete_review(session, auth, review_id) -> None:
        raise NotFoundError("Review not found")

    monkeypatch.setattr(admin_service, "delete_review", fake_delete_review)

    response = await client.delete("/admin/reviews/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Review not found"}


async def test_post_review_requires_login(client: AsyncClient):
    _as(AuthorizationContext.anonymous())

    response = await client.post("/reviews", json={"businessId": "a", "rating": 5})
    assert response.status_code == 401


async def test_post_review_validates_rating(client: AsyncClient):
    _as(AuthorizationContext.from_profile("u1", "user", False))

    response = await client.post("/reviews", json={"businessId": "a", "rating": 6})
    assert response.status_code == 422


class FakeIdentity:
    async def get_user(self, token: str) -> IdentityUser | None:
        return IdentityUser(id="u1", email="u1@example.com") if token == "good" else None


async def test_bearer_token_resolves_profile(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    session = FakeSession(Profile(id="u1", name="Alex", email="u1@example.com", role="user", is_banned=False))

    async def fake_session():
        yield session

    app.dependency_overrides[get_db_session] = fake_session
    monkeypatch.setattr(deps, "get_identity_client", lambda: FakeIdentity())

    seen: list[AuthorizationContext] = []

    async def fake_create_review(session, auth, payload) -> ReviewOut:
        seen.append(auth)
        return ReviewOut(
            id="r1",
            rating=payload.rating,
            business_id=payload.business_id,
            reviewer_id=auth.user_id or "",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

    monkeypatch.setattr(review_routes, "create_review", fake_create_review)

    response = await client.post(
        "/reviews",
        json={"businessId": "a", "rating": 4},
        headers={"Authorization": "Bearer good"},
    )
    assert response.status_code == 201
    assert response.json()["reviewerId"] == "u1"
    assert response.json()["businessId"] == "a"
    assert seen[0].role.value == "user"
    assert seen[0].email == "u1@example.com"

    response = await client.post(
        "/reviews",
        json={"businessId": "a", "rating": 4},
        headers={"Authorization": "Bearer expired"},
    )
    assert response.status_code == 201
    assert seen[1].is_authenticated is False
