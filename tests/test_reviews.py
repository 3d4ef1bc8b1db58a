"""Review writing and business-owner view tests (fake session)."""

from datetime import datetime, timezone

import pytest

from conftest import FakeSession
from reviewhub.models import Business, Review
from reviewhub.schemas import ReviewCreate
from reviewhub.services import landing as landing_service
from reviewhub.services.authz import AuthorizationContext, NotAuthenticated, PermissionDenied
from reviewhub.services.errors import NotFoundError
from reviewhub.services.reviews import create_review, list_owned_businesses

USER = AuthorizationContext.from_profile("u1", "user", False)
OWNER = AuthorizationContext.from_profile("o1", "business", False)


def _business(business_id: str = "b1", is_banned: bool = False) -> Business:
    return Business(id=business_id, business_name=f"Business {business_id}", business_owner_id="o1", is_banned=is_banned)


def _review(review_id: str, business_id: str, rating: int, day: int) -> Review:
    return Review(
        id=review_id,
        rating=rating,
        reviewee_id=business_id,
        reviewer_id="u1",
        is_verified=False,
        created_at=datetime(2026, 3, day, tzinfo=timezone.utc),
    )


async def test_create_review_commits_then_clears_landing_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    session = FakeSession(_business())

    async def fake_clear_landing_cache() -> int:
        session.events.append("cache_cleared")
        return 0

    monkeypatch.setattr(landing_service, "clear_landing_cache", fake_clear_landing_cache)

    out = await create_review(session, USER, ReviewCreate(business_id="b1", rating=4, comment="  Great work  "))

    assert out.reviewer_id == "u1"
    assert out.business_id == "b1"
    assert out.comment == "Great work"
    assert session.events == ["add", "commit", "refresh", "cache_cleared"]


async def test_create_review_rejects_banned_business(cache_clears) -> None:
    session = FakeSession(_business(is_banned=True))

    with pytest.raises(NotFoundError) as exc_info:
        await create_review(session, USER, ReviewCreate(business_id="b1", rating=5))

    assert exc_info.value.message == "Business not found"
    assert session.added == []
    assert cache_clears == []


async def test_create_review_rejects_unknown_business(cache_clears) -> None:
    with pytest.raises(NotFoundError):
        await create_review(FakeSession(), USER, ReviewCreate(business_id="missing", rating=5))


async def test_create_review_requires_reviewer_role() -> None:
    session = FakeSession(_business())

    with pytest.raises(PermissionDenied):
        await create_review(session, OWNER, ReviewCreate(business_id="b1", rating=5))
    with pytest.raises(NotAuthenticated):
        await create_review(session, AuthorizationContext.anonymous(), ReviewCreate(business_id="b1", rating=5))
    assert session.events == []


async def test_owned_businesses_group_reviews_per_business() -> None:
    session = FakeSession(
        results=[
            [_business("b1"), _business("b2", is_banned=True)],
            [_review("r1", "b1", 5, 9), _review("r2", "b2", 3, 8), _review("r3", "b1", 4, 7)],
        ]
    )

    owned = await list_owned_businesses(session, OWNER)

    first, second = owned
    assert (first.id, first.rating, first.review_count) == ("b1", 4.5, 2)
    assert [review.id for review in first.reviews] == ["r1", "r3"]
    assert (second.id, second.rating, second.review_count, second.is_banned) == ("b2", 3.0, 1, True)
    assert [review.id for review in second.reviews] == ["r2"]


async def test_owned_businesses_without_listings() -> None:
    session = FakeSession(results=[[]])

    assert await list_owned_businesses(session, OWNER) == []
    assert session.events == ["execute"]


async def test_owned_businesses_requires_business_role() -> None:
    with pytest.raises(PermissionDenied):
        await list_owned_businesses(FakeSession(), USER)
