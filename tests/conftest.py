"""Shared fixtures: an in-memory directory and an ASGI test client."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from reviewhub.main import app
from reviewhub.services.directory import (
    BusinessRecord,
    CategoryRecord,
    FeaturedSubcategoryRecord,
    RecentReviewRecord,
)
from reviewhub.services.ratings import ReviewRating


@dataclass
class FakeBusiness:
    id: str
    name: str
    location: str | None = None
    address: str | None = None
    description: str | None = None
    website: str | None = None
    created_at: datetime | None = None
    is_banned: bool = False


@dataclass
class FakeDirectory:
    """In-memory DirectorySource; records every call in `calls`."""

    businesses: list[FakeBusiness] = field(default_factory=list)
    categories: dict[str, str] = field(default_factory=dict)  # id -> name
    subcategories: dict[str, str] = field(default_factory=dict)  # id -> name
    subcategory_parent: dict[str, str] = field(default_factory=dict)  # subcategory id -> category id
    category_links: list[tuple[str, str]] = field(default_factory=list)  # (business_id, category_id)
    subcategory_links: list[tuple[str, str]] = field(default_factory=list)  # (business_id, subcategory_id)
    reviews: list[tuple[str, int]] = field(default_factory=list)  # (business_id, rating)
    images: list[tuple[str, str, bool]] = field(default_factory=list)  # (business_id, url, is_primary)
    profile_created: list[datetime] = field(default_factory=list)
    recent: list[RecentReviewRecord] = field(default_factory=list)
    featured: list[str] = field(default_factory=list)  # subcategory ids
    calls: list[str] = field(default_factory=list)

    def _visible(self) -> list[FakeBusiness]:
        return [b for b in self.businesses if not b.is_banned]

    async def active_business_ids(self) -> list[str]:
        self.calls.append("active_business_ids")
        return [b.id for b in self._visible()]

    async def search_business_ids(self, query: str) -> list[str]:
        self.calls.append("search_business_ids")
        q = query.lower()
        return [
            b.id
            for b in self._visible()
            if any(q in (value or "").lower() for value in (b.name, b.location, b.address))
        ]

    async def category_ids_matching(self, query: str) -> list[str]:
        self.calls.append("category_ids_matching")
        return [cid for cid, name in self.categories.items() if query.lower() in name.lower()]

    async def subcategory_ids_matching(self, query: str) -> list[str]:
        self.calls.append("subcategory_ids_matching")
        return [sid for sid, name in self.subcategories.items() if query.lower() in name.lower()]

    async def business_ids_in_categories(self, category_ids: Sequence[str]) -> list[str]:
        self.calls.append("business_ids_in_categories")
        return [bid for bid, cid in self.category_links if cid in category_ids]

    async def business_ids_in_subcategories(self, subcategory_ids: Sequence[str]) -> list[str]:
        self.calls.append("business_ids_in_subcategories")
        return [bid for bid, sid in self.subcategory_links if sid in subcategory_ids]

    async def find_subcategory_id(self, name: str) -> str | None:
        self.calls.append("find_subcategory_id")
        for sid, sub_name in self.subcategories.items():
            if sub_name.lower() == name.lower():
                return sid
        return None

    async def fetch_businesses(self, business_ids: Sequence[str]) -> list[BusinessRecord]:
        self.calls.append("fetch_businesses")
        by_id = {b.id: b for b in self._visible()}
        records = []
        for bid in business_ids:
            b = by_id.get(bid)
            if b is None:
                continue
            names = sorted(self.categories[cid] for link_bid, cid in self.category_links if link_bid == bid)
            records.append(
                BusinessRecord(
                    id=b.id,
                    name=b.name,
                    location=b.location,
                    address=b.address,
                    description=b.description,
                    website=b.website,
                    created_at=b.created_at,
                    category_name=names[0] if names else None,
                )
            )
        return records

    async def fetch_review_ratings(self, business_ids: Sequence[str]) -> list[ReviewRating]:
        self.calls.append("fetch_review_ratings")
        return [ReviewRating(business_id=bid, rating=r) for bid, r in self.reviews if bid in business_ids]

    async def fetch_primary_images(self, business_ids: Sequence[str]) -> dict[str, str]:
        self.calls.append("fetch_primary_images")
        images: dict[str, str] = {}
        for bid, url, primary in self.images:
            if primary and bid in business_ids:
                images.setdefault(bid, url)
        return images

    async def fetch_cover_images(self, business_ids: Sequence[str]) -> dict[str, str]:
        self.calls.append("fetch_cover_images")
        images = await self.fetch_primary_images(business_ids)
        for bid, url, _primary in self.images:
            if bid in business_ids:
                images.setdefault(bid, url)
        return images

    async def count_profiles(self, since: datetime | None = None, until: datetime | None = None) -> int:
        return sum(
            1
            for created in self.profile_created
            if (since is None or created >= since) and (until is None or created < until)
        )

    async def count_active_businesses(self) -> int:
        return len(self._visible())

    async def count_reviews(self) -> int:
        visible = {b.id for b in self._visible()}
        return sum(1 for bid, _ in self.reviews if bid in visible)

    async def list_categories_with_counts(self) -> list[CategoryRecord]:
        visible = {b.id for b in self._visible()}
        return [
            CategoryRecord(
                id=cid,
                name=name,
                business_count=sum(1 for bid, link_cid in self.category_links if link_cid == cid and bid in visible),
            )
            for cid, name in sorted(self.categories.items(), key=lambda item: item[1])
        ]

    async def recent_reviews(self, offset: int, limit: int) -> tuple[list[RecentReviewRecord], int]:
        return self.recent[offset : offset + limit], len(self.recent)

    async def active_featured_subcategories(self) -> list[FeaturedSubcategoryRecord]:
        records = []
        for sid in self.featured:
            cid = self.subcategory_parent.get(sid)
            records.append(
                FeaturedSubcategoryRecord(
                    subcategory_id=sid,
                    subcategory_name=self.subcategories.get(sid),
                    category_id=cid,
                    category_name=self.categories.get(cid) if cid else None,
                )
            )
        return records


class FakeResult:
    """Rows returned by FakeSession.execute; supports `.all()` and `.scalars().all()`."""

    def __init__(self, rows):
        self._rows = list(rows)

    def scalars(self) -> "FakeResult":
        return self

    def all(self) -> list:
        return list(self._rows)


class FakeSession:
    """Enough of AsyncSession for the write services; `events` records the call order."""

    def __init__(self, *rows, results=()):
        self.rows = {(type(row), row.id): row for row in rows}
        self.results = list(results)
        self.added: list = []
        self.deleted: list = []
        self.events: list[str] = []

    async def get(self, model, key):
        return self.rows.get((model, key))

    async def execute(self, statement) -> FakeResult:
        self.events.append("execute")
        return FakeResult(self.results.pop(0))

    def add(self, row) -> None:
        self.added.append(row)
        self.events.append("add")

    async def delete(self, row) -> None:
        self.deleted.append(row)
        self.events.append("delete")

    def _assign_ids(self) -> None:
        for number, row in enumerate(self.added, start=1):
            if getattr(row, "id", None) is None:
                row.id = f"{type(row).__name__.lower()}-{number}"

    async def flush(self) -> None:
        self._assign_ids()
        self.events.append("flush")

    async def commit(self) -> None:
        self._assign_ids()
        self.events.append("commit")

    async def refresh(self, row) -> None:
        self.events.append("refresh")


def ts(day: int) -> datetime:
    return datetime(2026, 1, day, tzinfo=timezone.utc)


@pytest.fixture
def directory() -> FakeDirectory:
    """Small directory: three businesses in two categories plus one banned listing.

    Ratings: A = 5,5,4,5 (4.75 avg), B = 5,5 (5.0 avg), C = 3,3,3 (3.0 avg).
    """
    return FakeDirectory(
        businesses=[
            FakeBusiness(id="a", name="Pipe Dreams Plumbing", location="Springfield", created_at=ts(1)),
            FakeBusiness(id="b", name="Sparkle Cleaners", location="Springfield", created_at=ts(3)),
            FakeBusiness(id="c", name="Corner Cafe", location="Shelbyville", address="3 Market Square", created_at=ts(2)),
            FakeBusiness(id="x", name="Banned Plumbing", location="Springfield", created_at=ts(4), is_banned=True),
        ],
        categories={"home": "Home Services", "food": "Food & Drink"},
        subcategories={"plumbing": "Plumbing", "cafes": "Cafes"},
        subcategory_parent={"plumbing": "home", "cafes": "food"},
        category_links=[("a", "home"), ("b", "home"), ("c", "food"), ("x", "home")],
        subcategory_links=[("a", "plumbing"), ("c", "cafes"), ("x", "plumbing")],
        reviews=[
            ("a", 5), ("a", 5), ("a", 4), ("a", 5),
            ("b", 5), ("b", 5),
            ("c", 3), ("c", 3), ("c", 3),
            ("x", 5), ("x", 5), ("x", 5),
        ],
        images=[("a", "https://img.example.com/a.jpg", True), ("c", "https://img.example.com/c.jpg", False)],
    )


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def cache_clears(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Record landing cache invalidations instead of talking to Redis."""
    from reviewhub.services import landing as landing_service

    calls: list[str] = []

    async def fake_clear_landing_cache() -> int:
        calls.append("cache_cleared")
        return 0

    monkeypatch.setattr(landing_service, "clear_landing_cache", fake_clear_landing_cache)
    return calls
