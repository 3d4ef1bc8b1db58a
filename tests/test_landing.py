"""Landing feed tests against the in-memory directory (Redis not initialized)."""

from datetime import datetime, timedelta, timezone

from conftest import FakeBusiness
from reviewhub.services.directory import RecentReviewRecord
from reviewhub.services.landing import build_landing, featured_services, get_landing, monthly_growth

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def test_monthly_growth() -> None:
    assert monthly_growth(15, 10) == 50
    assert monthly_growth(5, 10) == -50
    assert monthly_growth(3, 0) == 0


async def test_featured_services_require_three_reviews_in_ranked_order(directory) -> None:
    featured = await featured_services(directory)

    # B has a perfect average but only two reviews; X is banned
    assert [service.id for service in featured] == ["a", "c"]
    assert featured[0].rating == 4.8
    assert featured[0].review_count == 4
    assert featured[0].image_url == "https://img.example.com/a.jpg"
    # Cover image falls back to a non-primary picture
    assert featured[1].image_url == "https://img.example.com/c.jpg"
    assert featured[1].category == "Food & Drink"


async def test_featured_services_capped_at_three(directory) -> None:
    for bid in ("d", "e"):
        directory.businesses.append(FakeBusiness(id=bid, name=bid.upper()))
        directory.reviews.extend([(bid, 4), (bid, 4), (bid, 4)])

    featured = await featured_services(directory)
    assert [service.id for service in featured] == ["a", "d", "e"]


async def test_best_in_categories_sections(directory) -> None:
    directory.featured = ["plumbing", "cafes"]
    landing = await build_landing(directory, page=1, limit=8, now=NOW)

    plumbing, cafes = landing.best_in_categories
    assert plumbing.category_name == "Home Services - Plumbing"
    assert plumbing.subcategory_id == "plumbing"
    assert [b.id for b in plumbing.businesses] == ["a"]
    assert cafes.category_name == "Food & Drink - Cafes"
    assert [b.id for b in cafes.businesses] == ["c"]
    assert cafes.businesses[0].rating == 3.0


async def test_stats_and_categories(directory) -> None:
    directory.profile_created = [
        NOW - timedelta(days=1),
        NOW - timedelta(days=10),
        NOW - timedelta(days=45),
        NOW - timedelta(days=200),
    ]
    landing = await build_landing(directory, page=1, limit=8, now=NOW)

    assert landing.stats.users == 4
    assert landing.stats.businesses == 3
    assert landing.stats.reviews == 9
    assert landing.stats.monthly_growth == 100

    categories = {category.name: category for category in landing.categories}
    assert [category.name for category in landing.categories] == ["Food & Drink", "Home Services"]
    assert categories["Home Services"].count == 2
    assert categories["Home Services"].description == "Home Services services"


async def test_recent_reviews_page(directory) -> None:
    directory.recent = [
        RecentReviewRecord(
            id=f"r{i}",
            rating=4,
            comment=None,
            created_at=NOW - timedelta(hours=i),
            business_name="Corner Cafe" if i % 2 else None,
            business_website=None,
            reviewer_name=None,
        )
        for i in range(5)
    ]
    landing = await build_landing(directory, page=2, limit=2, now=NOW)

    assert [review.id for review in landing.recent_reviews] == ["r2", "r3"]
    assert landing.recent_reviews[0].business_name == "Unknown Business"
    assert landing.recent_reviews[0].reviewer_name == "Anonymous User"
    assert landing.pagination.model_dump(by_alias=True) == {
        "currentPage": 2,
        "totalPages": 3,
        "totalReviews": 5,
        "hasNext": True,
        "hasPrev": True,
    }


async def test_get_landing_works_without_redis(directory) -> None:
    landing = await get_landing(directory, page=1, limit=8)
    assert [service.id for service in landing.featured_services] == ["a", "c"]


class MemoryRedis:
    """Just enough of redis.asyncio.Redis for the landing cache."""

    def __init__(self):
        self.values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.values[key] = value

    async def scan_iter(self, match: str):
        prefix = match.rstrip("*")
        for key in list(self.values):
            if key.startswith(prefix):
                yield key

    async def delete(self, key: str) -> int:
        return 1 if self.values.pop(key, None) is not None else 0


async def test_get_landing_serves_cached_payload(directory, monkeypatch) -> None:
    from reviewhub.stores import redis as redis_store

    fake = MemoryRedis()
    monkeypatch.setattr(redis_store, "_redis", fake)

    first = await get_landing(directory, page=1, limit=8)
    assert list(fake.values) == ["landing:1:8"]

    # Changes in the store are not visible until the cache is cleared
    directory.reviews.extend([("b", 5)])
    cached = await get_landing(directory, page=1, limit=8)
    assert cached.model_dump() == first.model_dump()

    assert await redis_store.clear_landing_cache() == 1
    fresh = await get_landing(directory, page=1, limit=8)
    assert [service.id for service in fresh.featured_services] == ["b", "a", "c"]
