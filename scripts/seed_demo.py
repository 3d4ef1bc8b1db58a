#!/usr/bin/env python3
"""Seed database with a small demo directory.

Creates:
- An admin, a business owner and a few reviewers
- Categories and subcategories
- Businesses with images and category links
- Reviews (enough for some businesses to clear the featured threshold)
- One featured subcategory for the landing page

The script is idempotent: rows are looked up by natural key before insert.

Usage:
    python -m scripts.seed_demo
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from reviewhub.models import (
    Business,
    BusinessCategory,
    BusinessImage,
    BusinessSubcategory,
    Category,
    FeaturedSubcategory,
    Profile,
    Review,
    Subcategory,
)
from reviewhub.settings import get_settings

load_dotenv()

# ============================================================
# Demo data definitions
# ============================================================

PROFILES = [
    {"email": "admin@example.com", "name": "Directory Admin", "role": "admin"},
    {"email": "owner@example.com", "name": "Olivia Owner", "role": "business"},
    {"email": "alex@example.com", "name": "Alex", "role": "user"},
    {"email": "sam@example.com", "name": "Sam", "role": "user"},
    {"email": "kim@example.com", "name": "Kim", "role": "user"},
    {"email": "lee@example.com", "name": "Lee", "role": "user"},
]

CATEGORIES = {
    "Home Services": {"icon": "home", "bg_color": "#E0F2FE", "subcategories": ["Plumbing", "Cleaning"]},
    "Food & Drink": {"icon": "utensils", "bg_color": "#FEF3C7", "subcategories": ["Cafes", "Bakeries"]},
}

BUSINESSES = [
    {
        "name": "Pipe Dreams Plumbing",
        "location": "Springfield",
        "address": "12 Main Street",
        "description": "Emergency plumbing, 24/7.",
        "website": "https://pipedreams.example.com",
        "category": "Home Services",
        "subcategory": "Plumbing",
        "image": "https://images.example.com/pipe-dreams.jpg",
        "ratings": [5, 5, 4, 5],
    },
    {
        "name": "Sparkle Cleaners",
        "location": "Springfield",
        "address": "48 Elm Road",
        "description": "Homes and offices.",
        "website": None,
        "category": "Home Services",
        "subcategory": "Cleaning",
        "image": None,
        "ratings": [5, 5],
    },
    {
        "name": "Corner Cafe",
        "location": "Shelbyville",
        "address": "3 Market Square",
        "description": "Coffee and pastries.",
        "website": "https://cornercafe.example.com",
        "category": "Food & Drink",
        "subcategory": "Cafes",
        "image": "https://images.example.com/corner-cafe.jpg",
        "ratings": [3, 3, 3],
    },
]

FEATURED_SUBCATEGORIES = ["Plumbing"]


async def seed_database() -> None:
    """Seed database with demo data."""
    database_url = get_settings().async_database_url

    engine = create_async_engine(database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        print("Seeding database...")

        print("\nCreating profiles...")
        profiles = await seed_profiles(session)

        print("\nCreating categories...")
        categories, subcategories = await seed_categories(session)

        print("\nCreating businesses and reviews...")
        await seed_businesses(session, profiles, categories, subcategories)

        print("\nFeaturing subcategories...")
        await seed_featured(session, subcategories)

        await session.commit()
        print("\nDatabase seeded successfully!")

    await engine.dispose()


async def seed_profiles(session: AsyncSession) -> dict[str, Profile]:
    """Seed profiles and return mapping of email -> profile."""
    profiles: dict[str, Profile] = {}
    for p in PROFILES:
        result = await session.execute(select(Profile).where(Profile.email == p["email"]))
        profile = result.scalar_one_or_none()
        if profile:
            print(f"  - {p['email']} (exists)")
        else:
            profile = Profile(email=p["email"], name=p["name"], role=p["role"])
            session.add(profile)
            await session.flush()
            print(f"  + {p['email']} ({p['role']})")
        profiles[p["email"]] = profile
    return profiles


async def seed_categories(
    session: AsyncSession,
) -> tuple[dict[str, Category], dict[str, Subcategory]]:
    """Seed categories/subcategories and return name -> row mappings."""
    categories: dict[str, Category] = {}
    subcategories: dict[str, Subcategory] = {}

    for name, c in CATEGORIES.items():
        result = await session.execute(select(Category).where(Category.name == name))
        category = result.scalar_one_or_none()
        if not category:
            category = Category(name=name, icon=c["icon"], bg_color=c["bg_color"])
            session.add(category)
            await session.flush()
            print(f"  + {name}")
        categories[name] = category

        for sub_name in c["subcategories"]:
            result = await session.execute(
                select(Subcategory)
                .where(Subcategory.name == sub_name)
                .where(Subcategory.category_id == category.id)
            )
            subcategory = result.scalar_one_or_none()
            if not subcategory:
                subcategory = Subcategory(name=sub_name, category_id=category.id)
                session.add(subcategory)
                await session.flush()
                print(f"    + {sub_name}")
            subcategories[sub_name] = subcategory

    return categories, subcategories


async def seed_businesses(
    session: AsyncSession,
    profiles: dict[str, Profile],
    categories: dict[str, Category],
    subcategories: dict[str, Subcategory],
) -> None:
    """Seed businesses with links, images and reviews."""
    owner = profiles["owner@example.com"]
    reviewers = [profile for profile in profiles.values() if profile.role == "user"]

    for b in BUSINESSES:
        result = await session.execute(select(Business).where(Business.business_name == b["name"]))
        if result.scalar_one_or_none():
            print(f"  - {b['name']} (exists)")
            continue

        business = Business(
            business_name=b["name"],
            business_owner_id=owner.id,
            location=b["location"],
            address=b["address"],
            description=b["description"],
            website=b["website"],
        )
        session.add(business)
        await session.flush()

        session.add(BusinessCategory(business_id=business.id, category_id=categories[b["category"]].id))
        session.add(
            BusinessSubcategory(business_id=business.id, subcategory_id=subcategories[b["subcategory"]].id)
        )
        if b["image"]:
            session.add(BusinessImage(business_id=business.id, image_url=b["image"], is_primary=True))

        for reviewer, rating in zip(reviewers, b["ratings"]):
            session.add(Review(rating=rating, reviewee_id=business.id, reviewer_id=reviewer.id))

        print(f"  + {b['name']} ({len(b['ratings'])} reviews)")


async def seed_featured(session: AsyncSession, subcategories: dict[str, Subcategory]) -> None:
    for name in FEATURED_SUBCATEGORIES:
        subcategory = subcategories[name]
        result = await session.execute(
            select(FeaturedSubcategory).where(FeaturedSubcategory.subcategory_id == subcategory.id)
        )
        if result.scalar_one_or_none():
            print(f"  - {name} (exists)")
            continue
        session.add(FeaturedSubcategory(subcategory_id=subcategory.id, is_active=True))
        print(f"  + {name}")


if __name__ == "__main__":
    asyncio.run(seed_database())
