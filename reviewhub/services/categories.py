"""Public category taxonomy listing."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewhub.models import Category, Subcategory
from reviewhub.schemas import CategoryOut, SubcategoryOut


async def list_categories(session: AsyncSession) -> list[CategoryOut]:
    """All categories ordered by name, each with its subcategories ordered by name."""
    categories_result = await session.execute(select(Category).order_by(Category.name.asc()))
    categories = list(categories_result.scalars().all())

    subcategories_result = await session.execute(select(Subcategory).order_by(Subcategory.name.asc()))
    by_category: dict[str, list[SubcategoryOut]] = {}
    for subcategory in subcategories_result.scalars().all():
        by_category.setdefault(subcategory.category_id, []).append(
            SubcategoryOut(id=subcategory.id, name=subcategory.name, category_id=subcategory.category_id)
        )

    return [
        CategoryOut(
            id=category.id,
            name=category.name,
            icon=category.icon,
            bg_color=category.bg_color,
            created_at=category.created_at,
            subcategories=by_category.get(category.id, []),
        )
        for category in categories
    ]
