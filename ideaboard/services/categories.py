"""Category administration."""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import Conflict, NotFound
from ideaboard.models.category import Category
from ideaboard.models.idea import Idea

logger = logging.getLogger(__name__)


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name, Category.id))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    return category


async def create_category(
    db: AsyncSession, name: str, description: Optional[str], owner_id: Optional[int]
) -> Category:
    category = Category(name=name, description=description, user_id=owner_id)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    logger.info("Created category %s (%s)", category.id, category.name)
    return category


async def update_category(
    db: AsyncSession,
    category_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Category:
    category = await get_category(db, category_id)
    if name is not None:
        category.name = name
    if description is not None:
        category.description = description
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    """Delete an empty category; ideas are never orphaned or cascaded."""
    category = await get_category(db, category_id)
    in_use = (
        await db.execute(select(func.count(Idea.id)).where(Idea.category_id == category_id))
    ).scalar() or 0
    if in_use:
        raise Conflict(f"Category still has {in_use} idea(s)")
    await db.delete(category)
    await db.commit()
    logger.info("Deleted category %s", category_id)
