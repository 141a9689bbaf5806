# app/crud/category.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update, delete, or_
from app.core.config import settings
from app.models.category import Category
from app.models.transaction import Transaction
from typing import List, Optional
import uuid
from app.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

async def get_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    """The user's own categories plus every global one, by name."""
    result = await db.execute(
        select(Category)
        .where(or_(Category.user_id == user_id, Category.user_id.is_(None)))
        .order_by(Category.name, Category.id)
    )
    return result.scalars().all()

async def get_global_category_by_name(name: str, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.user_id.is_(None), Category.name == name)
        .order_by(Category.id)
        .limit(1)
    )
    return result.scalars().first()

async def get_category_by_name_for_user(name: str, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.user_id == user_id, Category.name == name)
        .order_by(Category.id)
        .limit(1)
    )
    return result.scalars().first()

async def create_category_for_user(user_id: uuid.UUID, cat_in: CategoryCreate, db: AsyncSession) -> Category:
    new_cat = Category(**cat_in.model_dump(), user_id=user_id)
    db.add(new_cat)
    await db.commit()
    await db.refresh(new_cat)
    return new_cat

async def resolve_category(name: str, user_id: uuid.UUID, db: AsyncSession) -> Category:
    """
    Find the category a transaction should reference by name.

    Exact-name global category first, then the user's own, otherwise a new
    user-owned category with the default icon is added. A new category is only
    flushed; the caller commits it together with the transaction write.
    """
    category = await get_global_category_by_name(name, db)
    if category is not None:
        return category

    category = await get_category_by_name_for_user(name, user_id, db)
    if category is not None:
        return category

    logger.info(f"Creating category '{name}' for user {user_id}")
    category = Category(user_id=user_id, name=name, icon=settings.DEFAULT_CATEGORY_ICON)
    db.add(category)
    await db.flush()
    return category

async def update_category_for_user(
    category_id: int, user_id: uuid.UUID, cat_in: CategoryUpdate, db: AsyncSession
) -> int:
    # The owner filter can never match a global (NULL owner) category
    result = await db.execute(
        update(Category)
        .where(Category.id == category_id, Category.user_id == user_id)
        .values(**cat_in.model_dump(exclude_unset=True, exclude_none=True))
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount

async def delete_category_for_user(category_id: int, user_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(
        delete(Category)
        .where(Category.id == category_id, Category.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        # Same effect as ON DELETE SET NULL, for backends that don't enforce foreign keys
        await db.execute(
            update(Transaction)
            .where(Transaction.category_id == category_id, Transaction.user_id == user_id)
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
    await db.commit()
    return result.rowcount


# Global categories shared by every user
DEFAULT_CATEGORIES: List[dict] = [
    {"name": "Food", "icon": "🍔", "color": "#F97316"},
    {"name": "Groceries", "icon": "🛒", "color": "#22C55E"},
    {"name": "Transport", "icon": "🚌", "color": "#3B82F6"},
    {"name": "Shopping", "icon": "🛍️", "color": "#EC4899"},
    {"name": "Bills", "icon": "🧾", "color": "#EAB308"},
    {"name": "Entertainment", "icon": "🎬", "color": "#8B5CF6"},
    {"name": "Health", "icon": "💊", "color": "#EF4444"},
    {"name": "Salary", "icon": "💰", "color": "#10B981"},
    {"name": "Other", "icon": "📦", "color": "#6B7280"},
]

async def seed_global_categories(db: AsyncSession) -> List[Category]:
    """Ensure the global categories exist; create missing ones.

    Returns the list of categories that were created (empty if none were needed).
    """
    result = await db.execute(select(Category.name).where(Category.user_id.is_(None)))
    existing_names = {row[0] for row in result.all()}

    categories_to_create: List[Category] = [
        Category(user_id=None, name=cat["name"], icon=cat["icon"], color=cat["color"])
        for cat in DEFAULT_CATEGORIES
        if cat["name"] not in existing_names
    ]

    if categories_to_create:
        db.add_all(categories_to_create)
        await db.commit()
        for c in categories_to_create:
            await db.refresh(c)

    return categories_to_create
