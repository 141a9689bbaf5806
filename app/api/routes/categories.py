# app/api/routes/categories.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_existing_user, require_existing_user
from app.core.database import get_async_session
from app.core.errors import InternalError, MissingRequiredAttribute, NotFound
from app.crud.category import (
    create_category_for_user,
    delete_category_for_user,
    get_categories_for_user,
    update_category_for_user,
)
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter(prefix="/categories", tags=["categories"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[CategoryRead])
async def read_categories(
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_existing_user),
):
    try:
        if user is None:
            return []
        return await get_categories_for_user(user.id, db)
    except SQLAlchemyError as e:
        logger.error(f"Get categories error: {str(e)}")
        raise InternalError("Failed to fetch categories")

@router.post("", response_model=CategoryRead)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    try:
        return await create_category_for_user(user.id, cat_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create category error: {str(e)}")
        raise InternalError("Failed to create category")

@router.put("/{category_id}", response_model=MessageResponse)
async def update_category(
    category_id: int,
    cat_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    if not cat_in.model_dump(exclude_unset=True, exclude_none=True):
        raise MissingRequiredAttribute(message="No fields provided for update")
    try:
        updated = await update_category_for_user(category_id, user.id, cat_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update category error: {str(e)}")
        raise InternalError("Failed to update category")
    # Global categories land here too: they have no owner to match
    if updated == 0:
        raise NotFound("Category not found")
    return {"message": "Category updated"}

@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    try:
        deleted = await delete_category_for_user(category_id, user.id, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete category error: {str(e)}")
        raise InternalError("Failed to delete category")
    if deleted == 0:
        raise NotFound("Category not found")
    return {"message": "Category deleted"}
