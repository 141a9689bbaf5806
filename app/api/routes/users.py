# app/api/routes/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_async_session
from app.core.errors import InternalError
from app.crud.user import list_users, update_profile
from app.models.user import User
from app.schemas.user import UserProfileUpdate, UserRead

router = APIRouter(tags=["User Management"])
logger = logging.getLogger(__name__)

@router.get("/user/profile", response_model=UserRead)
async def read_own_profile(user: User = Depends(get_current_user)):
    """Get current user's profile, creating the record on first visit"""
    return user

@router.put("/user/profile", response_model=UserRead)
async def update_own_profile(
    profile_in: UserProfileUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Update current user's name and preferred currency"""
    try:
        fields = profile_in.model_dump(exclude_unset=True, exclude_none=True)
        if "currency" in fields:
            fields["currency"] = fields["currency"].upper()
        return await update_profile(user, fields, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update user profile error: {str(e)}")
        raise InternalError("Failed to update user profile")

@router.get("/users", response_model=List[UserRead])
async def read_users(
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(require_admin),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
):
    """List users with pagination; admin only"""
    try:
        return await list_users(db, skip=skip, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Get all users error: {str(e)}")
        raise InternalError("Failed to fetch users")
