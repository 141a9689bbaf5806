# app/api/routes/accounts.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_existing_user, require_existing_user
from app.core.database import get_async_session
from app.core.errors import InternalError, MissingRequiredAttribute, NotFound
from app.crud.account import (
    create_account_for_user,
    delete_account_for_user,
    get_accounts_for_user,
    update_account_for_user,
)
from app.models.user import User
from app.schemas.account import AccountCreate, AccountRead, AccountUpdate
from app.schemas.base import MessageResponse

router = APIRouter(prefix="/accounts", tags=["accounts"])
logger = logging.getLogger(__name__)

@router.post("", response_model=AccountRead)
async def create_account(
    account_in: AccountCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    try:
        return await create_account_for_user(user.id, account_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create account error: {str(e)}")
        raise InternalError("Failed to create account")

@router.get("", response_model=List[AccountRead])
async def read_accounts(
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_existing_user),
):
    # Listing never creates a user; an unsynced caller simply has nothing yet
    if user is None:
        return []
    try:
        return await get_accounts_for_user(user.id, db)
    except SQLAlchemyError as e:
        logger.error(f"Get accounts error: {str(e)}")
        raise InternalError("Failed to fetch accounts")

@router.put("/{account_id}", response_model=MessageResponse)
async def update_account(
    account_id: int,
    account_in: AccountUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    if not account_in.model_dump(exclude_unset=True, exclude_none=True):
        raise MissingRequiredAttribute(message="No fields provided for update")
    try:
        updated = await update_account_for_user(account_id, user.id, account_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update account error: {str(e)}")
        raise InternalError("Failed to update account")
    if updated == 0:
        raise NotFound("Account not found")
    return {"message": "Account updated"}

@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_account(
    account_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    try:
        deleted = await delete_account_for_user(account_id, user.id, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete account error: {str(e)}")
        raise InternalError("Failed to delete account")
    if deleted == 0:
        raise NotFound("Account not found")
    return {"message": "Account deleted"}
