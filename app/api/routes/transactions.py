# app/api/routes/transactions.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_existing_user, require_existing_user
from app.core.database import get_async_session
from app.core.errors import InternalError, MissingRequiredAttribute, NotFound
from app.crud.account import get_account_by_id
from app.crud.category import resolve_category
from app.crud.transaction import (
    create_transaction_for_user,
    delete_transaction_for_user,
    get_transactions_for_user,
    update_transaction_for_user,
)
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.transaction import TransactionCreate, TransactionRead, TransactionUpdate

router = APIRouter(prefix="/transactions", tags=["transactions"])
logger = logging.getLogger(__name__)

@router.post("", response_model=TransactionRead)
async def create_transaction(
    tx_in: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    try:
        # The account must belong to the caller as well
        account = await get_account_by_id(tx_in.account_id, user.id, db)
        if account is None:
            raise NotFound("Account not found")
        category = await resolve_category(tx_in.category, user.id, db)
        return await create_transaction_for_user(user.id, tx_in, category.id, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Create transaction error: {str(e)}")
        raise InternalError("Failed to create transaction")

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    db: AsyncSession = Depends(get_async_session),
    user: Optional[User] = Depends(get_existing_user),
):
    if user is None:
        return []
    try:
        return await get_transactions_for_user(user.id, db)
    except SQLAlchemyError as e:
        logger.error(f"Get transactions error: {str(e)}")
        raise InternalError("Failed to fetch transactions")

@router.put("/{transaction_id}", response_model=MessageResponse)
async def update_transaction(
    transaction_id: int,
    tx_in: TransactionUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    values = tx_in.model_dump(exclude_unset=True, exclude_none=True, exclude={"category"})
    if not values and not tx_in.category:
        raise MissingRequiredAttribute(message="No fields provided for update")
    try:
        if "account_id" in values:
            account = await get_account_by_id(values["account_id"], user.id, db)
            if account is None:
                raise NotFound("Account not found")
        if tx_in.category:
            category = await resolve_category(tx_in.category, user.id, db)
            values["category_id"] = category.id
        updated = await update_transaction_for_user(transaction_id, user.id, values, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Update transaction error: {str(e)}")
        raise InternalError("Failed to update transaction")
    if updated == 0:
        raise NotFound("Transaction not found")
    return {"message": "Transaction updated"}

@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(require_existing_user),
):
    try:
        deleted = await delete_transaction_for_user(transaction_id, user.id, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Delete transaction error: {str(e)}")
        raise InternalError("Failed to delete transaction")
    if deleted == 0:
        raise NotFound("Transaction not found")
    return {"message": "Transaction deleted"}
