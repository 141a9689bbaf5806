# app/crud/account.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update, delete
from typing import List, Optional
import uuid

from app.models.account import Account
from app.models.transaction import Transaction
from app.schemas.account import AccountCreate, AccountUpdate

async def get_accounts_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Account]:
    result = await db.execute(
        select(Account).where(Account.user_id == user_id).order_by(Account.id)
    )
    return result.scalars().all()

async def get_account_by_id(account_id: int, user_id: uuid.UUID, db: AsyncSession) -> Optional[Account]:
    result = await db.execute(
        select(Account).where(Account.id == account_id, Account.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_account_for_user(user_id: uuid.UUID, account_in: AccountCreate, db: AsyncSession) -> Account:
    account = Account(**account_in.model_dump(), user_id=user_id)
    db.add(account)
    await db.commit()
    await db.refresh(account)
    return account

async def update_account_for_user(
    account_id: int, user_id: uuid.UUID, account_in: AccountUpdate, db: AsyncSession
) -> int:
    """Returns the number of rows updated; 0 means missing or owned by someone else."""
    result = await db.execute(
        update(Account)
        .where(Account.id == account_id, Account.user_id == user_id)
        .values(**account_in.model_dump(exclude_unset=True, exclude_none=True))
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount

async def delete_account_for_user(account_id: int, user_id: uuid.UUID, db: AsyncSession) -> int:
    """Deletes the account and its transactions in one database transaction."""
    await db.execute(
        delete(Transaction)
        .where(Transaction.account_id == account_id, Transaction.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(
        delete(Account)
        .where(Account.id == account_id, Account.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return 0
    await db.commit()
    return result.rowcount
