# app/crud/transaction.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import desc, update, delete
from app.models.transaction import Transaction
from typing import List, Optional
import uuid
from app.schemas.transaction import TransactionCreate

async def get_transactions_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Transaction]:
    """All of the user's transactions with account and category, newest first."""
    result = await db.execute(
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(desc(Transaction.date), desc(Transaction.id))
    )
    return result.scalars().all()

async def get_transaction_by_id(transaction_id: int, user_id: uuid.UUID, db: AsyncSession) -> Optional[Transaction]:
    result = await db.execute(
        select(Transaction)
        .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def create_transaction_for_user(
    user_id: uuid.UUID,
    tx_in: TransactionCreate,
    category_id: Optional[int],
    db: AsyncSession,
) -> Transaction:
    new_tx = Transaction(
        **tx_in.model_dump(exclude={"category"}),
        category_id=category_id,
        user_id=user_id,
    )
    db.add(new_tx)
    await db.commit()
    # Reload so account and category come back eagerly joined
    return await get_transaction_by_id(new_tx.id, user_id, db)

async def update_transaction_for_user(
    transaction_id: int, user_id: uuid.UUID, values: dict, db: AsyncSession
) -> int:
    """Returns the number of rows updated; 0 means missing or owned by someone else."""
    result = await db.execute(
        update(Transaction)
        .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        # Discard anything flushed for this write, such as a newly resolved category
        await db.rollback()
        return 0
    await db.commit()
    return result.rowcount

async def delete_transaction_for_user(transaction_id: int, user_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(
        delete(Transaction)
        .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
