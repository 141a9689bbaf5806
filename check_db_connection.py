#!/usr/bin/env python3
"""
Script to verify the Ledgerly API can reach its database and read the bookkeeping tables
Usage: python check_db_connection.py
"""
import asyncio
import platform
from sqlalchemy import func, select, text
from app.core.database import AsyncSessionLocal, engine
from app.models import Account, Category, Transaction, User

async def check_database() -> None:
    print("🧪 Checking database connection...")

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            print(f"✅ Basic query test: {result.scalar_one()}")

            for model in (User, Account, Category, Transaction):
                count = await session.execute(select(func.count()).select_from(model))
                print(f"   📋 {model.__tablename__}: {count.scalar_one()} rows")

            first_user = (await session.execute(select(User).order_by(User.created_at).limit(1))).scalar_one_or_none()
            if first_user is not None:
                txs = await session.execute(
                    select(func.count()).select_from(Transaction).where(Transaction.user_id == first_user.id)
                )
                print(f"✅ First user {first_user.id} has {txs.scalar_one()} transactions")

        print("\n🎉 Database check passed!")
    except Exception as e:
        print(f"❌ Database check failed: {str(e)}")
        raise
    finally:
        await engine.dispose()

def main():
    if platform.system() == 'Windows':
        # Set the event loop policy for Windows
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
    asyncio.run(check_database())

if __name__ == "__main__":
    main()
