#!/usr/bin/env python3
"""
Standalone script to grant (or revoke) admin access for the Ledgerly API.
Admins are the only callers allowed to list every user via GET /users.
Usage: python create_admin.py [email] [--revoke]
"""

import asyncio
import sys
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from app.core.config import settings
from app.crud.user import get_user_by_email, set_role
from app.models.user import ADMIN_ROLE, USER_ROLE

async def promote_user(email: str, revoke: bool = False) -> int:
    engine = create_async_engine(settings.DATABASE_URL)
    async_session_maker = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with async_session_maker() as session:
            user = await get_user_by_email(email, session)
            if user is None:
                print(f"No user with email {email}; they must sign in once first.")
                return 1

            role = USER_ROLE if revoke else ADMIN_ROLE
            user = await set_role(user, role, session)
            print(f"✅ {user.email} now has role '{user.role}'")
            print(f"🔑 ID: {user.id}")
            return 0
    finally:
        await engine.dispose()

if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    email = args[0] if args else input("Enter user email: ").strip()
    sys.exit(asyncio.run(promote_user(email, revoke="--revoke" in sys.argv)))
