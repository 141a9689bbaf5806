# app/crud/user.py
import logging
from typing import List, Optional
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.core.errors import Forbidden, MissingRequiredAttribute
from app.core.identity import Identity
from app.models.user import User

logger = logging.getLogger(__name__)

async def get_user_by_external_id(external_id: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.external_id == external_id))
    return result.scalar_one_or_none()

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def list_users(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at).offset(skip).limit(limit))
    return result.scalars().all()

async def _refresh_claims(
    user: User,
    email: Optional[str],
    name: Optional[str],
    email_verified: Optional[bool],
    db: AsyncSession,
) -> None:
    if email and email != user.email:
        holder = await get_user_by_email(email, db)
        if holder is None:
            user.email = email
        else:
            # Email is the dedup key; never let two users share it
            logger.warning(f"Not moving email of user {user.id}: address already belongs to user {holder.id}")
    if name:
        user.name = name
    if email_verified is not None:
        user.email_verified = email_verified

async def resolve_user(
    identity: Identity,
    db: AsyncSession,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> User:
    """
    Map an authenticated identity to its internal user, creating or linking one as needed.

    Lookup order:
    1. by external id: refresh email/name/verified flag from the latest claims
    2. by the email claim: link the existing user to this external id (provider migration)
    3. otherwise create a new user; an email is mandatory for that

    Only the provider's email claim can link an existing user. ``email`` is what
    the client sent and is used solely as the address of a brand-new user when
    the claims carry none. ``name`` takes precedence over the name claim.
    """
    name = name or identity.name

    user = await get_user_by_external_id(identity.external_id, db)
    if user is not None:
        await _refresh_claims(user, identity.email, name, identity.email_verified, db)
        await db.commit()
        await db.refresh(user)
        return user

    # An email the provider marks as unverified cannot claim someone else's record
    if identity.email and identity.email_verified is not False:
        user = await get_user_by_email(identity.email, db)
        if user is not None:
            logger.info(f"Linking user {user.id} from external id {user.external_id} to {identity.external_id}")
            user.external_id = identity.external_id
            await _refresh_claims(user, None, name, identity.email_verified, db)
            await db.commit()
            await db.refresh(user)
            return user

    new_email = identity.email or email
    if not new_email:
        raise MissingRequiredAttribute("email")

    holder = await get_user_by_email(new_email, db)
    if holder is not None:
        logger.warning(f"Refusing to create user for {identity.external_id}: email already belongs to user {holder.id}")
        raise Forbidden("Email already belongs to another user")

    user = User(
        external_id=identity.external_id,
        email=new_email,
        name=name,
        currency=settings.DEFAULT_CURRENCY,
        email_verified=bool(identity.email_verified),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Created new user in database: {user.id}")
    return user

async def update_profile(user: User, fields: dict, db: AsyncSession) -> User:
    for field, value in fields.items():
        setattr(user, field, value)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def set_role(user: User, role: str, db: AsyncSession) -> User:
    user.role = role
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
