# app/api/routes/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_identity
from app.core.database import get_async_session
from app.core.errors import InternalError
from app.core.identity import Identity
from app.crud.user import resolve_user
from app.schemas.user import SyncedUser, UserSyncRequest, UserSyncResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

@router.post("/sync", response_model=UserSyncResponse)
async def sync_user(
    sync_in: Optional[UserSyncRequest] = Body(None),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Reconcile the authenticated caller with the users table.

    Finds the user by provider subject id, links an existing user whose email
    matches the provider's email claim, or creates a new one. The body email is
    only used for a new user when the claims carry none.
    """
    sync_in = sync_in or UserSyncRequest()
    try:
        user = await resolve_user(
            identity,
            db,
            email=str(sync_in.email) if sync_in.email else None,
            name=sync_in.display_name(),
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"User sync error: {str(e)}")
        raise InternalError("Failed to sync user")

    logger.info(f"Synced user {user.id}")
    return UserSyncResponse(success=True, user=SyncedUser.model_validate(user))
