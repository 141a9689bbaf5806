# app/api/deps.py
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.errors import ApiError, Forbidden, InternalError, NotFound, Unauthenticated
from app.core.identity import Identity, IdentityVerifier, InvalidCredentials, get_identity_verifier
from app.crud.user import get_user_by_external_id, resolve_user
from app.models.user import User

logger = logging.getLogger(__name__)

# auto_error is off so that a missing header maps onto our own 401 body
optional_security = HTTPBearer(auto_error=False)

def _bearer_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None

async def get_identity(
    request: Request,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Identity:
    """
    Verify the caller with the configured provider and attach the identity
    to ``request.state.identity``.
    """
    token = _bearer_token(request, credentials)
    if verifier.requires_token and not token:
        raise Unauthenticated("Unauthenticated: No token provided")

    try:
        identity = await verifier.verify(token)
    except InvalidCredentials as e:
        logger.info(f"{verifier.provider} rejected bearer token: {e}")
        raise Unauthenticated("Unauthenticated: Invalid or expired token")
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"{verifier.provider} auth verification failed: {type(e).__name__}: {e}")
        raise InternalError("Internal server error during authentication")

    request.state.identity = identity
    return identity

async def get_current_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Resolve (creating or linking if needed) the internal user for the caller."""
    try:
        return await resolve_user(identity, db)
    except ApiError:
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"User resolution failed for {identity.external_id}: {str(e)}")
        raise InternalError("Failed to resolve user")

async def get_existing_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_async_session),
) -> Optional[User]:
    """Look up the caller's user without creating one; None if never synced."""
    try:
        return await get_user_by_external_id(identity.external_id, db)
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed for {identity.external_id}: {str(e)}")
        raise InternalError("Failed to look up user")

async def require_existing_user(user: Optional[User] = Depends(get_existing_user)) -> User:
    if user is None:
        raise NotFound("User not found")
    return user

async def require_admin(user: Optional[User] = Depends(get_existing_user)) -> User:
    if user is None or not user.is_admin:
        raise Forbidden("Admin access required")
    return user
