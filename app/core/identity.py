# app/core/identity.py
import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx
import jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Caller identity as asserted by the configured auth provider"""
    external_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    email_verified: Optional[bool] = None


class InvalidCredentials(Exception):
    """The bearer credential was rejected by the provider"""


class IdentityVerifier:
    provider: str = "base"
    requires_token: bool = True

    async def verify(self, token: Optional[str]) -> Identity:
        raise NotImplementedError


class ClerkVerifier(IdentityVerifier):
    """Verifies Clerk session JWTs against the instance JWKS"""
    provider = "clerk"

    def __init__(self, jwks_url: str, issuer: Optional[str] = None):
        if not jwks_url:
            raise ValueError("CLERK_JWKS_URL must be set when AUTH_PROVIDER=clerk")
        self.issuer = issuer
        self.jwks_client = jwt.PyJWKClient(jwks_url)

    def _decode(self, token: str) -> Dict[str, Any]:
        signing_key = self.jwks_client.get_signing_key_from_jwt(token)
        options = {"require": ["sub", "exp"]}
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            issuer=self.issuer,
            options=options,
        )

    async def verify(self, token: Optional[str]) -> Identity:
        if not token:
            raise InvalidCredentials("No token provided")
        # JWKS fetching is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            claims = await loop.run_in_executor(None, self._decode, token)
        except jwt.PyJWKClientConnectionError:
            # JWKS endpoint unreachable: a provider fault, not a bad credential
            raise
        except jwt.ExpiredSignatureError:
            raise InvalidCredentials("Token has expired")
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as e:
            raise InvalidCredentials(f"Invalid token: {type(e).__name__}")

        first_name = claims.get("first_name") or claims.get("given_name")
        last_name = claims.get("last_name") or claims.get("family_name")
        name = claims.get("name")
        if not name and first_name and last_name:
            name = f"{first_name} {last_name}"

        return Identity(
            external_id=claims["sub"],
            email=claims.get("email") or claims.get("primary_email"),
            name=name,
            email_verified=claims.get("email_verified"),
        )


class SupabaseVerifier(IdentityVerifier):
    """Resolves Supabase access tokens through the GoTrue user endpoint"""
    provider = "supabase"

    def __init__(self, url: str, api_key: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        if not url or not api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set when AUTH_PROVIDER=supabase")
        self.user_url = f"{url.rstrip('/')}/auth/v1/user"
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def verify(self, token: Optional[str]) -> Identity:
        if not token:
            raise InvalidCredentials("No token provided")
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(self.user_url, headers=headers)

        if response.status_code in (400, 401, 403, 404):
            raise InvalidCredentials("Invalid or expired token")
        response.raise_for_status()

        user = response.json()
        if not user or not user.get("id"):
            raise InvalidCredentials("Invalid or expired token")

        metadata = user.get("user_metadata") or {}
        return Identity(
            external_id=user["id"],
            email=user.get("email") or None,
            name=metadata.get("full_name") or metadata.get("name"),
            email_verified=bool(user.get("email_confirmed_at")),
        )


class MockVerifier(IdentityVerifier):
    """Fixed identity for local development; accepts any request"""
    provider = "mock"
    requires_token = False

    def __init__(self, external_id: str, email: Optional[str] = None):
        self.identity = Identity(external_id=external_id, email=email, email_verified=True)

    async def verify(self, token: Optional[str]) -> Identity:
        return self.identity


def build_identity_verifier(provider: str) -> IdentityVerifier:
    if provider == "clerk":
        return ClerkVerifier(settings.CLERK_JWKS_URL, settings.CLERK_ISSUER)
    if provider == "supabase":
        return SupabaseVerifier(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    if provider == "mock":
        logger.warning("Mock authentication is enabled - every request runs as the mock user")
        return MockVerifier(settings.MOCK_USER_ID, str(settings.MOCK_USER_EMAIL))
    raise ValueError(f"Unknown auth provider: {provider}")


@lru_cache
def get_identity_verifier() -> IdentityVerifier:
    return build_identity_verifier(settings.AUTH_PROVIDER)
