import asyncio
import os
import sys
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTH_PROVIDER", "mock")
os.environ.setdefault("SEED_GLOBAL_CATEGORIES", "false")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import models  # noqa: E402,F401
from app.core.database import Base, get_async_session  # noqa: E402
from app.core.identity import Identity, IdentityVerifier, InvalidCredentials, get_identity_verifier  # noqa: E402
from app.main import app  # noqa: E402


IDENTITIES: Dict[str, Identity] = {
    "alice-token": Identity(external_id="user_alice", email="alice@example.com", name="Alice Liddell"),
    "bob-token": Identity(external_id="user_bob", email="bob@example.com"),
    "no-email-token": Identity(external_id="user_nomail"),
}


class FakeVerifier(IdentityVerifier):
    """Maps fixed tokens to identities; anything else is rejected"""
    provider = "fake"

    def __init__(self, identities: Dict[str, Identity]):
        self.identities = identities

    async def verify(self, token: Optional[str]) -> Identity:
        identity = self.identities.get(token)
        if identity is None:
            raise InvalidCredentials("Unknown token")
        return identity


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _build_engine():
    return create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


async def _create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class DatabaseRunner:
    """Runs async callables against the test database on the client's event loop"""

    def __init__(self, client: TestClient, session_local):
        self.client = client
        self.session_local = session_local

    def __call__(self, fn):
        async def runner():
            async with self.session_local() as session:
                return await fn(session)
        return self.client.portal.call(runner)


@pytest.fixture
def verifier():
    return FakeVerifier(dict(IDENTITIES))


@pytest.fixture
def client(verifier):
    engine = _build_engine()
    session_local = async_sessionmaker(bind=engine, expire_on_commit=False)

    async def override_get_async_session():
        async with session_local() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_identity_verifier] = lambda: verifier

    with TestClient(app) as test_client:
        test_client.portal.call(_create_tables, engine)
        test_client.run_db = DatabaseRunner(test_client, session_local)
        yield test_client
        test_client.portal.call(engine.dispose)

    app.dependency_overrides.clear()


@pytest.fixture
def run_db():
    """Run ``fn(session)`` against a fresh in-memory database, outside of the app"""

    def runner(fn):
        async def main():
            engine = _build_engine()
            await _create_tables(engine)
            session_local = async_sessionmaker(bind=engine, expire_on_commit=False)
            try:
                async with session_local() as session:
                    return await fn(session)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner
