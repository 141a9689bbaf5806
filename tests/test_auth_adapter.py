from typing import Optional

from app.core.identity import Identity, IdentityVerifier, MockVerifier, get_identity_verifier
from app.main import app
from conftest import auth


class ExplodingVerifier(IdentityVerifier):
    provider = "exploding"

    async def verify(self, token: Optional[str]) -> Identity:
        raise RuntimeError("provider unreachable")


def test_health_endpoints_need_no_auth(client):
    assert client.get("/").status_code == 200
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_missing_bearer_token_is_unauthenticated(client):
    response = client.get("/accounts")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated: No token provided"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_malformed_authorization_header_is_unauthenticated(client):
    response = client.get("/accounts", headers={"Authorization": "Token alice-token"})

    assert response.status_code == 401


def test_rejected_token_is_unauthenticated(client):
    response = client.get("/accounts", headers=auth("forged-token"))

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthenticated: Invalid or expired token"}


def test_verifier_fault_is_internal_error(client):
    app.dependency_overrides[get_identity_verifier] = lambda: ExplodingVerifier()

    response = client.get("/accounts", headers=auth("alice-token"))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error during authentication"}


def test_mock_identity_needs_no_header(client):
    mock = MockVerifier("mock_user", "mock.user@example.com")
    app.dependency_overrides[get_identity_verifier] = lambda: mock

    created = client.post("/accounts", json={"name": "Wallet", "type": "cash"})
    profile = client.get("/user/profile")

    assert created.status_code == 200
    assert profile.status_code == 200
    assert profile.json()["externalId"] == "mock_user"
    assert profile.json()["email"] == "mock.user@example.com"
