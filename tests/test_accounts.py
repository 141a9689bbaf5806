from sqlalchemy import func, select

from app.models.account import Account
from app.models.user import User
from conftest import auth


def _create_account(client, token, name="Wallet", type_="cash"):
    response = client.post("/accounts", json={"name": name, "type": type_}, headers=auth(token))
    assert response.status_code == 200
    return response.json()


def test_create_then_list_account_for_new_caller(client):
    account = _create_account(client, "alice-token")

    assert account["name"] == "Wallet"
    assert account["type"] == "cash"
    assert account["userId"]

    response = client.get("/accounts", headers=auth("alice-token"))
    assert response.status_code == 200
    accounts = response.json()
    assert len(accounts) == 1
    assert accounts[0]["name"] == "Wallet"


def test_listing_without_user_record_is_empty_and_creates_nothing(client):
    response = client.get("/accounts", headers=auth("bob-token"))

    assert response.status_code == 200
    assert response.json() == []

    async def count_users(session):
        return (await session.execute(select(func.count()).select_from(User))).scalar_one()

    assert client.run_db(count_users) == 0


def test_accounts_are_scoped_to_their_owner(client):
    _create_account(client, "alice-token", name="Alice Checking", type_="checking")
    _create_account(client, "bob-token", name="Bob Cash")

    alice = client.get("/accounts", headers=auth("alice-token")).json()
    bob = client.get("/accounts", headers=auth("bob-token")).json()

    assert [a["name"] for a in alice] == ["Alice Checking"]
    assert [a["name"] for a in bob] == ["Bob Cash"]


def test_update_own_account(client):
    account = _create_account(client, "alice-token")

    response = client.put(f"/accounts/{account['id']}", json={"name": "Pocket"}, headers=auth("alice-token"))

    assert response.status_code == 200
    assert response.json() == {"message": "Account updated"}
    accounts = client.get("/accounts", headers=auth("alice-token")).json()
    assert accounts[0]["name"] == "Pocket"
    assert accounts[0]["type"] == "cash"


def test_update_foreign_account_is_not_found_and_unchanged(client):
    bobs = _create_account(client, "bob-token", name="Bob Savings", type_="savings")
    _create_account(client, "alice-token")

    response = client.put(f"/accounts/{bobs['id']}", json={"name": "Hijacked"}, headers=auth("alice-token"))

    assert response.status_code == 404
    assert response.json() == {"error": "Account not found"}

    async def load(session):
        return (await session.execute(select(Account).where(Account.id == bobs["id"]))).scalar_one()

    assert client.run_db(load).name == "Bob Savings"


def test_foreign_and_missing_accounts_are_indistinguishable(client):
    bobs = _create_account(client, "bob-token")
    _create_account(client, "alice-token")

    foreign = client.delete(f"/accounts/{bobs['id']}", headers=auth("alice-token"))
    missing = client.delete("/accounts/99999", headers=auth("alice-token"))

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"error": "Account not found"}


def test_delete_own_account(client):
    account = _create_account(client, "alice-token")

    response = client.delete(f"/accounts/{account['id']}", headers=auth("alice-token"))

    assert response.status_code == 200
    assert response.json() == {"message": "Account deleted"}
    assert client.get("/accounts", headers=auth("alice-token")).json() == []


def test_update_without_user_record_is_user_not_found(client):
    response = client.put("/accounts/1", json={"name": "x"}, headers=auth("bob-token"))

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_update_with_no_fields_is_rejected(client):
    account = _create_account(client, "alice-token")

    response = client.put(f"/accounts/{account['id']}", json={}, headers=auth("alice-token"))

    assert response.status_code == 400
    assert response.json()["error"] == "No fields provided for update"


def test_create_with_missing_fields_is_bad_request(client):
    response = client.post("/accounts", json={"name": "Wallet"}, headers=auth("alice-token"))
    empty = client.post("/accounts", json={"name": "", "type": "cash"}, headers=auth("alice-token"))

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"
    assert "details" in response.json()
    assert empty.status_code == 400
    assert empty.json()["error"] == "Missing required fields"


def test_create_without_email_claim_cannot_create_user(client):
    response = client.post("/accounts", json={"name": "Wallet", "type": "cash"}, headers=auth("no-email-token"))

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required attribute: email"}
