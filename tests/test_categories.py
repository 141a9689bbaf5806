from sqlalchemy import select

from app.crud.category import DEFAULT_CATEGORIES, seed_global_categories
from app.models.category import Category, GlobalOwnership, OwnedBy
from app.models.transaction import Transaction
from conftest import auth


def _seed_globals(client):
    return client.run_db(seed_global_categories)


def _create_category(client, token, name, icon=None):
    response = client.post("/categories", json={"name": name, "icon": icon}, headers=auth(token))
    assert response.status_code == 200
    return response.json()


def test_list_includes_own_and_global_sorted_by_name(client):
    _seed_globals(client)
    _create_category(client, "alice-token", "Coffee")
    _create_category(client, "bob-token", "Bob Only")

    response = client.get("/categories", headers=auth("alice-token"))

    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == sorted(names)
    assert "Coffee" in names
    assert "Bob Only" not in names
    assert len(names) == len(DEFAULT_CATEGORIES) + 1


def test_listing_without_user_record_is_empty(client):
    _seed_globals(client)

    response = client.get("/categories", headers=auth("bob-token"))

    assert response.status_code == 200
    assert response.json() == []


def test_seeding_is_idempotent(client):
    first = _seed_globals(client)
    second = _seed_globals(client)

    assert len(first) == len(DEFAULT_CATEGORIES)
    assert second == []


def test_global_categories_are_read_only(client):
    created = _seed_globals(client)
    _create_category(client, "alice-token", "Coffee")
    global_id = created[0].id

    update = client.put(f"/categories/{global_id}", json={"name": "Mine now"}, headers=auth("alice-token"))
    delete = client.delete(f"/categories/{global_id}", headers=auth("alice-token"))

    assert update.status_code == 404
    assert update.json() == {"error": "Category not found"}
    assert delete.status_code == 404

    async def load(session):
        return (await session.execute(select(Category).where(Category.id == global_id))).scalar_one()

    assert client.run_db(load).name == created[0].name


def test_update_own_category(client):
    category = _create_category(client, "alice-token", "Coffee")

    response = client.put(
        f"/categories/{category['id']}",
        json={"icon": "☕", "color": "#6F4E37"},
        headers=auth("alice-token"),
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Category updated"}
    listed = client.get("/categories", headers=auth("alice-token")).json()
    assert listed[0]["icon"] == "☕"
    assert listed[0]["color"] == "#6F4E37"


def test_foreign_category_is_not_found(client):
    bobs = _create_category(client, "bob-token", "Bob Only")
    _create_category(client, "alice-token", "Coffee")

    update = client.put(f"/categories/{bobs['id']}", json={"name": "Stolen"}, headers=auth("alice-token"))
    delete = client.delete(f"/categories/{bobs['id']}", headers=auth("alice-token"))

    assert update.status_code == 404
    assert delete.status_code == 404


def test_deleting_category_detaches_transactions(client):
    account = client.post("/accounts", json={"name": "Wallet", "type": "cash"}, headers=auth("alice-token")).json()
    tx = client.post(
        "/transactions",
        json={
            "type": "expense",
            "category": "Coffee",
            "amount": "4.20",
            "date": "2024-05-01T08:00:00",
            "accountId": account["id"],
        },
        headers=auth("alice-token"),
    ).json()

    response = client.delete(f"/categories/{tx['categoryId']}", headers=auth("alice-token"))

    assert response.status_code == 200
    assert response.json() == {"message": "Category deleted"}

    async def load(session):
        return (await session.execute(select(Transaction).where(Transaction.id == tx["id"]))).scalar_one()

    assert client.run_db(load).category_id is None


def test_ownership_variants():
    import uuid

    owner = uuid.uuid4()
    stranger = uuid.uuid4()

    global_category = Category(name="Food", user_id=None)
    owned_category = Category(name="Coffee", user_id=owner)

    assert global_category.ownership == GlobalOwnership()
    assert global_category.is_global is True
    assert not global_category.is_mutable_by(owner)
    assert owned_category.ownership == OwnedBy(owner)
    assert owned_category.is_mutable_by(owner)
    assert not owned_category.is_mutable_by(stranger)
