"""User Routes — share-picker listing and ADMIN-only administration."""

from uuid import uuid4

from larder.services.user_service import UserService


async def test_any_user_can_list_users(client, as_user):
    res = await client.get("/api/v1/users", headers=as_user("staff"))
    assert res.status_code == 200
    emails = {u["email"] for u in res.json()["data"]}
    assert "manager@example.com" in emails
    assert len(emails) == 4


async def test_me_returns_stored_role(client, as_user):
    res = await client.get("/api/v1/users/me", headers=as_user("manager"))
    assert res.json()["data"]["role"] == "MANAGER"


async def test_admin_creates_user(client, as_user):
    res = await client.post(
        "/api/v1/users",
        json={"name": "Dana", "email": "Dana@Example.com", "role": "MANAGER"},
        headers=as_user("admin"),
    )
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["email"] == "dana@example.com"
    assert data["role"] == "MANAGER"


async def test_duplicate_email_is_409(client, as_user):
    res = await client.post(
        "/api/v1/users",
        json={"name": "Again", "email": "staff@example.com"},
        headers=as_user("admin"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_duplicate_email_caught_by_unique_index_is_409(client, as_user, monkeypatch):
    """A create that passes the lookup but loses the race on insert."""
    async def _never_taken(self, email):
        return False

    monkeypatch.setattr(UserService, "_email_taken", _never_taken)
    res = await client.post(
        "/api/v1/users",
        json={"name": "Again", "email": "staff@example.com"},
        headers=as_user("admin"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"

    res = await client.get("/api/v1/users", headers=as_user("admin"))
    assert len(res.json()["data"]) == 4


async def test_manager_cannot_create_user(client, as_user):
    res = await client.post(
        "/api/v1/users",
        json={"name": "Dana", "email": "dana@example.com"},
        headers=as_user("manager"),
    )
    assert res.status_code == 403


async def test_role_change_takes_effect_on_next_request(client, as_user, users, make_item):
    item = await make_item()
    res = await client.delete(f"/api/v1/inventory/{item.id}", headers=as_user("staff"))
    assert res.status_code == 403

    res = await client.patch(
        f"/api/v1/users/{users['staff'].id}/role",
        json={"role": "MANAGER"},
        headers=as_user("admin"),
    )
    assert res.status_code == 200

    res = await client.delete(f"/api/v1/inventory/{item.id}", headers=as_user("staff"))
    assert res.status_code == 200


async def test_only_admin_changes_roles(client, as_user, users):
    res = await client.patch(
        f"/api/v1/users/{users['manager'].id}/role",
        json={"role": "ADMIN"},
        headers=as_user("manager"),
    )
    assert res.status_code == 403


async def test_role_change_for_missing_user_is_404(client, as_user):
    res = await client.patch(
        f"/api/v1/users/{uuid4()}/role",
        json={"role": "STAFF"},
        headers=as_user("admin"),
    )
    assert res.status_code == 404
