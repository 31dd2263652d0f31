"""Recipe Routes — ownership/sharing enforcement and filtered listing.

Invariants:
    - Listing shows own + shared recipes only, for every role (ADMIN included)
    - Shared collaborators can read but never update or delete
    - ADMIN can read/update/delete any recipe by id
    - Missing recipe → 404 before any ownership check
    - shared_with_ids / ingredients replace the stored collections
"""

from uuid import uuid4

import pytest


def _body(**overrides) -> dict:
    body = {
        "name": "Lemon Pasta",
        "ingredients": ["spaghetti", "lemon", "parmesan"],
        "instructions": "Boil pasta, toss with lemon and cheese.",
        "cuisine_type": "Italian",
        "prep_time": 20,
    }
    body.update(overrides)
    return body


# ─── Create ──────────────────────────────────────────────────────

async def test_any_role_can_create(client, as_user, users):
    res = await client.post("/api/v1/recipes", json=_body(), headers=as_user("staff"))
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["status"] == "TO_TRY"
    assert data["ingredients"] == ["spaghetti", "lemon", "parmesan"]
    assert data["created_by"]["id"] == str(users["staff"].id)
    assert data["shared_with"] == []


async def test_create_with_shares(client, as_user, users):
    res = await client.post(
        "/api/v1/recipes",
        json=_body(shared_with_ids=[str(users["other"].id)], status="FAVORITE"),
        headers=as_user("staff"),
    )
    data = res.json()["data"]
    assert data["status"] == "FAVORITE"
    assert [u["id"] for u in data["shared_with"]] == [str(users["other"].id)]


async def test_create_with_unknown_share_target_is_400(client, as_user):
    res = await client.post(
        "/api/v1/recipes",
        json=_body(shared_with_ids=[str(uuid4())]),
        headers=as_user("staff"),
    )
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "shared_with_ids"


@pytest.mark.parametrize(
    "overrides",
    [{"name": "X"}, {"ingredients": []}, {"prep_time": 0}, {"instructions": "hi"}],
)
async def test_create_invalid_is_400(client, as_user, overrides):
    res = await client.post(
        "/api/v1/recipes", json=_body(**overrides), headers=as_user("staff"),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"


# ─── Read ────────────────────────────────────────────────────────

async def test_owner_and_collaborator_can_read(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("manager",))
    for who in ("staff", "manager"):
        res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user(who))
        assert res.status_code == 200


async def test_stranger_cannot_read(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff")
    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("other"))
    assert res.status_code == 403


async def test_admin_can_read_any(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff")
    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("admin"))
    assert res.status_code == 200


@pytest.mark.parametrize("method", ["get", "put", "delete"])
async def test_missing_recipe_is_404(client, as_user, method):
    kwargs = {"json": {"name": "Anything"}} if method == "put" else {}
    res = await getattr(client, method)(
        f"/api/v1/recipes/{uuid4()}", headers=as_user("other"), **kwargs,
    )
    assert res.status_code == 404


# ─── Update ──────────────────────────────────────────────────────

async def test_collaborator_cannot_update(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("other",))
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"name": "Mine now"},
        headers=as_user("other"),
    )
    assert res.status_code == 403


async def test_forbidden_before_validation(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff")
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"prep_time": -1},
        headers=as_user("other"),
    )
    assert res.status_code == 403


async def test_owner_partial_update(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", name="Veggie Bowl")
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"status": "MADE"},
        headers=as_user("staff"),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["status"] == "MADE"
    assert data["name"] == "Veggie Bowl"
    assert data["ingredients"] == ["chickpeas", "spinach"]


async def test_update_replaces_collections(client, as_user, users, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("manager", "other"))
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}",
        json={
            "shared_with_ids": [str(users["admin"].id)],
            "ingredients": ["rice", "beans"],
        },
        headers=as_user("staff"),
    )
    data = res.json()["data"]
    assert [u["id"] for u in data["shared_with"]] == [str(users["admin"].id)]
    assert data["ingredients"] == ["rice", "beans"]

    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("manager"))
    assert res.status_code == 403


async def test_update_with_null_is_400(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff")
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"name": None},
        headers=as_user("staff"),
    )
    assert res.status_code == 400


async def test_admin_can_update_any(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff")
    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"prep_time": 45},
        headers=as_user("admin"),
    )
    assert res.status_code == 200
    assert res.json()["data"]["prep_time"] == 45


# ─── Delete ──────────────────────────────────────────────────────

async def test_collaborator_cannot_delete(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("manager",))
    res = await client.delete(f"/api/v1/recipes/{recipe.id}", headers=as_user("manager"))
    assert res.status_code == 403


async def test_owner_deletes(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("manager",))
    res = await client.delete(f"/api/v1/recipes/{recipe.id}", headers=as_user("staff"))
    assert res.json() == {"ok": True}
    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("staff"))
    assert res.status_code == 404


async def test_admin_deletes_any(client, as_user, make_recipe):
    recipe = await make_recipe(owner="other")
    res = await client.delete(f"/api/v1/recipes/{recipe.id}", headers=as_user("admin"))
    assert res.status_code == 200


# ─── Listing ─────────────────────────────────────────────────────

async def test_listing_scope(client, as_user, make_recipe):
    await make_recipe(owner="staff", name="Own Dish")
    await make_recipe(owner="other", name="Shared Dish", shared_with=("staff",))
    await make_recipe(owner="other", name="Private Dish")

    res = await client.get("/api/v1/recipes", headers=as_user("staff"))
    names = sorted(r["name"] for r in res.json()["data"])
    assert names == ["Own Dish", "Shared Dish"]


async def test_admin_listing_is_not_global(client, as_user, make_recipe):
    await make_recipe(owner="staff", name="Staff Dish")
    res = await client.get("/api/v1/recipes", headers=as_user("admin"))
    assert res.json()["data"] == []


async def test_listing_filters(client, as_user, make_recipe):
    await make_recipe(owner="staff", name="Green Curry", cuisine_type="Thai",
                      ingredients=("coconut milk", "basil"), prep_time=30,
                      status="FAVORITE")
    await make_recipe(owner="staff", name="Caprese", cuisine_type="Italian",
                      ingredients=("tomato", "basil", "mozzarella"), prep_time=10)
    headers = as_user("staff")

    async def names(query: str) -> list[str]:
        res = await client.get(f"/api/v1/recipes?{query}", headers=headers)
        assert res.status_code == 200
        return sorted(r["name"] for r in res.json()["data"])

    assert await names("ingredient=BASIL") == ["Caprese", "Green Curry"]
    assert await names("cuisine_type=thai") == ["Green Curry"]
    assert await names("status=FAVORITE") == ["Green Curry"]
    assert await names("prep_time=10") == ["Caprese"]
    assert await names("name=cap&ingredient=coconut") == []
    assert await names("tags=tofu,italian") == ["Caprese"]
    assert await names("name=") == ["Caprese", "Green Curry"]


async def test_invalid_status_filter_is_400(client, as_user):
    res = await client.get("/api/v1/recipes?status=COOKED", headers=as_user("staff"))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_empty_share_list_revokes_access(client, as_user, make_recipe):
    recipe = await make_recipe(owner="staff", shared_with=("other",))
    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("other"))
    assert res.status_code == 200

    res = await client.put(
        f"/api/v1/recipes/{recipe.id}", json={"shared_with_ids": []},
        headers=as_user("staff"),
    )
    assert res.json()["data"]["shared_with"] == []

    res = await client.get(f"/api/v1/recipes/{recipe.id}", headers=as_user("other"))
    assert res.status_code == 403
