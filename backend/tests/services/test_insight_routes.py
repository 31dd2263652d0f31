"""Insight Routes — snapshots sent to the text generator, empty-state messages,
fallbacks, and upstream failure mapping.

Invariants:
    - Every endpoint requires identity (any role)
    - Empty snapshots return a fixed message without calling the generator
    - Blank generator output → per-endpoint fallback text
    - Generator failure → 502 with a generic message
"""

from uuid import uuid4

import pytest

AI_ENDPOINTS = [
    ("demand", None),
    ("reorder", None),
    ("spoilage", None),
    ("grocery-list", {"recipe_ids": [str(uuid4())]}),
    ("meal-plan", {}),
    ("recipe-generate", {"ingredients": ["egg"]}),
    ("recipe-improve", {"recipe": "Boil pasta for ten minutes."}),
]


@pytest.mark.parametrize("endpoint,body", AI_ENDPOINTS)
async def test_insights_require_identity(client, users, endpoint, body):
    res = await client.post(f"/api/v1/ai/{endpoint}", json=body)
    assert res.status_code == 401


# ─── Empty snapshots ─────────────────────────────────────────────

async def test_demand_without_inventory(client, as_user, generator):
    res = await client.post("/api/v1/ai/demand", headers=as_user("staff"))
    assert res.json() == {"data": "No inventory data available yet."}
    assert generator.calls == []


async def test_reorder_when_everything_stocked(client, as_user, make_item, generator):
    await make_item(quantity=50)
    res = await client.post("/api/v1/ai/reorder", headers=as_user("staff"))
    assert res.json()["data"] == (
        "All items are sufficiently stocked. No reorder suggestions needed."
    )
    assert generator.calls == []


async def test_spoilage_without_expiring_items(client, as_user, make_item, generator):
    await make_item(expires_in_days=60)
    res = await client.post("/api/v1/ai/spoilage", headers=as_user("staff"))
    assert res.json()["data"] == "No items are at spoilage risk in the next 7 days."
    assert generator.calls == []


async def test_grocery_list_ignores_invisible_recipes(
    client, as_user, make_recipe, generator,
):
    private = await make_recipe(owner="other")
    res = await client.post(
        "/api/v1/ai/grocery-list",
        json={"recipe_ids": [str(private.id)]},
        headers=as_user("staff"),
    )
    assert res.json()["data"] == "No recipes found for grocery list."
    assert generator.calls == []


# ─── Generated content ───────────────────────────────────────────

async def test_demand_sends_snapshot(client, as_user, make_item, generator):
    await make_item(name="Gala Apples", quantity=24, selling_price=2.4)
    generator.text = "Apples are selling fast."
    res = await client.post("/api/v1/ai/demand", headers=as_user("staff"))
    assert res.status_code == 200
    assert res.json() == {"data": "Apples are selling fast."}
    assert "- Gala Apples: qty=24 kg, price=2.4" in generator.calls[0]["prompt"]


async def test_reorder_lists_low_stock_items(client, as_user, make_item, generator):
    await make_item(name="Baby Spinach", quantity=6)
    await make_item(name="Gala Apples", quantity=40)
    await client.post("/api/v1/ai/reorder", headers=as_user("manager"))
    prompt = generator.calls[0]["prompt"]
    assert "Baby Spinach" in prompt
    assert "Gala Apples" not in prompt


async def test_spoilage_lists_expiring_items(client, as_user, make_item, generator):
    await make_item(name="Baby Spinach", expires_in_days=2)
    await make_item(name="Gala Apples", expires_in_days=30)
    await client.post("/api/v1/ai/spoilage", headers=as_user("staff"))
    prompt = generator.calls[0]["prompt"]
    assert "Baby Spinach" in prompt
    assert "Gala Apples" not in prompt


async def test_grocery_list_merges_ingredients(client, as_user, make_recipe, generator):
    own = await make_recipe(owner="staff", ingredients=("tomato", "basil"))
    shared = await make_recipe(
        owner="other", shared_with=("staff",), ingredients=("basil", "garlic"),
    )
    await client.post(
        "/api/v1/ai/grocery-list",
        json={"recipe_ids": [str(own.id), str(shared.id)]},
        headers=as_user("staff"),
    )
    prompt = generator.calls[0]["prompt"]
    assert prompt.count("basil") == 1
    assert "garlic" in prompt
    assert "tomato" in prompt


async def test_meal_plan_passes_preferences(client, as_user, generator):
    res = await client.post(
        "/api/v1/ai/meal-plan", json={"preferences": "vegetarian"},
        headers=as_user("staff"),
    )
    assert res.status_code == 200
    assert "Preferences: vegetarian" in generator.calls[0]["prompt"]


async def test_recipe_generate_and_improve(client, as_user, generator):
    await client.post(
        "/api/v1/ai/recipe-generate", json={"ingredients": ["egg", "rice"]},
        headers=as_user("staff"),
    )
    await client.post(
        "/api/v1/ai/recipe-improve",
        json={"recipe": "Fry the rice with egg."},
        headers=as_user("staff"),
    )
    assert "egg, rice" in generator.calls[0]["prompt"]
    assert "Fry the rice with egg." in generator.calls[1]["prompt"]


async def test_blank_output_uses_fallback(client, as_user, generator):
    generator.text = "   "
    res = await client.post(
        "/api/v1/ai/meal-plan", json={}, headers=as_user("staff"),
    )
    assert res.json()["data"] == "No meal plan generated."


# ─── Validation & failures ───────────────────────────────────────

@pytest.mark.parametrize(
    "endpoint,body",
    [
        ("grocery-list", {"recipe_ids": []}),
        ("recipe-generate", {"ingredients": []}),
        ("recipe-improve", {"recipe": "short"}),
    ],
)
async def test_invalid_bodies_are_400(client, as_user, generator, endpoint, body):
    res = await client.post(
        f"/api/v1/ai/{endpoint}", json=body, headers=as_user("staff"),
    )
    assert res.status_code == 400
    assert generator.calls == []


async def test_generator_failure_is_502(client, as_user, generator):
    generator.fail()
    res = await client.post(
        "/api/v1/ai/recipe-generate", json={"ingredients": ["egg"]},
        headers=as_user("staff"),
    )
    assert res.status_code == 502
    error = res.json()["error"]
    assert error["code"] == "UPSTREAM_FAILURE"
    assert error["message"] == "AI request failed"
