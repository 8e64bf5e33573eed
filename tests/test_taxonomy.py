import pytest

MISSING_ID = "3a7e0c1d-5b2f-4e8a-9c6d-333333333333"


@pytest.mark.asyncio
async def test_empty_lists_are_not_found(client, register_user):
    alice = await register_user("alice@example.com")
    cats = await client.get("/item_categories", headers=alice["headers"])
    assert cats.status_code == 404
    assert cats.json()["message"] == "No item categories found"
    styles = await client.get("/styles", headers=alice["headers"])
    assert styles.status_code == 404
    assert styles.json()["message"] == "No styles found"


@pytest.mark.asyncio
async def test_listing_requires_user_and_orders_by_display_name(client, register_user, seed_taxonomy):
    await seed_taxonomy()
    alice = await register_user("alice@example.com")

    assert (await client.get("/item_categories")).status_code == 401

    resp = await client.get("/item_categories", headers=alice["headers"])
    assert resp.status_code == 200
    cats = resp.json()
    assert [c["display_name"] for c in cats] == ["Bottom", "Shoes", "Top"]
    assert {c["name"]: c["is_required"] for c in cats} == {"bottom": True, "shoes": False, "top": True}

    styles = (await client.get("/styles", headers=alice["headers"])).json()
    assert [s["name"] for s in styles] == ["casual"]


@pytest.mark.asyncio
async def test_admin_routes_require_secret(client, register_user):
    alice = await register_user("alice@example.com")
    body = {"name": "hats", "display_name": "Hats"}

    missing = await client.post("/admin/item_categories", json=body)
    assert missing.status_code == 401
    wrong = await client.post("/admin/item_categories", json=body, headers={"x-admin-secret": "nope"})
    assert wrong.status_code == 403
    as_user = await client.post("/admin/styles", json=body, headers=alice["headers"])
    assert as_user.status_code == 401


@pytest.mark.asyncio
async def test_create_conflicts(client, admin_headers, seed_taxonomy):
    await seed_taxonomy()

    dup = await client.post("/admin/item_categories", json={"name": "top", "display_name": "Tops"}, headers=admin_headers)
    assert dup.status_code == 409
    assert dup.json()["message"] == "Category with name 'top' already exists"

    dup_style = await client.post("/admin/styles", json={"name": "casual", "display_name": "Casual 2"}, headers=admin_headers)
    assert dup_style.status_code == 409

    bad = await client.post("/admin/styles", json={"name": "Not Kebab", "display_name": "X"}, headers=admin_headers)
    assert bad.status_code == 400

    hats = await client.post("/admin/item_categories", json={"name": "hats", "display_name": "Hats"}, headers=admin_headers)
    assert hats.status_code == 201
    assert hats.json()["is_required"] is False


@pytest.mark.asyncio
async def test_update(client, admin_headers, seed_taxonomy):
    ids = await seed_taxonomy()
    url = f"/admin/item_categories/{ids['shoes']}"

    same_name = await client.put(url, json={"name": "shoes", "display_name": "Footwear"}, headers=admin_headers)
    assert same_name.status_code == 200
    assert same_name.json()["display_name"] == "Footwear"

    required = await client.put(url, json={"is_required": True}, headers=admin_headers)
    assert required.json()["is_required"] is True

    noop = await client.put(url, json={}, headers=admin_headers)
    assert noop.status_code == 200
    assert noop.json() == required.json()

    taken = await client.put(url, json={"name": "top"}, headers=admin_headers)
    assert taken.status_code == 409

    missing = await client.put(f"/admin/item_categories/{MISSING_ID}", json={"name": "x-y"}, headers=admin_headers)
    assert missing.status_code == 404

    style = await client.put(f"/admin/styles/{ids['casual']}", json={"display_name": "Relaxed"}, headers=admin_headers)
    assert style.status_code == 200
    assert style.json() == {"id": ids["casual"], "name": "casual", "display_name": "Relaxed"}
