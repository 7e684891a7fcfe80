"""
Category tests.

Verifies that:
- a new organization gets the default category types, with locked
  Material, Labour and Sub Work expense types
- items are created under a type of the organization and listed by type key
- locked items cannot be renamed or deleted; custom items can
- inactive items are hidden unless asked for
- an item still used by an expense cannot be deleted
- categories of one organization are invisible to another
"""

import pytest

from conftest import (
    create_expense,
    create_org,
    create_party,
    create_project,
    expense_category,
    org_headers,
)


async def get_type(client, headers, key):
    resp = await client.get(f"/api/categories/types/key/{key}", headers=headers)
    assert resp.status_code == 200, f"Get category type failed: {resp.text}"
    return resp.json()["data"]


async def create_item(client, headers, type_id, name):
    resp = await client.post(
        "/api/categories/items", json={"categoryTypeId": type_id, "name": name}, headers=headers
    )
    assert resp.status_code == 201, f"Create category item failed: {resp.text}"
    return resp.json()["data"]


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_new_organization_has_default_categories(client, owner):
    resp = await client.get("/api/categories/types", headers=owner["headers"])
    assert resp.status_code == 200
    types = {t["key"]: t for t in resp.json()["data"]}
    assert set(types) == {"expense_type", "material_type", "labour_type", "sub_work_type", "project_type"}
    assert types["expense_type"]["label"] == "Expense Types"

    expense_items = types["expense_type"]["items"]
    assert sorted(i["name"] for i in expense_items) == ["Labour", "Material", "Sub Work"]
    assert not any(i["isEditable"] for i in expense_items)
    assert types["material_type"]["items"] == []


@pytest.mark.asyncio
async def test_unknown_type_key_is_not_found(client, owner):
    resp = await client.get("/api/categories/types/key/colour_type", headers=owner["headers"])
    assert resp.status_code == 404

    resp = await client.get("/api/categories/items/type/colour_type", headers=owner["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Category type not found"


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_and_list_items_by_type(client, owner):
    headers = owner["headers"]
    labour_type = await get_type(client, headers, "labour_type")
    await create_item(client, headers, labour_type["id"], "Mason")
    created = await create_item(client, headers, labour_type["id"], "Carpenter")
    assert created["isEditable"] is True
    assert created["isActive"] is True

    resp = await client.get("/api/categories/items/type/labour_type", headers=headers)
    assert [i["name"] for i in resp.json()["data"]] == ["Carpenter", "Mason"]

    resp = await client.get(f"/api/categories/items/{created['id']}", headers=headers)
    assert resp.json()["data"]["categoryTypeId"] == labour_type["id"]


@pytest.mark.asyncio
async def test_duplicate_item_name_conflicts(client, owner):
    headers = owner["headers"]
    expense_type = await get_type(client, headers, "expense_type")
    resp = await client.post(
        "/api/categories/items",
        json={"categoryTypeId": expense_type["id"], "name": "Material"},
        headers=headers,
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_item_requires_type_in_organization(client, owner):
    resp = await client.post(
        "/api/categories/items",
        json={"categoryTypeId": "no-such-type", "name": "Tiles"},
        headers=owner["headers"],
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Category type not found"


@pytest.mark.asyncio
async def test_locked_items_cannot_be_renamed_or_deleted(client, owner):
    headers = owner["headers"]
    material_id = await expense_category(client, headers, "Material")

    resp = await client.put(f"/api/categories/items/{material_id}", json={"name": "Materials"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "CATEGORY_ITEM_LOCKED"

    resp = await client.delete(f"/api/categories/items/{material_id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "CATEGORY_ITEM_LOCKED"


@pytest.mark.asyncio
async def test_custom_item_update_deactivate_and_delete(client, owner):
    headers = owner["headers"]
    material_type = await get_type(client, headers, "material_type")
    item = await create_item(client, headers, material_type["id"], "Sand")

    resp = await client.put(f"/api/categories/items/{item['id']}", json={"name": "River Sand"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "River Sand"

    resp = await client.put(f"/api/categories/items/{item['id']}", json={"isActive": False}, headers=headers)
    assert resp.json()["data"]["isActive"] is False

    resp = await client.get("/api/categories/items/type/material_type", headers=headers)
    assert resp.json()["data"] == []
    resp = await client.get(
        "/api/categories/items/type/material_type", headers=headers, params={"includeInactive": "true"}
    )
    assert [i["name"] for i in resp.json()["data"]] == ["River Sand"]

    resp = await client.delete(f"/api/categories/items/{item['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/categories/items/{item['id']}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_item_used_by_expense_cannot_be_deleted(client, owner):
    headers = owner["headers"]
    project = await create_project(client, headers)
    party = await create_party(client, headers)
    await create_expense(client, headers, project["id"], party["id"], category="Scaffolding")
    scaffolding_id = await expense_category(client, headers, "Scaffolding")

    resp = await client.delete(f"/api/categories/items/{scaffolding_id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "FOREIGN_KEY_VIOLATION"


@pytest.mark.asyncio
async def test_items_are_isolated_per_organization(client, owner):
    other_org = await create_org(client, owner["user"]["id"], name="Other Builders")
    other_headers = org_headers(other_org["id"], owner["user"]["id"])
    foreign_id = await expense_category(client, other_headers, "Material")

    resp = await client.get(f"/api/categories/items/{foreign_id}", headers=owner["headers"])
    assert resp.status_code == 404
    assert foreign_id != await expense_category(client, owner["headers"], "Material")
