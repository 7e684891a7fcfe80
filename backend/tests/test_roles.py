"""
Role endpoint tests.

Verifies that:
- custom roles can be created, renamed and deleted
- role names are unique within an organization
- system roles and roles with members cannot be deleted
"""

import pytest

from conftest import unique_phone


async def create_role(client, headers, name="Site Engineer", description=None):
    resp = await client.post("/api/roles", json={"name": name, "description": description}, headers=headers)
    assert resp.status_code == 201, f"Create role failed: {resp.text}"
    return resp.json()["data"]


async def system_role(client, headers, name):
    resp = await client.get("/api/roles", headers=headers, params={"search": name})
    return next(r for r in resp.json()["data"]["items"] if r["name"] == name)


@pytest.mark.asyncio
async def test_create_custom_role(client, owner):
    role = await create_role(client, owner["headers"], description="Supervises the site")
    assert role["isSystemRole"] is False
    assert role["memberCount"] == 0
    assert role["organizationId"] == owner["org"]["id"]

    resp = await client.get("/api/roles", headers=owner["headers"])
    names = [r["name"] for r in resp.json()["data"]["items"]]
    # System roles first, then custom roles by creation
    assert names[-1] == "Site Engineer"


@pytest.mark.asyncio
async def test_cannot_forge_system_role(client, owner):
    resp = await client.post(
        "/api/roles",
        json={"name": "Fake Admin", "isSystemRole": True},
        headers=owner["headers"],
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["isSystemRole"] is False


@pytest.mark.asyncio
async def test_duplicate_role_name_is_conflict(client, owner):
    await create_role(client, owner["headers"], name="Accountant")
    resp = await client.post("/api/roles", json={"name": "Accountant"}, headers=owner["headers"])
    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "Role already exists"


@pytest.mark.asyncio
async def test_update_role(client, owner):
    role = await create_role(client, owner["headers"])
    resp = await client.put(
        f"/api/roles/{role['id']}",
        json={"description": "Updated"},
        headers=owner["headers"],
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Site Engineer"
    assert data["description"] == "Updated"


@pytest.mark.asyncio
async def test_delete_unused_role(client, owner):
    role = await create_role(client, owner["headers"])
    resp = await client.delete(f"/api/roles/{role['id']}", headers=owner["headers"])
    assert resp.status_code == 204

    resp = await client.get(f"/api/roles/{role['id']}", headers=owner["headers"])
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_system_role_cannot_be_deleted(client, owner):
    manager = await system_role(client, owner["headers"], "Manager")
    resp = await client.delete(f"/api/roles/{manager['id']}", headers=owner["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "SYSTEM_ROLE_DELETE"


@pytest.mark.asyncio
async def test_role_with_members_cannot_be_deleted(client, owner):
    role = await create_role(client, owner["headers"])
    resp = await client.post(
        "/api/team",
        json={"name": "Vikram", "phone": unique_phone(), "roleId": role["id"]},
        headers=owner["headers"],
    )
    assert resp.status_code == 201, resp.text

    resp = await client.delete(f"/api/roles/{role['id']}", headers=owner["headers"])
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "ROLE_HAS_MEMBERS"
    assert error["details"] == {"memberCount": 1}

    resp = await client.get(f"/api/roles/{role['id']}", headers=owner["headers"])
    assert resp.json()["data"]["memberCount"] == 1
