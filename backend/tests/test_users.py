"""
User endpoint tests.

Verifies that:
- users can be created, read, updated, searched and deleted
- phone numbers are unique across users
- invalid bodies are rejected with the validation envelope
- a user's organizations come back with role and counts
"""

import pytest

from conftest import create_org, create_user, unique_phone


@pytest.mark.asyncio
async def test_create_and_get_user(client):
    phone = unique_phone()
    resp = await client.post(
        "/api/users",
        json={"name": "Asha Patil", "phone": phone, "email": "asha@example.com", "location": "Pune"},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["success"] is True
    user = body["data"]
    assert user["name"] == "Asha Patil"
    assert user["phone"] == phone
    assert "createdAt" in user

    resp = await client.get(f"/api/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "asha@example.com"


@pytest.mark.asyncio
async def test_duplicate_phone_is_conflict(client):
    phone = unique_phone()
    await create_user(client, name="First", phone=phone)

    resp = await client.post("/api/users", json={"name": "Second", "phone": phone})
    assert resp.status_code == 409
    assert resp.json() == {
        "success": False,
        "error": {"message": "User already exists", "code": "UNIQUE_CONSTRAINT_VIOLATION"},
    }


@pytest.mark.asyncio
async def test_invalid_body_uses_validation_envelope(client):
    resp = await client.post("/api/users", json={"name": "", "phone": "abc"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Invalid request data"
    fields = {detail["field"] for detail in error["details"]}
    assert {"name", "phone"} <= fields


@pytest.mark.asyncio
async def test_get_missing_user_is_not_found(client):
    resp = await client.get("/api/users/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["error"] == {"message": "User not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_find_by_phone(client):
    user = await create_user(client, name="Phone Lookup")

    resp = await client.get("/api/users/by-phone", params={"phone": user["phone"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == user["id"]

    resp = await client.get("/api/users/by-phone", params={"phone": "0000000000"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_user_partially(client):
    user = await create_user(client, name="Before")

    resp = await client.put(f"/api/users/{user['id']}", json={"location": "Mumbai"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Before"
    assert data["location"] == "Mumbai"

    resp = await client.put("/api/users/missing", json={"name": "Ghost"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_user(client):
    user = await create_user(client)

    resp = await client.delete(f"/api/users/{user['id']}")
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await client.get(f"/api/users/{user['id']}")
    assert resp.status_code == 404

    resp = await client.delete(f"/api/users/{user['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_users_search_and_pagination(client):
    for name in ("Ravi Kumar", "Ravindra Joshi", "Meera Nair"):
        await create_user(client, name=name)

    resp = await client.get("/api/users", params={"search": "ravi", "limit": 1})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data["items"]) == 1
    assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2, "hasMore": True}

    resp = await client.get("/api/users", params={"search": "ravi", "limit": 1, "page": 2})
    assert resp.json()["data"]["pagination"]["hasMore"] is False


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client):
    await create_user(client, name="Plain Name")

    resp = await client.get("/api/users", params={"search": "%"})
    assert resp.json()["data"]["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_pagination_limits_are_validated(client):
    resp = await client.get("/api/users", params={"limit": 0})
    assert resp.status_code == 400
    resp = await client.get("/api/users", params={"limit": 101})
    assert resp.status_code == 400
    resp = await client.get("/api/users", params={"page": 0})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_user_organizations(client):
    user = await create_user(client, name="Org Creator")
    org = await create_org(client, user["id"], name="Deccan Infra")

    resp = await client.get(f"/api/users/{user['id']}/organizations")
    assert resp.status_code == 200
    orgs = resp.json()["data"]
    assert len(orgs) == 1
    assert orgs[0]["id"] == org["id"]
    assert orgs[0]["role"]["name"] == "Admin"
    assert orgs[0]["role"]["isSystemRole"] is True
    assert orgs[0]["memberCount"] == 1
    assert orgs[0]["projectCount"] == 0
