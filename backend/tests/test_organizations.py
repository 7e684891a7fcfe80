"""
Organization and organization-context tests.

Verifies that:
- creating an organization seeds the system roles and makes the creator an Admin
- organization-scoped routes require both context headers
- unknown organizations and non-members are rejected
- organization data is only visible to its members
"""

import pytest

from conftest import create_org, create_project, create_user, org_headers


# ---------------------------------------------------------------------------
# Organization CRUD
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_organization_seeds_roles(client, owner):
    org = owner["org"]
    assert org["name"] == "Acme Builders"
    assert org["memberCount"] == 1
    assert org["projectCount"] == 0

    resp = await client.get("/api/roles", headers=owner["headers"])
    assert resp.status_code == 200
    roles = resp.json()["data"]["items"]
    assert {r["name"] for r in roles} == {"Admin", "Manager", "Member"}
    assert all(r["isSystemRole"] for r in roles)
    admin = next(r for r in roles if r["name"] == "Admin")
    assert admin["memberCount"] == 1


@pytest.mark.asyncio
async def test_create_organization_requires_user(client):
    resp = await client.post("/api/organizations", json={"name": "No Creator"})
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "MISSING_USER_CONTEXT"

    resp = await client.post(
        "/api/organizations",
        json={"name": "Ghost Creator"},
        headers={"X-User-Id": "missing-user"},
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "User not found"


@pytest.mark.asyncio
async def test_get_update_delete_organization(client, owner):
    org_id = owner["org"]["id"]
    headers = {"X-User-Id": owner["user"]["id"]}

    await create_project(client, owner["headers"])
    resp = await client.get(f"/api/organizations/{org_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["projectCount"] == 1

    resp = await client.put(f"/api/organizations/{org_id}", json={"name": "Acme Infra"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Acme Infra"

    resp = await client.delete(f"/api/organizations/{org_id}", headers=headers)
    assert resp.status_code == 204

    resp = await client.get(f"/api/organizations/{org_id}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_outsider_cannot_read_organization(client, owner):
    outsider = await create_user(client, name="Outsider")
    resp = await client.get(
        f"/api/organizations/{owner['org']['id']}",
        headers={"X-User-Id": outsider["id"]},
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_list_organization_members(client, owner):
    resp = await client.get(
        f"/api/organizations/{owner['org']['id']}/members",
        headers={"X-User-Id": owner["user"]["id"]},
    )
    assert resp.status_code == 200
    items = resp.json()["data"]["items"]
    assert [m["id"] for m in items] == [owner["user"]["id"]]
    assert items[0]["membership"]["role"]["name"] == "Admin"


# ---------------------------------------------------------------------------
# Organization context
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_missing_headers_are_forbidden(client, owner):
    resp = await client.get("/api/projects")
    assert resp.status_code == 403
    assert resp.json() == {
        "success": False,
        "error": {"message": "Organization context is required", "code": "MISSING_ORG_CONTEXT"},
    }

    resp = await client.get("/api/projects", headers={"X-Organization-Id": owner["org"]["id"]})
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "MISSING_ORG_CONTEXT"


@pytest.mark.asyncio
async def test_unknown_organization_is_not_found(client, owner):
    resp = await client.get("/api/projects", headers=org_headers("missing-org", owner["user"]["id"]))
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "ORG_NOT_FOUND"


@pytest.mark.asyncio
async def test_non_member_is_forbidden(client, owner):
    outsider = await create_user(client, name="Outsider")
    resp = await client.get("/api/projects", headers=org_headers(owner["org"]["id"], outsider["id"]))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_data_is_isolated_between_organizations(client, owner):
    project = await create_project(client, owner["headers"], name="Private Tower")

    other_user = await create_user(client, name="Other Owner")
    other_org = await create_org(client, other_user["id"], name="Rival Corp")
    other_headers = org_headers(other_org["id"], other_user["id"])

    resp = await client.get("/api/projects", headers=other_headers)
    assert resp.json()["data"]["pagination"]["total"] == 0

    resp = await client.get(f"/api/projects/{project['id']}", headers=other_headers)
    assert resp.status_code == 404

    resp = await client.put(f"/api/projects/{project['id']}", json={"name": "Hijacked"}, headers=other_headers)
    assert resp.status_code == 404

    resp = await client.delete(f"/api/projects/{project['id']}", headers=other_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
