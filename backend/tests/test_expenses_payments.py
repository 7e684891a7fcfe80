"""
Expense and payment tests.

Verifies that:
- expense amount is rate * quantity
- expense search matches the party name as well as descriptions
- date range, category and status filters narrow the expense list
- expense categories are expense type items of the organization; the optional
  material, labour and sub-work references must point at items of their own type
- category and payment summaries aggregate per organization and project
- references to projects, parties and stages must belong to the organization
"""

import pytest

from conftest import (
    create_expense,
    create_org,
    create_party,
    create_payment,
    create_project,
    create_stage,
    expense_category,
    org_headers,
)


@pytest.fixture
async def books(client, owner):
    headers = owner["headers"]
    project = await create_project(client, headers)
    cement = await create_party(client, headers, name="Shree Cement")
    steel = await create_party(client, headers, name="Tata Steel Traders")
    return {"project": project, "cement": cement, "steel": steel}


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_expense_amount_is_rate_times_quantity(client, owner, books):
    expense = await create_expense(
        client, owner["headers"], books["project"]["id"], books["cement"]["id"], rate=12.5, quantity=8
    )
    assert expense["amount"] == 100
    assert expense["status"] == "PENDING"
    assert expense["stageId"] is None


@pytest.mark.asyncio
async def test_expense_rate_must_be_positive(client, owner, books):
    resp = await client.post(
        "/api/expenses",
        json={
            "projectId": books["project"]["id"],
            "partyId": books["cement"]["id"],
            "expenseTypeItemId": await expense_category(client, owner["headers"]),
            "rate": 0,
            "quantity": 1,
            "expenseDate": "2026-01-10",
        },
        headers=owner["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "rate"


@pytest.mark.asyncio
async def test_expense_references_must_exist(client, owner, books):
    resp = await client.post(
        "/api/expenses",
        json={
            "projectId": books["project"]["id"],
            "partyId": "no-such-party",
            "expenseTypeItemId": await expense_category(client, owner["headers"]),
            "rate": 10,
            "quantity": 1,
            "expenseDate": "2026-01-10",
        },
        headers=owner["headers"],
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Party not found"


@pytest.mark.asyncio
async def test_expense_category_must_be_an_expense_type_item(client, owner, books):
    headers = owner["headers"]
    resp = await client.get("/api/categories/types/key/material_type", headers=headers)
    material_type = resp.json()["data"]
    resp = await client.post(
        "/api/categories/items",
        json={"categoryTypeId": material_type["id"], "name": "Cement"},
        headers=headers,
    )
    cement_id = resp.json()["data"]["id"]

    resp = await client.post(
        "/api/expenses",
        json={
            "projectId": books["project"]["id"],
            "partyId": books["cement"]["id"],
            "expenseTypeItemId": cement_id,
            "rate": 10,
            "quantity": 1,
            "expenseDate": "2026-01-10",
        },
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "expenseTypeItemId"

    expense = await create_expense(
        client, headers, books["project"]["id"], books["cement"]["id"], materialTypeItemId=cement_id
    )
    assert expense["materialTypeItemId"] == cement_id
    assert expense["expenseTypeItemId"] == await expense_category(client, headers, "Material")

    resp = await client.put(
        f"/api/expenses/{expense['id']}", json={"labourTypeItemId": cement_id}, headers=headers
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_expense_category_from_another_organization_is_not_found(client, owner, books):
    other_org = await create_org(client, owner["user"]["id"], name="Other Builders")
    foreign_id = await expense_category(client, org_headers(other_org["id"], owner["user"]["id"]))

    resp = await client.post(
        "/api/expenses",
        json={
            "projectId": books["project"]["id"],
            "partyId": books["cement"]["id"],
            "expenseTypeItemId": foreign_id,
            "rate": 10,
            "quantity": 1,
            "expenseDate": "2026-01-10",
        },
        headers=owner["headers"],
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Category item not found"


@pytest.mark.asyncio
async def test_search_expenses_by_party_name(client, owner, books):
    headers = owner["headers"]
    project_id = books["project"]["id"]
    await create_expense(client, headers, project_id, books["cement"]["id"], description="OPC bags")
    await create_expense(client, headers, project_id, books["steel"]["id"], description="TMT bars")

    resp = await client.get("/api/expenses", headers=headers, params={"search": "tata"})
    assert [e["description"] for e in resp.json()["data"]["items"]] == ["TMT bars"]

    resp = await client.get("/api/expenses", headers=headers, params={"search": "opc"})
    assert [e["description"] for e in resp.json()["data"]["items"]] == ["OPC bags"]


@pytest.mark.asyncio
async def test_filter_expenses(client, owner, books):
    headers = owner["headers"]
    project_id = books["project"]["id"]
    stage = await create_stage(client, headers, project_id)
    await create_expense(client, headers, project_id, books["cement"]["id"], expenseDate="2026-01-05")
    await create_expense(
        client, headers, project_id, books["steel"]["id"],
        expenseDate="2026-02-05", category="Labour", status="APPROVED", stageId=stage["id"],
    )

    resp = await client.get(
        "/api/expenses", headers=headers, params={"startDate": "2026-02-01", "endDate": "2026-02-28"}
    )
    assert [e["expenseDate"] for e in resp.json()["data"]["items"]] == ["2026-02-05"]

    material_id = await expense_category(client, headers, "Material")
    labour_id = await expense_category(client, headers, "Labour")
    resp = await client.get("/api/expenses", headers=headers, params={"categoryId": material_id})
    assert resp.json()["data"]["pagination"]["total"] == 1

    resp = await client.get("/api/expenses", headers=headers, params={"status": "APPROVED"})
    assert [e["expenseTypeItemId"] for e in resp.json()["data"]["items"]] == [labour_id]

    resp = await client.get("/api/expenses", headers=headers, params={"stageId": stage["id"]})
    assert resp.json()["data"]["pagination"]["total"] == 1

    resp = await client.get("/api/expenses", headers=headers, params={"partyId": books["cement"]["id"]})
    assert resp.json()["data"]["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_expense_date_range_must_be_ordered(client, owner):
    resp = await client.get(
        "/api/expenses", headers=owner["headers"], params={"startDate": "2026-03-01", "endDate": "2026-02-01"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_expense_summary_by_category(client, owner, books):
    headers = owner["headers"]
    project_id = books["project"]["id"]
    other = await create_project(client, headers, name="Other")
    await create_expense(client, headers, project_id, books["cement"]["id"], rate=100, quantity=2)
    await create_expense(client, headers, project_id, books["cement"]["id"], rate=50, quantity=1)
    await create_expense(client, headers, project_id, books["steel"]["id"], rate=400, quantity=1, category="Steel")
    await create_expense(client, headers, other["id"], books["steel"]["id"], rate=10, quantity=1, category="Misc")

    resp = await client.get("/api/expenses/summary/by-category", headers=headers, params={"projectId": project_id})
    assert resp.status_code == 200
    steel_id = await expense_category(client, headers, "Steel")
    material_id = await expense_category(client, headers, "Material")
    assert resp.json()["data"] == [
        {"categoryId": steel_id, "categoryName": "Steel", "total": 400, "count": 1},
        {"categoryId": material_id, "categoryName": "Material", "total": 250, "count": 2},
    ]

    resp = await client.get("/api/expenses/summary/by-category", headers=headers)
    assert len(resp.json()["data"]) == 3


@pytest.mark.asyncio
async def test_update_and_delete_expense(client, owner, books):
    headers = owner["headers"]
    expense = await create_expense(client, headers, books["project"]["id"], books["cement"]["id"])

    resp = await client.put(f"/api/expenses/{expense['id']}", json={"quantity": 10}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["amount"] == 1000

    resp = await client.put("/api/expenses/missing", json={"quantity": 10}, headers=headers)
    assert resp.status_code == 404

    resp = await client.delete(f"/api/expenses/{expense['id']}", headers=headers)
    assert resp.status_code == 204


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_payment_linked_to_expense(client, owner, books):
    headers = owner["headers"]
    expense = await create_expense(client, headers, books["project"]["id"], books["cement"]["id"])
    payment = await create_payment(
        client, headers, books["project"]["id"], 200,
        partyId=books["cement"]["id"], expenseId=expense["id"], paymentMode="ONLINE",
    )
    assert payment["expenseId"] == expense["id"]
    assert payment["paymentMode"] == "ONLINE"

    # Deleting the expense keeps the payment and clears the link
    resp = await client.delete(f"/api/expenses/{expense['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/payments/{payment['id']}", headers=headers)
    assert resp.json()["data"]["expenseId"] is None


@pytest.mark.asyncio
async def test_payment_reference_must_exist(client, owner, books):
    resp = await client.post(
        "/api/payments",
        json={
            "projectId": books["project"]["id"],
            "expenseId": "ghost",
            "type": "OUT",
            "paymentMode": "CASH",
            "amount": 10,
            "paymentDate": "2026-01-15",
        },
        headers=owner["headers"],
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Expense not found"


@pytest.mark.asyncio
async def test_list_payments_by_type(client, owner, books):
    headers = owner["headers"]
    project_id = books["project"]["id"]
    await create_payment(client, headers, project_id, 1000, type="IN", notes="Client instalment")
    await create_payment(client, headers, project_id, 300, partyId=books["cement"]["id"])

    resp = await client.get("/api/payments", headers=headers, params={"type": "IN"})
    assert [p["amount"] for p in resp.json()["data"]["items"]] == [1000]

    resp = await client.get("/api/payments", headers=headers, params={"search": "instalment"})
    assert resp.json()["data"]["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_payment_summary(client, owner, books):
    headers = owner["headers"]
    project_id = books["project"]["id"]
    other = await create_project(client, headers, name="Other")
    await create_payment(client, headers, project_id, 1000, type="IN")
    await create_payment(client, headers, project_id, 300)
    await create_payment(client, headers, project_id, 200)
    await create_payment(client, headers, other["id"], 50)

    resp = await client.get("/api/payments/summary", headers=headers, params={"projectId": project_id})
    assert resp.json()["data"] == {"total": 1500, "count": 3, "totalIn": 1000, "totalOut": 500}

    resp = await client.get("/api/payments/summary", headers=headers, params={"type": "OUT"})
    assert resp.json()["data"] == {"total": 550, "count": 3, "totalIn": 0, "totalOut": 550}


@pytest.mark.asyncio
async def test_update_and_delete_payment(client, owner, books):
    headers = owner["headers"]
    payment = await create_payment(client, headers, books["project"]["id"], 100)

    resp = await client.put(f"/api/payments/{payment['id']}", json={"amount": 150, "type": "IN"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["amount"] == 150
    assert resp.json()["data"]["type"] == "IN"

    resp = await client.delete(f"/api/payments/{payment['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/payments/{payment['id']}", headers=headers)
    assert resp.status_code == 404
