"""
Party tests.

Verifies that:
- party phone numbers need at least ten digits
- list balances, stats and the per-type summary are derived from expenses and payments
- a party's projects and transaction ledger are scoped to that party
- a party with booked expenses cannot be deleted
"""

import pytest

from conftest import (
    create_expense,
    create_party,
    create_payment,
    create_project,
)


@pytest.fixture
async def ledger(client, owner):
    """A vendor with expenses and payments on two projects."""
    headers = owner["headers"]
    villa = await create_project(client, headers, name="Villa")
    tower = await create_project(client, headers, name="Tower")
    vendor = await create_party(client, headers, name="Shree Cement")
    await create_expense(client, headers, villa["id"], vendor["id"], rate=100, quantity=3)
    await create_expense(
        client, headers, tower["id"], vendor["id"], rate=50, quantity=2,
        description="Sand", expenseDate="2026-02-01",
    )
    await create_payment(client, headers, villa["id"], 120, partyId=vendor["id"], notes="Advance")
    return {"villa": villa, "tower": tower, "vendor": vendor}


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_party_phone_needs_ten_digits(client, owner):
    resp = await client.post(
        "/api/parties",
        json={"name": "Short", "phone": "12-34", "location": "Pune", "type": "LABOUR"},
        headers=owner["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "phone"

    party = await create_party(client, owner["headers"], phone="+91 98765 43210")
    assert party["phone"] == "+91 98765 43210"


@pytest.mark.asyncio
async def test_update_party(client, owner):
    party = await create_party(client, owner["headers"])
    resp = await client.put(
        f"/api/parties/{party['id']}", json={"type": "SUBCONTRACTOR"}, headers=owner["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["type"] == "SUBCONTRACTOR"
    assert resp.json()["data"]["name"] == "Shree Cement"


@pytest.mark.asyncio
async def test_delete_unused_party(client, owner):
    party = await create_party(client, owner["headers"])
    resp = await client.delete(f"/api/parties/{party['id']}", headers=owner["headers"])
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_party_with_expenses_cannot_be_deleted(client, owner, ledger):
    resp = await client.delete(f"/api/parties/{ledger['vendor']['id']}", headers=owner["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "FOREIGN_KEY_VIOLATION"

    resp = await client.get(f"/api/parties/{ledger['vendor']['id']}", headers=owner["headers"])
    assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_parties_with_balance(client, owner, ledger):
    await create_party(client, owner["headers"], name="Idle Labour", type="LABOUR")

    resp = await client.get("/api/parties", headers=owner["headers"])
    balances = {p["name"]: p["balance"] for p in resp.json()["data"]["items"]}
    assert balances == {"Shree Cement": 280, "Idle Labour": 0}

    resp = await client.get("/api/parties", headers=owner["headers"], params={"type": "LABOUR"})
    assert [p["name"] for p in resp.json()["data"]["items"]] == ["Idle Labour"]


@pytest.mark.asyncio
async def test_party_stats(client, owner, ledger):
    resp = await client.get(f"/api/parties/{ledger['vendor']['id']}/stats", headers=owner["headers"])
    assert resp.json()["data"] == {"totalExpenses": 400, "totalPayments": 120, "balance": 280}

    resp = await client.get("/api/parties/missing/stats", headers=owner["headers"])
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_party_summary(client, owner, ledger):
    await create_party(client, owner["headers"], name="Mason Crew", type="LABOUR")

    resp = await client.get("/api/parties/summary", headers=owner["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "totalVendors": 1,
        "totalLabours": 1,
        "totalSubcontractors": 0,
        "vendorsBalance": 280,
        "laboursBalance": 0,
        "subcontractorsBalance": 0,
    }


@pytest.mark.asyncio
async def test_party_projects(client, owner, ledger):
    resp = await client.get(f"/api/parties/{ledger['vendor']['id']}/projects", headers=owner["headers"])
    assert resp.status_code == 200
    data = resp.json()["data"]

    credits = {p["name"]: p["credit"] for p in data["items"]}
    assert credits == {"Tower": 100, "Villa": 180}
    assert data["totals"] == {"totalExpenses": 400, "totalPayments": 120, "credit": 280}
    assert data["pagination"]["total"] == 2


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_party_transactions_newest_first(client, owner, ledger):
    resp = await client.get(
        f"/api/parties/{ledger['vendor']['id']}/transactions", headers=owner["headers"]
    )
    items = resp.json()["data"]["items"]
    assert [(t["tab"], t["date"], t["title"]) for t in items] == [
        ("expense", "2026-02-01", "Sand"),
        ("payment", "2026-01-15", "Advance"),
        ("expense", "2026-01-10", "Material"),
    ]
    assert resp.json()["data"]["pagination"]["total"] == 3


@pytest.mark.asyncio
async def test_party_transactions_filters(client, owner, ledger):
    url = f"/api/parties/{ledger['vendor']['id']}/transactions"

    resp = await client.get(url, headers=owner["headers"], params={"type": "payment"})
    items = resp.json()["data"]["items"]
    assert [t["amount"] for t in items] == [120]

    resp = await client.get(url, headers=owner["headers"], params={"projectId": ledger["tower"]["id"]})
    items = resp.json()["data"]["items"]
    assert [(t["tab"], t["amount"]) for t in items] == [("expense", 100)]

    resp = await client.get(url, headers=owner["headers"], params={"type": "refund"})
    assert resp.status_code == 400
