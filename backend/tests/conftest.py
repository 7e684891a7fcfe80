"""
Pytest configuration for Worksite backend tests.

Every test gets a fresh in-memory SQLite database with foreign keys
enforced, the API mounted on an httpx ASGITransport, an in-memory Redis
stand-in for OTP state, and SMS queueing captured instead of sent.
"""

import uuid
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from worksite.core.database import get_db
from worksite.core.dependencies import get_redis
from worksite.main import app
from worksite.models import Base


class FakeRedis:
    """The handful of hash commands the OTP service uses, kept in a dict.

    Pipelined commands are also recorded per batch in `transactions`.
    """

    def __init__(self) -> None:
        self.store: dict[str, dict[str, str]] = {}
        self.ttls: dict[str, int] = {}
        self.transactions: list[list[str]] = []

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def hset(self, key: str, mapping: dict[str, Any]) -> int:
        bucket = self.store.setdefault(key, {})
        bucket.update({k: str(v) for k, v in mapping.items()})
        return len(mapping)

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.store.get(key, {}))

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        bucket = self.store.setdefault(key, {})
        value = int(bucket.get(field, "0")) + amount
        bucket[field] = str(value)
        return value

    async def expire(self, key: str, seconds: int) -> bool:
        if key not in self.store:
            return False
        self.ttls[key] = seconds
        return True

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self)


class FakePipeline:
    """Queues commands and applies them together on execute, recording the batch."""

    def __init__(self, redis: FakeRedis) -> None:
        self.redis = redis
        self.commands: list[tuple[str, tuple, dict]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.commands.clear()

    def __getattr__(self, name: str) -> Any:
        def queue(*args: Any, **kwargs: Any) -> "FakePipeline":
            self.commands.append((name, args, kwargs))
            return self
        return queue

    async def execute(self) -> list[Any]:
        self.redis.transactions.append([name for name, _, _ in self.commands])
        results = [
            await getattr(self.redis, name)(*args, **kwargs) for name, args, kwargs in self.commands
        ]
        self.commands.clear()
        return results


def unique_phone() -> str:
    """Ten-digit phone number that is unique per call."""
    return "9" + str(uuid.uuid4().int)[:9]


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(test_session_factory):
    async with test_session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Redis / SMS
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture(autouse=True)
def sent_sms(monkeypatch) -> list[tuple[str, str]]:
    """Capture OTP deliveries instead of enqueuing Celery tasks."""
    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(
        "worksite.services.otp_service._queue_sms",
        lambda phone, code: sent.append((phone, code)),
    )
    return sent


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(test_session_factory, fake_redis):
    """API client with the database and Redis dependencies overridden."""

    async def override_get_db():
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_redis():
        return fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def create_user(client: httpx.AsyncClient, name: str = "Test User", phone: str | None = None) -> dict:
    resp = await client.post("/api/users", json={"name": name, "phone": phone or unique_phone()})
    assert resp.status_code == 201, f"Create user failed: {resp.text}"
    return resp.json()["data"]


async def create_org(client: httpx.AsyncClient, user_id: str, name: str = "Acme Builders") -> dict:
    resp = await client.post(
        "/api/organizations",
        json={"name": name},
        headers={"X-User-Id": user_id},
    )
    assert resp.status_code == 201, f"Create organization failed: {resp.text}"
    return resp.json()["data"]


def org_headers(org_id: str, user_id: str) -> dict[str, str]:
    return {"X-Organization-Id": org_id, "X-User-Id": user_id}


@pytest.fixture
async def owner(client) -> dict:
    """A user who created an organization, with the headers to act in it."""
    user = await create_user(client, name="Olivia Owner")
    org = await create_org(client, user["id"])
    return {"user": user, "org": org, "headers": org_headers(org["id"], user["id"])}


async def create_project(client: httpx.AsyncClient, headers: dict, name: str = "Riverside Villa", **extra: Any) -> dict:
    payload = {"name": name, "location": "Pune", "startDate": "2026-01-01", **extra}
    resp = await client.post("/api/projects", json=payload, headers=headers)
    assert resp.status_code == 201, f"Create project failed: {resp.text}"
    return resp.json()["data"]


async def create_stage(
    client: httpx.AsyncClient,
    headers: dict,
    project_id: str,
    name: str = "Foundation",
    budget: float = 1000,
    **extra: Any,
) -> dict:
    payload = {
        "projectId": project_id,
        "name": name,
        "startDate": "2026-01-01",
        "endDate": "2026-02-01",
        "budgetAmount": budget,
        **extra,
    }
    resp = await client.post("/api/stages", json=payload, headers=headers)
    assert resp.status_code == 201, f"Create stage failed: {resp.text}"
    return resp.json()["data"]


async def create_party(
    client: httpx.AsyncClient,
    headers: dict,
    name: str = "Shree Cement",
    type: str = "VENDOR",
    **extra: Any,
) -> dict:
    payload = {"name": name, "phone": unique_phone(), "location": "Nashik", "type": type, **extra}
    resp = await client.post("/api/parties", json=payload, headers=headers)
    assert resp.status_code == 201, f"Create party failed: {resp.text}"
    return resp.json()["data"]


async def expense_category(client: httpx.AsyncClient, headers: dict, name: str = "Material") -> str:
    """Id of the named expense type item; created when the organization has none by that name."""
    resp = await client.get("/api/categories/types/key/expense_type", headers=headers)
    assert resp.status_code == 200, f"Get expense types failed: {resp.text}"
    expense_type = resp.json()["data"]
    for item in expense_type["items"]:
        if item["name"] == name:
            return item["id"]
    resp = await client.post(
        "/api/categories/items",
        json={"categoryTypeId": expense_type["id"], "name": name},
        headers=headers,
    )
    assert resp.status_code == 201, f"Create category item failed: {resp.text}"
    return resp.json()["data"]["id"]


async def create_expense(
    client: httpx.AsyncClient,
    headers: dict,
    project_id: str,
    party_id: str,
    rate: float = 100,
    quantity: float = 2,
    category: str = "Material",
    **extra: Any,
) -> dict:
    payload = {
        "projectId": project_id,
        "partyId": party_id,
        "rate": rate,
        "quantity": quantity,
        "expenseDate": "2026-01-10",
        **extra,
    }
    if "expenseTypeItemId" not in payload:
        payload["expenseTypeItemId"] = await expense_category(client, headers, category)
    resp = await client.post("/api/expenses", json=payload, headers=headers)
    assert resp.status_code == 201, f"Create expense failed: {resp.text}"
    return resp.json()["data"]


async def create_payment(
    client: httpx.AsyncClient,
    headers: dict,
    project_id: str,
    amount: float,
    type: str = "OUT",
    **extra: Any,
) -> dict:
    payload = {
        "projectId": project_id,
        "type": type,
        "paymentMode": "CASH",
        "amount": amount,
        "paymentDate": "2026-01-15",
        **extra,
    }
    resp = await client.post("/api/payments", json=payload, headers=headers)
    assert resp.status_code == 201, f"Create payment failed: {resp.text}"
    return resp.json()["data"]
