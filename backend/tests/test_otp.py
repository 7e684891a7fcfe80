"""
OTP tests.

Verifies that:
- a sent code is stored hashed, expires with a TTL and is handed to SMS delivery
- the code, its attempt counter and its TTL are written in one transaction
- a code whose delivery cannot be queued is discarded and reported as unavailable
- the right code verifies once; wrong codes count down the remaining attempts
- exhausted attempts and expired codes are rejected with their own codes
- the development bypass code only works when enabled in development
"""

import bcrypt
import pytest
from kombu.exceptions import OperationalError

from worksite.core.config import Settings
from worksite.core.errors import RateLimitedError, UnavailableError, ValidationFailedError
from worksite.services.otp_service import DEV_BYPASS_CODE, OtpService

PHONE = "9876543210"


def sent_code(sent_sms, phone=PHONE):
    codes = [code for to, code in sent_sms if to == phone]
    assert codes, f"No OTP sent to {phone}"
    return codes[-1]


def wrong_code(code):
    return "000000" if code != "000000" else "111111"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_issue_stores_hash_with_ttl(fake_redis, sent_sms):
    service = OtpService(fake_redis, Settings(OTP_EXPIRY_SECONDS=120))
    expires_in = await service.issue(PHONE)

    code = sent_code(sent_sms)
    stored = fake_redis.store[f"otp:{PHONE}"]
    assert expires_in == 120
    assert fake_redis.ttls[f"otp:{PHONE}"] == 120
    assert stored["attempts"] == "0"
    assert code not in stored["hash"]
    assert bcrypt.checkpw(code.encode(), stored["hash"].encode())
    assert fake_redis.transactions == [["delete", "hset", "expire"]]


def _broker_down(phone, code):
    raise OperationalError("Error 111 connecting to localhost:6379. Connection refused.")


@pytest.mark.asyncio
async def test_issue_discards_code_when_delivery_cannot_be_queued(fake_redis, monkeypatch):
    monkeypatch.setattr("worksite.services.otp_service._queue_sms", _broker_down)
    service = OtpService(fake_redis, Settings())

    with pytest.raises(UnavailableError):
        await service.issue(PHONE)
    assert f"otp:{PHONE}" not in fake_redis.store


@pytest.mark.asyncio
async def test_verify_consumes_code(fake_redis, sent_sms):
    service = OtpService(fake_redis, Settings())
    await service.issue(PHONE)
    code = sent_code(sent_sms)

    assert await service.verify(PHONE, code) is True
    with pytest.raises(ValidationFailedError) as exc_info:
        await service.verify(PHONE, code)
    assert exc_info.value.code == "OTP_EXPIRED"


@pytest.mark.asyncio
async def test_reissue_replaces_previous_code(fake_redis, sent_sms):
    service = OtpService(fake_redis, Settings())
    await service.issue(PHONE)
    first = sent_code(sent_sms)
    await service.issue(PHONE)
    second = sent_code(sent_sms)

    if first != second:
        with pytest.raises(ValidationFailedError):
            await service.verify(PHONE, first)
    assert await service.verify(PHONE, second) is True


@pytest.mark.asyncio
async def test_wrong_codes_count_down_then_lock(fake_redis, sent_sms):
    service = OtpService(fake_redis, Settings(OTP_MAX_ATTEMPTS=2))
    await service.issue(PHONE)
    code = sent_code(sent_sms)
    bad = wrong_code(code)

    remaining = []
    for _ in range(2):
        with pytest.raises(ValidationFailedError) as exc_info:
            await service.verify(PHONE, bad)
        assert exc_info.value.code == "INVALID_OTP"
        remaining.append(exc_info.value.details["attemptsRemaining"])
    assert remaining == [1, 0]

    # Even the right code is refused once attempts are used up
    with pytest.raises(RateLimitedError):
        await service.verify(PHONE, code)
    assert f"otp:{PHONE}" not in fake_redis.store


@pytest.mark.asyncio
async def test_dev_bypass_only_in_development(fake_redis):
    enabled = OtpService(fake_redis, Settings(ENVIRONMENT="development", OTP_DEV_BYPASS=True))
    assert await enabled.verify(PHONE, DEV_BYPASS_CODE) is True

    production = OtpService(fake_redis, Settings(ENVIRONMENT="production", OTP_DEV_BYPASS=True))
    with pytest.raises(ValidationFailedError):
        await production.verify(PHONE, DEV_BYPASS_CODE)

    disabled = OtpService(fake_redis, Settings(ENVIRONMENT="development", OTP_DEV_BYPASS=False))
    with pytest.raises(ValidationFailedError):
        await disabled.verify(PHONE, DEV_BYPASS_CODE)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_send_and_verify_routes(client, sent_sms):
    resp = await client.post("/api/otp/send", json={"phone": PHONE})
    assert resp.status_code == 200, f"Send OTP failed: {resp.text}"
    assert resp.json()["data"] == {"phone": PHONE, "expiresIn": 300}

    code = sent_code(sent_sms)
    resp = await client.post("/api/otp/verify", json={"phone": PHONE, "code": code})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"phone": PHONE, "verified": True}


@pytest.mark.asyncio
async def test_verify_route_errors(client, sent_sms):
    resp = await client.post("/api/otp/verify", json={"phone": PHONE, "code": "123456"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "OTP_EXPIRED"

    await client.post("/api/otp/send", json={"phone": PHONE})
    code = sent_code(sent_sms)
    resp = await client.post("/api/otp/verify", json={"phone": PHONE, "code": wrong_code(code)})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "INVALID_OTP"
    assert error["details"] == {"attemptsRemaining": 2}


@pytest.mark.asyncio
async def test_verify_route_too_many_attempts(client, sent_sms):
    await client.post("/api/otp/send", json={"phone": PHONE})
    bad = wrong_code(sent_code(sent_sms))
    for _ in range(3):
        await client.post("/api/otp/verify", json={"phone": PHONE, "code": bad})

    resp = await client.post("/api/otp/verify", json={"phone": PHONE, "code": bad})
    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == "TOO_MANY_ATTEMPTS"


@pytest.mark.asyncio
async def test_otp_request_validation(client):
    resp = await client.post("/api/otp/send", json={"phone": "not a phone"})
    assert resp.status_code == 400

    resp = await client.post("/api/otp/verify", json={"phone": PHONE, "code": "12ab"})
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "code"


@pytest.mark.asyncio
async def test_send_route_reports_unavailable_delivery(client, fake_redis, monkeypatch):
    monkeypatch.setattr("worksite.services.otp_service._queue_sms", _broker_down)

    resp = await client.post("/api/otp/send", json={"phone": PHONE})
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "SERVICE_UNAVAILABLE"
    assert fake_redis.store == {}
