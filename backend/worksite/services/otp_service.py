"""
Phone verification with one-time codes.

Codes are 6 digits, stored only as a bcrypt hash in Redis with a TTL, and
accept a bounded number of wrong attempts. Delivery is handed to Celery;
a code whose delivery cannot be queued is discarded.
"""

from __future__ import annotations

import logging
import secrets

import bcrypt
import redis.asyncio as aioredis
from fastapi import Response
from kombu.exceptions import OperationalError as BrokerError
from redis.exceptions import RedisError

from worksite.core.config import Settings, settings
from worksite.core.error_handler import error_handler
from worksite.core.errors import RateLimitedError, UnavailableError, ValidationFailedError
from worksite.core.responses import send_success
from worksite.schemas.otp import OtpSendRequest, OtpSendResponse, OtpVerifyRequest, OtpVerifyResponse

logger = logging.getLogger(__name__)

handle = error_handler("OTP")

DEV_BYPASS_CODE = "123456"


def _otp_key(phone: str) -> str:
    return f"otp:{phone}"


def generate_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def _queue_sms(phone: str, code: str) -> None:
    """
    Fire-and-forget: enqueue the Celery delivery task.
    Import is deferred to avoid loading Celery at module import.
    """
    from worksite.workers.sms_tasks import send_otp_sms
    send_otp_sms.delay(phone=phone, code=code)


class OtpService:
    """Issues and verifies one-time codes."""

    def __init__(self, redis: aioredis.Redis, config: Settings = settings) -> None:
        self.redis = redis
        self.config = config

    @property
    def dev_bypass_enabled(self) -> bool:
        return self.config.is_development and self.config.OTP_DEV_BYPASS

    async def issue(self, phone: str) -> int:
        """Store a fresh code for `phone`, replacing any previous one, and queue delivery."""
        code = generate_code()
        hashed = bcrypt.hashpw(code.encode(), bcrypt.gensalt()).decode()
        key = _otp_key(phone)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.hset(key, mapping={"hash": hashed, "attempts": 0})
            pipe.expire(key, self.config.OTP_EXPIRY_SECONDS)
            await pipe.execute()
        try:
            _queue_sms(phone, code)
        except BrokerError as exc:
            await self.redis.delete(key)
            logger.error("OTP delivery could not be queued for %s: %s", phone, exc)
            raise UnavailableError("SMS delivery is unavailable, try again later") from exc
        logger.info("OTP issued for %s", phone)
        return self.config.OTP_EXPIRY_SECONDS

    async def verify(self, phone: str, code: str) -> bool:
        key = _otp_key(phone)
        if self.dev_bypass_enabled and code == DEV_BYPASS_CODE:
            await self.redis.delete(key)
            return True

        stored = await self.redis.hgetall(key)
        if not stored:
            raise ValidationFailedError("Code has expired or was never sent", code="OTP_EXPIRED")

        attempts = int(stored.get("attempts", 0))
        if attempts >= self.config.OTP_MAX_ATTEMPTS:
            await self.redis.delete(key)
            raise RateLimitedError("Too many failed attempts, request a new code")

        if bcrypt.checkpw(code.encode(), stored["hash"].encode()):
            await self.redis.delete(key)
            return True

        attempts = await self.redis.hincrby(key, "attempts", 1)
        raise ValidationFailedError(
            "Invalid code",
            code="INVALID_OTP",
            details={"attemptsRemaining": max(0, self.config.OTP_MAX_ATTEMPTS - attempts)},
        )

    # -----------------------------------------------------------------------
    # Controllers
    # -----------------------------------------------------------------------

    @handle("send")
    async def send_otp(self, body: OtpSendRequest) -> Response:
        try:
            expires_in = await self.issue(body.phone)
        except RedisError as exc:
            raise UnavailableError("Verification store is unavailable") from exc
        return send_success(OtpSendResponse(phone=body.phone, expires_in=expires_in))

    @handle("verify")
    async def verify_otp(self, body: OtpVerifyRequest) -> Response:
        try:
            verified = await self.verify(body.phone, body.code)
        except RedisError as exc:
            raise UnavailableError("Verification store is unavailable") from exc
        return send_success(OtpVerifyResponse(phone=body.phone, verified=verified))
