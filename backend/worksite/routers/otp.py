"""
One-time code endpoints for phone verification.
"""

from __future__ import annotations

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Response

from worksite.core.dependencies import get_redis
from worksite.schemas.otp import OtpSendRequest, OtpVerifyRequest
from worksite.services.otp_service import OtpService

router = APIRouter()


def get_otp_service(redis: aioredis.Redis = Depends(get_redis)) -> OtpService:
    return OtpService(redis=redis)


@router.post("/send", summary="Send a verification code by SMS")
async def send_otp(body: OtpSendRequest, service: OtpService = Depends(get_otp_service)) -> Response:
    return await service.send_otp(body)


@router.post("/verify", summary="Verify a code")
async def verify_otp(body: OtpVerifyRequest, service: OtpService = Depends(get_otp_service)) -> Response:
    return await service.verify_otp(body)
