"""
Phone verification (OTP) schemas.
"""

from __future__ import annotations

from pydantic import Field

from worksite.schemas.common import PHONE_PATTERN, CamelModel


class OtpSendRequest(CamelModel):
    phone: str = Field(min_length=1, max_length=20, pattern=PHONE_PATTERN)


class OtpVerifyRequest(CamelModel):
    phone: str = Field(min_length=1, max_length=20, pattern=PHONE_PATTERN)
    code: str = Field(pattern=r"^\d{6}$")


class OtpSendResponse(CamelModel):
    phone: str
    expires_in: int


class OtpVerifyResponse(CamelModel):
    phone: str
    verified: bool
