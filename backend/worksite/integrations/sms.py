"""
SMS providers for one-time codes.

A provider has a single operation, send_otp(phone, code) -> bool. The
console provider only logs; the Twilio provider refuses to construct
without credentials so a misconfigured deployment fails loudly.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from worksite.core.config import Settings, settings
from worksite.core.errors import UnavailableError

logger = logging.getLogger(__name__)

OTP_MESSAGE = "Your verification code is {code}. It expires in {minutes} minutes."


class SmsProvider(Protocol):
    async def send_otp(self, phone: str, code: str) -> bool: ...


class ConsoleSmsProvider:
    """Development provider: writes the code to the log instead of sending it."""

    async def send_otp(self, phone: str, code: str) -> bool:
        logger.info("OTP for %s: %s", phone, code)
        return True


class TwilioSmsProvider:
    """Sends codes through the Twilio Messages REST API."""

    API_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        expiry_minutes: int = 5,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not (account_sid and auth_token and from_number):
            raise UnavailableError(
                "SMS provider is not configured",
                code="SMS_NOT_CONFIGURED",
            )
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.expiry_minutes = expiry_minutes
        self.timeout = timeout
        self.transport = transport

    async def send_otp(self, phone: str, code: str) -> bool:
        body = OTP_MESSAGE.format(code=code, minutes=self.expiry_minutes)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.API_URL.format(sid=self.account_sid),
                    data={"To": phone, "From": self.from_number, "Body": body},
                    auth=(self.account_sid, self.auth_token),
                )
        except httpx.HTTPError as exc:
            logger.error("SMS delivery to %s failed: %s", phone, exc)
            return False

        if response.is_error:
            logger.error(
                "SMS delivery to %s rejected: %s %s",
                phone,
                response.status_code,
                response.text[:200],
            )
            return False
        return True


def get_sms_provider(config: Settings = settings) -> SmsProvider:
    """Build the provider selected by SMS_PROVIDER."""
    if config.SMS_PROVIDER == "twilio":
        return TwilioSmsProvider(
            account_sid=config.TWILIO_ACCOUNT_SID,
            auth_token=config.TWILIO_AUTH_TOKEN,
            from_number=config.TWILIO_FROM_NUMBER,
            expiry_minutes=max(1, config.OTP_EXPIRY_SECONDS // 60),
        )
    return ConsoleSmsProvider()
