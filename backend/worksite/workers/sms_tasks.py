"""
SMS background tasks.

OTP delivery runs off the request path; failed sends are retried.
"""

from __future__ import annotations

import asyncio
import logging

from worksite.integrations.sms import get_sms_provider
from worksite.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


class SmsDeliveryError(RuntimeError):
    """The provider reported that the message was not sent."""


@celery_app.task(
    name="worksite.workers.sms_tasks.send_otp_sms",
    bind=True,
    max_retries=3,
    default_retry_delay=10,
)
def send_otp_sms(self, phone: str, code: str) -> dict[str, str]:  # type: ignore[no-untyped-def]
    """Deliver a one-time code through the configured SMS provider."""
    try:
        provider = get_sms_provider()
        loop = asyncio.new_event_loop()
        try:
            sent = loop.run_until_complete(provider.send_otp(phone, code))
        finally:
            loop.close()
        if not sent:
            raise SmsDeliveryError(f"SMS provider did not accept message for {phone}")
        return {"status": "sent", "phone": phone}
    except SmsDeliveryError as exc:
        logger.error("send_otp_sms failed: %s", exc, extra={"task_name": "send_otp_sms"})
        raise self.retry(exc=exc)
