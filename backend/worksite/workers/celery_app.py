"""
Celery application for background delivery.

Redis is both broker and result backend. OTP messages go to their own
queue so a backlog elsewhere never delays a login code.
"""

from celery import Celery
from celery.signals import after_setup_logger

from worksite.core.config import settings
from worksite.core.logging import setup_logging

SMS_QUEUE = "sms"

celery_app = Celery(
    "worksite",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["worksite.workers.sms_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    # Bounded by the OTP lifetime
    result_expires=settings.OTP_EXPIRY_SECONDS,
    task_time_limit=30,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    task_default_queue="default",
    task_routes={"worksite.workers.sms_tasks.*": {"queue": SMS_QUEUE}},
)


@after_setup_logger.connect
def _configure_worker_logging(**_: object) -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
