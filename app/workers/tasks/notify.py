"""Notification emails run detached from the request that triggered them.

Failures are logged and dropped: no retries, nothing reported back.
"""

import logging
from typing import Any

from app.services.email_service import (
    send_password_reset_email,
    send_script_ready_email,
    send_welcome_email,
)
from app.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="notify.welcome_email")
def send_welcome(to_email: str, full_name: str) -> None:
    try:
        send_welcome_email(to_email, full_name)
    except Exception:
        logger.exception("Welcome email to %s failed", to_email)


@celery_app.task(name="notify.password_reset_email")
def send_password_reset(to_email: str, reset_token: str) -> None:
    try:
        send_password_reset_email(to_email, reset_token)
    except Exception:
        logger.exception("Password reset email to %s failed", to_email)


@celery_app.task(name="notify.script_ready_email")
def send_script_ready(to_email: str, script_title: str, content: Any) -> None:
    try:
        send_script_ready_email(to_email, script_title, content)
    except Exception:
        logger.exception("Script ready email to %s failed", to_email)
