"""Fire-and-forget dispatch of notification tasks."""

import logging
from typing import Any

from celery import Task

from app.workers.tasks.notify import send_password_reset, send_script_ready, send_welcome

logger = logging.getLogger(__name__)


def dispatch_detached(task: Task, *args: Any) -> bool:
    """
    Enqueue a task without waiting on it. The caller never sees its outcome;
    a failure to enqueue is logged and reported as False, never raised.
    """
    try:
        task.delay(*args)
    except Exception:
        logger.exception("Could not dispatch %s", task.name)
        return False
    return True


def notify_welcome(email: str, name: str) -> bool:
    return dispatch_detached(send_welcome, email, name)


def notify_password_reset(email: str, token: str) -> bool:
    return dispatch_detached(send_password_reset, email, token)


def notify_script_ready(email: str, title: str, content: Any) -> bool:
    return dispatch_detached(send_script_ready, email, title, content)
