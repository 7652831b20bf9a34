"""Celery app configuration."""

from celery import Celery
from app.config import get_settings

settings = get_settings()
celery_app = Celery(
    "scriptgo",
    broker=settings.celery_broker,
    backend=settings.redis_url,
    include=[
        "app.workers.tasks.notify",
    ],
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    task_always_eager=settings.celery_task_always_eager,
    worker_prefetch_multiplier=1,
)
