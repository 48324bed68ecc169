# =============================================================================
# workers/celery_app.py - Poster Generation Worker
# =============================================================================
# The Celery application that runs generate_poster outside the API process.
# Broker and result backend are the Redis instance from settings.REDIS_URL
# (the same Redis that holds conversations and carries WebSocket events).
#
# Usage:
#   celery -A workers.celery_app worker --queues=default,ai_tasks --loglevel=info
#   python scripts/start_worker.py
#
# The API only talks to the worker through this app: apply_async() to queue,
# AsyncResult() for /tasks/{id}, control.ping() for /health/ready.
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun, worker_ready

from app.config import settings

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Drop credentials from a redis:// URL before logging it."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    """
    Build the Celery app from settings.

    Returns:
        Celery app with workers.tasks registered and CeleryConfig applied
    """
    app = Celery(
        "graphiste_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.debug(f"Celery app configured with broker {redact_url(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


def ping_workers(timeout: float = 1.0) -> int:
    """
    Number of workers answering a broadcast ping.

    Raises whatever the broker raises when Redis is unreachable.
    """
    replies = celery_app.control.ping(timeout=timeout) or []
    return len(replies)


# =============================================================================
# Lifecycle Logging
# =============================================================================

@worker_ready.connect
def on_worker_ready(sender=None, **extra):
    logger.info(f"Poster worker ready on {redact_url(settings.REDIS_URL)}")


@task_prerun.connect
def on_task_prerun(sender=None, task_id=None, task=None, **extra):
    logger.info(f"Task started: {task.name} [{task_id}]")


@task_postrun.connect
def on_task_postrun(sender=None, task_id=None, task=None, state=None, **extra):
    logger.info(f"Task finished: {task.name} [{task_id}] state={state}")


@task_failure.connect
def on_task_failure(sender=None, task_id=None, exception=None, **extra):
    # generate_poster reports its own failures; this only fires on crashes
    logger.error(f"Task crashed: {sender.name} [{task_id}]: {exception}")
