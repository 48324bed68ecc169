# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background poster generation.
#
# Components:
# - celery_app.py: Celery application, worker ping and lifecycle logging
# - tasks.py: Task definitions (generate_poster)
# - config.py: Queues, time limits and serialization
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info -Q default,ai_tasks
#
#   # Submit task (from API, with a task id chosen up front)
#   from workers.tasks import generate_poster
#   generate_poster.apply_async(args=[user_id, request.model_dump(mode="json")], task_id=task_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
