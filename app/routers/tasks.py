# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Progress of background poster generations queued by
# POST /api/v1/conversations/{id}/generate.
#
# The WebSocket pushes the same outcome; these endpoints are the polling
# fallback.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: dict | None = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the status of a poster generation task.

    Returns the current state of the task:
    - PENDING: Task is waiting in queue
    - STARTED: Task has been picked up by a worker
    - PROGRESS: Credit check or Kie polling in progress (with percentage)
    - SUCCESS: Task finished; `result.success` tells whether a poster was
      produced (credit refusals and Kie failures end here too)
    - FAILURE: Task crashed
    """
    from workers.celery_app import celery_app

    result = celery_app.AsyncResult(task_id)

    response = TaskStatusResponse(
        task_id=task_id,
        status=result.status,
    )

    if result.status == "PROGRESS":
        info = result.info or {}
        response.progress = info.get("percent", 0)
        response.message = info.get("message", "Génération en cours...")

    elif result.status == "SUCCESS":
        response.result = result.result
        response.progress = 100
        if isinstance(result.result, dict) and not result.result.get("success", True):
            response.error = result.result.get("error")
            response.message = "Failed"
        else:
            response.message = "Complete"

    elif result.status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
        response.message = "Failed"

    elif result.status == "PENDING":
        response.progress = 0
        response.message = "Waiting in queue..."

    elif result.status == "STARTED":
        response.progress = 0
        response.message = "Starting..."

    return response


@router.delete("/{task_id}")
async def cancel_task(
    task_id: Annotated[str, Path(description="Celery task ID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Cancel a pending or running generation.

    Credits are only debited once the poster exists, so a cancelled task
    costs nothing.
    """
    from workers.celery_app import celery_app

    result = celery_app.AsyncResult(task_id)

    if result.status in ["SUCCESS", "FAILURE"]:
        return {
            "task_id": task_id,
            "message": f"Task already {result.status.lower()}, cannot cancel",
            "cancelled": False,
        }

    result.revoke(terminate=True)
    logger.info(f"User {user.id} cancelled task {task_id}")

    return {
        "task_id": task_id,
        "message": "Task cancelled",
        "cancelled": True,
    }
