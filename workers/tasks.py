# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for poster generation.
#
# Tasks:
# - generate_poster: Credit check -> Kie generation -> history -> debit,
#   then updates the conversation and notifies WebSocket clients
# =============================================================================

import logging
from typing import Any

from celery import shared_task, current_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


# =============================================================================
# Conversation Updates
# =============================================================================

def _finish_conversation(
    conversation_id: str | None,
    image_url: str | None = None,
    image_id: str | None = None,
    error: str | None = None,
) -> None:
    """Move the conversation to complete, or record the failure."""
    if not conversation_id:
        return

    from core.services.conversation_service import ConversationService
    from core.services.conversation_store import ConversationStore

    store = ConversationStore()
    conversation = store.get(conversation_id)
    if conversation is None:
        logger.warning(f"Conversation {conversation_id} expired before generation finished")
        return

    service = ConversationService()
    if error is None:
        service.complete_generation(conversation, image_url, image_id)
    else:
        service.fail_generation(conversation, error)
    store.save(conversation)


# =============================================================================
# Poster Generation Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_poster")
def generate_poster(
    self,
    user_id: str,
    request: dict[str, Any],
    conversation_id: str | None = None,
    color_palette: list[str] | None = None,
) -> dict[str, Any]:
    """
    Generate a poster in the background.

    Args:
        user_id: The user UUID (credits are checked and debited for them)
        request: Serialized GenerateImageRequest
        conversation_id: Conversation to update when done (optional)
        color_palette: Palette stored with the history entry

    Returns:
        Dict with:
        - success: bool
        - image_url / image_id / provider / kie_task_id (on success)
        - error / code (on failure)
    """
    from app.exceptions import GraphisteException
    from app.websocket.broadcast import (
        publish_generation_complete,
        publish_generation_failed,
        publish_generation_started,
    )
    from core.models.generation import GenerateImageRequest
    from core.services.generation_service import GenerationService

    task_id = self.request.id
    logger.info(f"Generating poster for user {user_id} (conversation={conversation_id})")

    def on_task_created(kie_task_id: str) -> None:
        update_progress(2, 3, "Génération de l'affiche en cours...")
        if conversation_id:
            publish_generation_started(conversation_id, task_id, kie_task_id)

    try:
        update_progress(1, 3, "Vérification des crédits...")
        generation_request = GenerateImageRequest.model_validate(request)

        response = GenerationService.generate_for_user(
            user_id,
            generation_request,
            color_palette=color_palette,
            on_task_created=on_task_created,
        )

        update_progress(3, 3, "Affiche prête !")
        _finish_conversation(conversation_id, image_url=response.image_url, image_id=response.image_id)
        if conversation_id:
            publish_generation_complete(conversation_id, task_id, response.image_url, response.image_id)

        return {
            "success": True,
            "image_url": response.image_url,
            "image_id": response.image_id,
            "provider": response.provider,
            "kie_task_id": response.task_id,
        }

    except GraphisteException as e:
        logger.warning(f"Poster generation failed [{e.code}]: {e.message}")
        _finish_conversation(conversation_id, error=e.message)
        if conversation_id:
            publish_generation_failed(conversation_id, task_id, e.message, e.code)
        return {
            "success": False,
            "error": e.message,
            "code": e.code,
        }

    except Exception as e:
        logger.exception(f"Task failed: {e}")
        _finish_conversation(conversation_id, error="Erreur inattendue")
        if conversation_id:
            publish_generation_failed(conversation_id, task_id, str(e), "INTERNAL_ERROR")
        return {
            "success": False,
            "error": str(e),
            "code": "INTERNAL_ERROR",
        }
