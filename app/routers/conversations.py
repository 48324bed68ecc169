# =============================================================================
# app/routers/conversations.py - Poster Wizard Endpoints
# =============================================================================
# One endpoint per wizard action. Every endpoint loads the caller's
# conversation from Redis, applies the action and saves it back; the full
# conversation (state + transcript) is returned so the client can re-render.
#
#   POST   /conversations                          start
#   GET    /conversations/{id}                     current state
#   POST   /conversations/{id}/messages            free text (description,
#                                                  details, skip word,
#                                                  modification request)
#   POST   /conversations/{id}/domain              pick the domain
#   POST   /conversations/{id}/reference           style reference image
#   POST   /conversations/{id}/skip-reference
#   POST   /conversations/{id}/colors              palette
#   POST   /conversations/{id}/content-image       image to integrate
#   POST   /conversations/{id}/skip-content-image
#   PUT    /conversations/{id}/format              aspect ratio / resolution
#   POST   /conversations/{id}/generate            enqueue the poster
#   POST   /conversations/{id}/reset
#   DELETE /conversations/{id}
#
# Actions sent at the wrong step return 409 INVALID_STEP.
# =============================================================================

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from app.dependencies import ConversationServiceDep, ConversationStoreDep
from app.exceptions import UpstreamServiceError
from core.models.conversation import (
    ColorsConfirmRequest,
    Conversation,
    DomainSelectRequest,
    FormatRequest,
    GenerationQueuedResponse,
    ImageSubmitRequest,
    UserMessageRequest,
)
from core.services.conversation_service import ConversationService, build_generation_request
from core.services.credit_service import CreditService

logger = logging.getLogger(__name__)

router = APIRouter()

ConversationId = Annotated[str, Path(description="Conversation UUID")]


# =============================================================================
# Lifecycle
# =============================================================================

@router.post("", response_model=Conversation)
async def start_conversation(
    store: ConversationStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Start a new poster conversation.

    The conversation begins at `greeting` with the welcome message and
    expires after CONVERSATION_TTL_SECONDS without activity.
    """
    conversation = ConversationService.start(str(user.id))
    return store.save(conversation)


@router.get("/{conversation_id}", response_model=Conversation)
async def get_conversation(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get the conversation state and transcript."""
    return store.load(conversation_id, user.id)


@router.post("/{conversation_id}/reset", response_model=Conversation)
async def reset_conversation(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Start over: back to `greeting` with only the welcome message."""
    conversation = store.load(conversation_id, user.id)
    ConversationService.reset(conversation)
    return store.save(conversation)


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Delete the conversation (generated posters stay in the history)."""
    store.load(conversation_id, user.id)
    store.delete(conversation_id)
    return {"success": True, "conversation_id": conversation_id}


# =============================================================================
# Wizard Steps
# =============================================================================

# Plain `def`: the first message and the reference image call the AI
# gateway, FastAPI runs these in its threadpool.

@router.post("/{conversation_id}/messages", response_model=Conversation)
def send_message(
    conversation_id: ConversationId,
    request: UserMessageRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Send a typed message.

    - At `greeting`: the project description (analyzed to suggest a domain)
    - At `details`: extra texts and mood
    - At `reference` / `content_image`: "non", "passer", "skip" or "no" skips
    - At `complete`: a modification request for a new generation
    """
    conversation = store.load(conversation_id, user.id)
    service.handle_user_message(conversation, request.content)
    return store.save(conversation)


@router.post("/{conversation_id}/domain", response_model=Conversation)
async def select_domain(
    conversation_id: ConversationId,
    request: DomainSelectRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    conversation = store.load(conversation_id, user.id)
    service.select_domain(conversation, request.domain)
    return store.save(conversation)


@router.post("/{conversation_id}/reference", response_model=Conversation)
def submit_reference_image(
    conversation_id: ConversationId,
    request: ImageSubmitRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Submit a style reference image (URL or data URL).

    The image is described by the vision model; the description is used as
    the style block of the generation prompt.
    """
    conversation = store.load(conversation_id, user.id)
    service.submit_reference_image(conversation, request.image)
    return store.save(conversation)


@router.post("/{conversation_id}/skip-reference", response_model=Conversation)
async def skip_reference(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    conversation = store.load(conversation_id, user.id)
    service.skip_reference(conversation)
    return store.save(conversation)


@router.post("/{conversation_id}/colors", response_model=Conversation)
async def confirm_colors(
    conversation_id: ConversationId,
    request: ColorsConfirmRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    conversation = store.load(conversation_id, user.id)
    service.confirm_colors(conversation, request.colors)
    return store.save(conversation)


@router.post("/{conversation_id}/content-image", response_model=Conversation)
async def submit_content_image(
    conversation_id: ConversationId,
    request: ImageSubmitRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    conversation = store.load(conversation_id, user.id)
    service.submit_content_image(conversation, request.image)
    return store.save(conversation)


@router.post("/{conversation_id}/skip-content-image", response_model=Conversation)
async def skip_content_image(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """Skip the content image: the generator invents one (African characters if people are needed)."""
    conversation = store.load(conversation_id, user.id)
    service.skip_content_image(conversation)
    return store.save(conversation)


@router.put("/{conversation_id}/format", response_model=Conversation)
async def set_format(
    conversation_id: ConversationId,
    request: FormatRequest,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """Change aspect ratio, resolution or file format before generation."""
    conversation = store.load(conversation_id, user.id)
    service.set_format(
        conversation,
        aspect_ratio=request.aspect_ratio,
        resolution=request.resolution,
        output_format=request.output_format,
    )
    return store.save(conversation)


# =============================================================================
# Generation
# =============================================================================

@router.post("/{conversation_id}/generate", response_model=GenerationQueuedResponse)
async def generate_poster(
    conversation_id: ConversationId,
    store: ConversationStoreDep,
    service: ConversationServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Queue the poster generation for this conversation.

    Credits are checked now (402/403 with the upgrade payload) and debited
    by the worker once the poster exists. Follow progress with
    GET /api/v1/tasks/{task_id} or the WebSocket.

    Calling it again while a generation is queued returns the same task.

    The task id is saved on the conversation before the task is sent, so a
    worker that finishes first always sees (and clears) it.
    """
    conversation = store.load(conversation_id, user.id)
    service.require_generating(conversation)

    if conversation.generation_task_id:
        return GenerationQueuedResponse(
            conversation_id=conversation.id,
            task_id=conversation.generation_task_id,
        )

    request = build_generation_request(conversation)
    CreditService.ensure_can_generate(user.id, request.resolution)

    task_id = str(uuid4())
    ConversationService.mark_generation_queued(conversation, task_id)
    store.save(conversation)

    try:
        from workers.tasks import generate_poster as generate_poster_task

        generate_poster_task.apply_async(
            args=[str(user.id), request.model_dump(mode="json")],
            kwargs={
                "conversation_id": conversation.id,
                "color_palette": conversation.state.color_palette,
            },
            task_id=task_id,
        )
    except Exception as e:
        logger.error(f"Failed to enqueue generation for conversation {conversation.id}: {e}")
        conversation.generation_task_id = None
        store.save(conversation)
        raise UpstreamServiceError(
            "Impossible de lancer la génération",
            code="QUEUE_UNAVAILABLE",
            status_code=503,
            suggestion="Réessayez dans quelques instants",
        )

    logger.info(f"Queued generation {task_id} for conversation {conversation.id}")
    return GenerationQueuedResponse(conversation_id=conversation.id, task_id=task_id)
