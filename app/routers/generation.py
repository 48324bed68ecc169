# =============================================================================
# app/routers/generation.py - Direct Poster Generation
# =============================================================================
# POST /api/v1/generate-image generates a poster synchronously (Kie polling
# can take a few minutes). The conversation wizard uses the queued variant,
# POST /api/v1/conversations/{id}/generate.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.generation import GenerateImageRequest, GenerateImageResponse
from core.services.generation_service import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate-image", response_model=GenerateImageResponse)
def generate_image(
    request: GenerateImageRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Generate a poster and charge it to the caller.

    Flow:
    1. Credit check: 402 INSUFFICIENT_CREDITS / FREE_LIMIT_REACHED or
       403 RESOLUTION_NOT_ALLOWED, with remaining/needed/is_free
    2. Kie task creation and polling
    3. History entry, then debit (1K = 1, 2K = 2, 4K = 4 credits)

    Returns:
        {success, imageUrl, provider, taskId, imageId}
    """
    logger.info(f"Direct generation for user {user.id} ({request.resolution.value}, {request.aspect_ratio.value})")
    return GenerationService.generate_for_user(user.id, request)
