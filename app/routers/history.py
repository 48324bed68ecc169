# =============================================================================
# app/routers/history.py - Generated Poster History
# =============================================================================
# Every endpoint is scoped to the caller: users only see, save and delete
# their own posters.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_user
from core.models.generation import GeneratedImage, SaveImageRequest
from core.services.history_service import HistoryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[GeneratedImage])
async def list_images(
    user: AuthUser = Depends(get_current_user),
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """The caller's posters, newest first."""
    return HistoryService.list_images(user.id, limit=limit)


@router.post("", response_model=GeneratedImage)
async def save_image(
    request: SaveImageRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Save a poster to the history.

    Generations made through the API are saved automatically; this is for
    posters edited in the browser (text editor, logo overlay).
    """
    return HistoryService.save_image(user.id, request)


@router.delete("/{image_id}")
async def delete_image(
    image_id: Annotated[str, Path(description="Image UUID")],
    user: AuthUser = Depends(get_current_user),
):
    HistoryService.delete_image(user.id, image_id)
    return {"success": True, "image_id": image_id}


@router.delete("")
async def clear_history(user: AuthUser = Depends(get_current_user)):
    """Delete all of the caller's posters."""
    deleted = HistoryService.clear(user.id)
    logger.info(f"User {user.id} cleared history ({deleted} images)")
    return {"success": True, "deleted": deleted}
