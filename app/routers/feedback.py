# =============================================================================
# app/routers/feedback.py - Generation Feedback
# =============================================================================
# Anyone can rate a generation (the rating is tied to the caller when a
# token is sent). Reading feedback is admin only.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user_optional, require_admin
from core.models.feedback import Feedback, FeedbackCreate, FeedbackOverview
from core.services.feedback_service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Feedback)
async def submit_feedback(
    request: FeedbackCreate,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """Rate a generation from 1 to 5 stars, with an optional comment."""
    return FeedbackService.submit(user.id if user else None, request)


@router.get("", response_model=FeedbackOverview)
async def list_feedback(
    admin: AuthUser = Depends(require_admin),
    limit: Annotated[int, Query(ge=1, le=1000)] = 500,
):
    """All feedback, newest first, with average rating and positive/negative counts."""
    return FeedbackService.list_feedback(limit=limit)
