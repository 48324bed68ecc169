# =============================================================================
# core/models/feedback.py - Generation Feedback Schemas
# =============================================================================
# Ratings (1 to 5 stars) users leave on a generated poster, stored in the
# generation_feedback table and reviewed by admins.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel


class FeedbackCreate(CamelModel):
    """
    A rating on a generation. imageId and comment are optional.

    Example:
        {"imageId": "...", "rating": 4, "comment": "Très beau rendu"}
    """
    image_id: str | None = None
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class Feedback(BaseModel):
    """A row of generation_feedback."""
    id: str
    user_id: str | None = None
    image_id: str | None = None
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class FeedbackItem(Feedback):
    """Feedback as listed for admins, with the author's name and the poster."""
    user_name: str | None = None
    image_url: str | None = None


class FeedbackStats(BaseModel):
    total: int = 0
    average_rating: float = 0.0
    positive_count: int = 0
    negative_count: int = 0


class FeedbackOverview(BaseModel):
    feedbacks: list[FeedbackItem]
    stats: FeedbackStats
