# =============================================================================
# core/services/feedback_service.py - Generation Feedback
# =============================================================================
# Users (signed in or not) rate generations; admins read every rating with
# the author's name, the rated poster and summary stats.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from core.models.feedback import Feedback, FeedbackCreate, FeedbackItem, FeedbackOverview, FeedbackStats
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

TABLE = "generation_feedback"

POSITIVE_RATING = 4
NEGATIVE_RATING = 2


def compute_stats(ratings: list[int]) -> FeedbackStats:
    """Average rounded to one decimal; 4-5 stars positive, 1-2 negative."""
    if not ratings:
        return FeedbackStats()
    return FeedbackStats(
        total=len(ratings),
        average_rating=round(sum(ratings) / len(ratings), 1),
        positive_count=sum(1 for rating in ratings if rating >= POSITIVE_RATING),
        negative_count=sum(1 for rating in ratings if rating <= NEGATIVE_RATING),
    )


class FeedbackService:
    """Service for generation feedback."""

    @staticmethod
    def submit(user_id: str | UUID | None, data: FeedbackCreate) -> Feedback:
        """Store a rating; user_id is None for anonymous feedback."""
        row = SupabaseClient.insert_row(TABLE, {
            "user_id": normalize_uuid(user_id) if user_id else None,
            "image_id": data.image_id,
            "rating": data.rating,
            "comment": data.comment,
        })
        logger.info(f"Feedback {row['id']} recorded: {data.rating}/5 (image {data.image_id})")
        return Feedback.model_validate(row)

    @staticmethod
    def list_feedback(limit: int = 500) -> FeedbackOverview:
        """Newest feedback first, with stats over the returned rows."""
        client = SupabaseClient.get_client()

        try:
            response = client.table(TABLE).select("*").order("created_at", desc=True).limit(limit).execute()
        except Exception as e:
            logger.error(f"Failed to fetch feedback: {e}")
            raise

        rows: list[dict[str, Any]] = response.data or []
        names = FeedbackService._lookup(
            "profiles", "user_id", "full_name", {row["user_id"] for row in rows if row.get("user_id")},
        )
        images = FeedbackService._lookup(
            "generated_images", "id", "image_url", {row["image_id"] for row in rows if row.get("image_id")},
        )

        feedbacks = [
            FeedbackItem(
                **row,
                user_name=names.get(row.get("user_id")),
                image_url=images.get(row.get("image_id")),
            )
            for row in rows
        ]
        return FeedbackOverview(
            feedbacks=feedbacks,
            stats=compute_stats([item.rating for item in feedbacks]),
        )

    @staticmethod
    def _lookup(table: str, key: str, column: str, ids: set[str]) -> dict[str, Any]:
        """{key: column} for the rows of `table` whose key is in ids."""
        if not ids:
            return {}

        client = SupabaseClient.get_client()
        try:
            response = client.table(table).select(f"{key}, {column}").in_(key, sorted(ids)).execute()
        except Exception as e:
            logger.error(f"Failed to fetch {table} for feedback: {e}")
            raise

        return {row[key]: row.get(column) for row in response.data or []}
