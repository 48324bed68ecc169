# =============================================================================
# core/services/history_service.py - Generation History
# =============================================================================
# The user's generated posters (generated_images table). Every operation is
# scoped to the caller's user_id: the service-role client bypasses RLS.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ImageNotFoundError
from core.models.generation import GeneratedImage, SaveImageRequest
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

TABLE = "generated_images"


class HistoryService:
    """Service for the generation history."""

    @staticmethod
    def list_images(user_id: str | UUID, limit: int = 100) -> list[GeneratedImage]:
        """The user's images, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching history: {e}")
            raise

        return [GeneratedImage.model_validate(row) for row in response.data or []]

    @staticmethod
    def save_image(
        user_id: str | UUID,
        params: SaveImageRequest,
        is_free_plan: bool | None = None,
    ) -> GeneratedImage:
        """Store a generated poster with the parameters that produced it."""
        data: dict[str, Any] = {
            "user_id": normalize_uuid(user_id),
            "image_url": params.image_url,
            "prompt": params.prompt,
            "aspect_ratio": params.aspect_ratio.value,
            "resolution": params.resolution.value,
            "domain": params.domain.value if params.domain else None,
            "reference_image_url": params.reference_image_url,
            "content_image_url": params.content_image_url,
            "logo_urls": params.logo_urls,
            "logo_positions": params.logo_positions,
            "color_palette": params.color_palette,
        }
        if is_free_plan is not None:
            data["is_free_plan"] = is_free_plan

        row = SupabaseClient.insert_row(TABLE, data)
        logger.info(f"Saved image {row['id']} to history of user {data['user_id']}")
        return GeneratedImage.model_validate(row)

    @staticmethod
    def delete_image(user_id: str | UUID, image_id: str) -> None:
        """
        Delete one of the user's images.

        Raises:
            ImageNotFoundError: If the image doesn't exist or isn't the user's
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .delete()
                .eq("id", image_id)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Error deleting image: {e}")
            raise

        if not response.data:
            raise ImageNotFoundError(image_id)
        logger.info(f"Deleted image {image_id}")

    @staticmethod
    def clear(user_id: str | UUID) -> int:
        """Delete all of the user's images. Returns how many were removed."""
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = client.table(TABLE).delete().eq("user_id", user_id_str).execute()
        except Exception as e:
            logger.error(f"Error clearing history: {e}")
            raise

        count = len(response.data or [])
        logger.info(f"Cleared {count} images from history of user {user_id_str}")
        return count
