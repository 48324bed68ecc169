# =============================================================================
# core/services/generation_service.py - Paid Poster Generation
# =============================================================================
# One generation, end to end, for an authenticated user:
#
#   1. Credit check (raises the CreditError the client maps to its modal)
#   2. Host data-URL images in Supabase storage (Kie needs public URLs)
#   3. PosterGenerator.generate() (Kie task + polling)
#   4. Save to the user's history
#   5. Debit credits (or count a free generation)
#
# Credits are only debited once the image exists. Used by the synchronous
# route and by the Celery task.
# =============================================================================

import logging
from typing import Callable
from uuid import UUID

from app.exceptions import ImageGenerationError
from agents.poster_generator import PosterGenerator
from core.models.generation import (
    GenerateImageRequest,
    GenerateImageResponse,
    SaveImageRequest,
)
from core.services.credit_service import CreditService
from core.services.history_service import HistoryService
from core.services.storage_service import StorageService
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class GenerationService:

    @staticmethod
    def generate_for_user(
        user_id: str | UUID,
        request: GenerateImageRequest,
        generator: PosterGenerator | None = None,
        color_palette: list[str] | None = None,
        on_task_created: Callable[[str], None] | None = None,
    ) -> GenerateImageResponse:
        """
        Generate, save and charge one poster.

        Args:
            user_id: Authenticated user
            request: Generation parameters
            generator: PosterGenerator (default: built from settings)
            color_palette: Palette to store with the history entry
            on_task_created: Called with the Kie task id before polling

        Returns:
            GenerateImageResponse with the image URL and history id

        Raises:
            CreditError: The user can't afford this generation
            InvalidImageError: An image is neither a URL nor an image data URL
            StorageUploadError: A data-URL image could not be hosted
            ServiceNotConfiguredError: KIE_AI_API_KEY is not set
            ImageGenerationError: Kie failed or timed out
        """
        user_id_str = normalize_uuid(user_id)
        check = CreditService.ensure_can_generate(user_id_str, request.resolution)

        folder = f"uploads/{user_id_str}"
        request = request.model_copy(update={
            "reference_image": StorageService.host_image(request.reference_image, folder),
            "content_image": StorageService.host_image(request.content_image, folder),
        })

        generator = generator or PosterGenerator()
        result = generator.generate(request, on_task_created=on_task_created)

        if not result.success or not result.image_url:
            raise ImageGenerationError(
                result.error or "Erreur inconnue",
                task_id=result.task_id,
            )

        image = HistoryService.save_image(
            user_id_str,
            SaveImageRequest(
                image_url=result.image_url,
                prompt=request.prompt,
                aspect_ratio=request.aspect_ratio,
                resolution=request.resolution,
                domain=request.domain,
                reference_image_url=request.reference_image,
                content_image_url=request.content_image,
                color_palette=color_palette,
            ),
            is_free_plan=check.is_free,
        )

        CreditService.debit(user_id_str, request.resolution, image_id=image.id)

        logger.info(f"Generated poster {image.id} for user {user_id_str} (task {result.task_id})")
        return GenerateImageResponse(
            image_url=result.image_url,
            provider=result.provider,
            task_id=result.task_id,
            image_id=image.id,
        )
