# =============================================================================
# agents/poster_generator.py - Poster Generator
# =============================================================================
# Turns a GenerateImageRequest into a poster image:
#
#   1. Build the professional prompt (format rules, reference/content image
#      blocks, expert profile when there is no style reference)
#   2. Collect image inputs: style reference first, then content image
#   3. Create a Kie AI task and poll it until success, failure or timeout
#
# Generation failures are returned as GenerationResult(success=False) so
# callers (the API route and the Celery task) decide how to report them.
# A missing Kie key is a configuration error and is raised.
#
# Usage:
#   from agents.poster_generator import PosterGenerator
#   result = PosterGenerator().generate(request)
#   if result.success:
#       print(result.image_url)
# =============================================================================

import logging
from typing import Callable

from app.config import settings
from app.exceptions import ServiceNotConfiguredError
from agents.prompts.poster_prompt import build_professional_prompt
from core.models.generation import GenerateImageRequest, GenerationResult
from lib.kie_client import KieClient, KieClientError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "nano-banana-pro"


class PosterGenerator:
    """
    Generates posters with Kie AI.

    Attributes:
        client: KieClient (built from settings when not given)
    """

    def __init__(self, client: KieClient | None = None):
        if client is None:
            if not settings.KIE_AI_API_KEY:
                raise ServiceNotConfiguredError("Kie AI", "KIE_AI_API_KEY")
            client = KieClient(settings.KIE_AI_API_KEY)
        self.client = client

    def collect_image_inputs(self, request: GenerateImageRequest) -> list[str]:
        """
        Reference image first, then content image.

        Kie downloads these itself, so they must already be public URLs
        (GenerationService hosts data URLs before calling generate()).
        """
        return [url for url in (request.reference_image, request.content_image) if url]

    def build_prompt(self, request: GenerateImageRequest) -> str:
        return build_professional_prompt(
            user_prompt=request.prompt,
            has_reference_image=bool(request.reference_image),
            has_content_image=bool(request.content_image),
            aspect_ratio=request.aspect_ratio.value,
            domain=request.domain.value if request.domain else None,
        )

    def generate(
        self,
        request: GenerateImageRequest,
        on_task_created: Callable[[str], None] | None = None,
    ) -> GenerationResult:
        """
        Generate one poster.

        Args:
            request: Validated generation request
            on_task_created: Called with the Kie task id before polling
                (used by the worker to report progress)

        Returns:
            GenerationResult; success=False with the provider's message on failure
        """
        prompt = self.build_prompt(request)
        image_inputs = self.collect_image_inputs(request)

        logger.info(
            f"Generating poster: aspect_ratio={request.aspect_ratio.value}, "
            f"resolution={request.resolution.value}, images={len(image_inputs)}"
        )

        task_id = None
        try:
            task_id = self.client.create_task(
                prompt=prompt,
                image_inputs=image_inputs,
                aspect_ratio=request.aspect_ratio.value,
                resolution=request.resolution.value,
                output_format=request.output_format.value,
            )
            if on_task_created:
                on_task_created(task_id)
            image_url = self.client.poll_for_result(task_id)
        except KieClientError as e:
            logger.error(f"Poster generation failed (task={task_id}): {e.message}")
            return GenerationResult(
                success=False,
                task_id=task_id,
                provider=PROVIDER_NAME,
                prompt=prompt,
                error=e.message,
            )

        logger.info(f"Poster generated: task={task_id}")
        return GenerationResult(
            success=True,
            image_url=image_url,
            task_id=task_id,
            provider=PROVIDER_NAME,
            prompt=prompt,
        )
