# =============================================================================
# agents/image_analyst.py - Reference Image Analyst
# =============================================================================
# Describes the style of an existing poster (composition, colors,
# typography, effects, emotion) in 200-400 words. The description is reused
# as a style template: in the wizard it is prepended to the generation
# prompt, in the back-office it becomes a template description.
#
# Usage:
#   from agents.image_analyst import ImageAnalystAgent
#   description = ImageAnalystAgent().describe("https://.../poster.png")
# =============================================================================

import logging

from app.config import settings
from agents.prompts.analysis_prompts import IMAGE_ANALYSIS_SYSTEM_PROMPT, IMAGE_ANALYSIS_USER_TEXT
from lib.ai_gateway import chat_completion, vision_message
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class ImageAnalysisError(ApplicationError):
    def __init__(self, message: str, code: str = "IMAGE_ANALYSIS_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class ImageAnalystAgent:
    """Vision agent producing reusable style descriptions."""

    def __init__(self, model: str | None = None):
        self.model = model or settings.AI_MODEL

    def describe(self, image_data: str) -> str:
        """
        Describe the visual style of a poster.

        Args:
            image_data: https URL or data URL of the image

        Returns:
            French style description

        Raises:
            ImageAnalysisError: Missing image (400) or empty answer (500)
            AIGatewayError: If the gateway call fails
        """
        if not image_data:
            raise ImageAnalysisError("Image data is required", code="INVALID_INPUT", status_code=400)

        logger.info("Analyzing reference image")
        description = chat_completion(
            [
                {"role": "system", "content": IMAGE_ANALYSIS_SYSTEM_PROMPT},
                vision_message(IMAGE_ANALYSIS_USER_TEXT, image_data),
            ],
            model=self.model,
        ).strip()

        if not description:
            raise ImageAnalysisError("No description generated", code="NO_DESCRIPTION", status_code=500)

        logger.info(f"Image analyzed ({len(description.split())} words)")
        return description
