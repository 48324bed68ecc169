# =============================================================================
# agents/text_extractor.py - Poster Text Extractor
# =============================================================================
# Finds every text block on a poster with a vision model, so the visual
# editor can overlay editable text. Positions and sizes are percentages of
# the image (0-100), font sizes are pixels.
#
# Model output is untrusted: values are coerced and clamped, empty texts
# are dropped and unparsable output yields an empty list.
#
# Usage:
#   from agents.text_extractor import TextExtractorAgent
#   blocks = TextExtractorAgent().extract(image_url)
# =============================================================================

import json
import logging

from app.config import settings
from agents.prompts.analysis_prompts import TEXT_EXTRACTION_SYSTEM_PROMPT, TEXT_EXTRACTION_USER_TEXT
from core.models.analysis import TextBlock
from lib.ai_gateway import chat_completion, vision_message
from lib.utils import ApplicationError, clamp, strip_code_fences

logger = logging.getLogger(__name__)

EXTRACTION_CONFIDENCE = 95


class TextExtractionError(ApplicationError):
    def __init__(self, message: str, code: str = "TEXT_EXTRACTION_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


def parse_text_blocks(content: str) -> list[TextBlock]:
    """
    Turn the model's JSON array into clamped TextBlocks.

    Bounds: x, y in [0, 100]; width in [5, 100] (default 20);
    height in [2, 50] (default 5); font size in [12, 150] (default 32).

    Example:
        parse_text_blocks('[{"text": "GALA", "x": 120, "y": 5}]')
        # [TextBlock(text="GALA", x=100, y=5, width=20, height=5, ...)]
    """
    try:
        parsed = json.loads(strip_code_fences(content or "[]"))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response ({e}): {content[:500]}")
        return []

    if not isinstance(parsed, list):
        return []

    blocks = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        text = str(item.get("text") or "").strip()
        if not text:
            continue
        blocks.append(TextBlock(
            text=text,
            x=clamp(item.get("x"), 0, 100, 0),
            y=clamp(item.get("y"), 0, 100, 0),
            width=clamp(item.get("width"), 5, 100, 20),
            height=clamp(item.get("height"), 2, 50, 5),
            confidence=EXTRACTION_CONFIDENCE,
            font_size=clamp(item.get("fontSize"), 12, 150, 32),
        ))
    return blocks


class TextExtractorAgent:
    """Vision agent returning positioned text blocks."""

    def __init__(self, model: str | None = None):
        self.model = model or settings.AI_MODEL

    def extract(self, image_data: str) -> list[TextBlock]:
        """
        Extract the texts of a poster.

        Raises:
            TextExtractionError: If no image is given
            AIGatewayError: If the gateway call fails
        """
        if not image_data or not isinstance(image_data, str):
            raise TextExtractionError("Image data is required", code="INVALID_INPUT", status_code=400)

        logger.info("Extracting text from image")
        content = chat_completion(
            [
                {"role": "system", "content": TEXT_EXTRACTION_SYSTEM_PROMPT},
                vision_message(TEXT_EXTRACTION_USER_TEXT, image_data),
            ],
            model=self.model,
        )

        blocks = parse_text_blocks(content)
        logger.info(f"Text extraction complete, found {len(blocks)} blocks")
        return blocks
