# =============================================================================
# lib/ai_gateway.py - AI Chat/Vision Gateway Client
# =============================================================================
# The AI gateway speaks the OpenAI chat completions protocol, so we use the
# official OpenAI SDK pointed at AI_GATEWAY_URL. The SDK handles timeouts and
# retries with exponential backoff (AI_REQUEST_TIMEOUT / AI_MAX_RETRIES).
#
# Errors are normalized into AIGatewayError with a stable code:
# - RATE_LIMITED (429): surfaced to the client
# - PAYMENT_REQUIRED (402): surfaced to the client
# - AI_GATEWAY_UNAVAILABLE: anything else (callers may degrade gracefully)
#
# Usage:
#   from lib.ai_gateway import chat_completion, vision_message
#   text = chat_completion([
#       {"role": "system", "content": "..."},
#       vision_message("Décris cette image", image_url),
#   ])
# =============================================================================

import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, RateLimitError

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limits exceeded, please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required, please add credits to continue."

# Lazy-loaded OpenAI client
_client: OpenAI | None = None


class AIGatewayError(ApplicationError):
    """Error raised by the AI gateway or while reaching it."""

    def __init__(self, message: str, code: str = "AI_GATEWAY_UNAVAILABLE", **kwargs):
        super().__init__(message, code=code, **kwargs)

    @property
    def is_surfaced(self) -> bool:
        """Rate limit and billing errors must be shown, never degraded."""
        return self.code in ("RATE_LIMITED", "PAYMENT_REQUIRED")


def get_ai_client() -> OpenAI:
    """Get or create the gateway client (lazy initialization)."""
    global _client
    if _client is None:
        _client = OpenAI(
            api_key=settings.AI_GATEWAY_API_KEY,
            base_url=settings.AI_GATEWAY_URL,
            timeout=settings.AI_REQUEST_TIMEOUT,
            max_retries=settings.AI_MAX_RETRIES,
        )
        logger.info(f"AI gateway client initialized for {settings.AI_GATEWAY_URL}")
    return _client


def vision_message(text: str, image_url: str) -> dict[str, Any]:
    """
    Build a user message carrying an instruction and one image.

    `image_url` may be an https URL or a data URL (data:image/png;base64,...).
    """
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": text},
            {"type": "image_url", "image_url": {"url": image_url}},
        ],
    }


def chat_completion(
    messages: list[dict[str, Any]],
    model: str | None = None,
) -> str:
    """
    Send a chat completion request and return the assistant text.

    Args:
        messages: OpenAI-format messages
        model: Model id (default: settings.AI_MODEL)

    Returns:
        The content of the first choice ("" when the gateway returns none)

    Raises:
        AIGatewayError: With code RATE_LIMITED, PAYMENT_REQUIRED or
            AI_GATEWAY_UNAVAILABLE
    """
    model = model or settings.AI_MODEL

    try:
        response = get_ai_client().chat.completions.create(
            model=model,
            messages=messages,
        )
    except RateLimitError as e:
        logger.warning(f"AI gateway rate limited: {e}")
        raise AIGatewayError(
            RATE_LIMIT_MESSAGE,
            code="RATE_LIMITED",
            status_code=429,
            suggestion="Wait a few seconds before retrying",
        )
    except APIStatusError as e:
        if e.status_code == 402:
            logger.warning("AI gateway requires payment")
            raise AIGatewayError(
                PAYMENT_REQUIRED_MESSAGE,
                code="PAYMENT_REQUIRED",
                status_code=402,
                suggestion="Add credits to the AI gateway workspace",
            )
        logger.error(f"AI gateway error {e.status_code}: {e}")
        raise AIGatewayError(
            f"AI gateway error: {e.status_code}",
            status_code=e.status_code,
            details={"model": model},
        )
    except (APIConnectionError, APITimeoutError) as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise AIGatewayError(
            f"AI gateway unreachable: {e}",
            suggestion="Check AI_GATEWAY_URL and network connectivity",
            details={"model": model},
        )

    if not response.choices:
        return ""
    content = response.choices[0].message.content or ""
    logger.debug(f"AI gateway response: {content[:200]}...")
    return content
