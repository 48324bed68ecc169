# =============================================================================
# lib/transcription.py - Speech-to-Text (Bytez Whisper)
# =============================================================================
# Voice input of the poster wizard. The browser records audio, sends it as
# base64, and we forward it to Bytez' hosted Whisper model.
#
# Bytez expects the raw API key in the Authorization header (no "Bearer").
# The transcript is returned in "output" or "text" depending on the model.
#
# Usage:
#   from lib.transcription import transcribe_audio
#   text = transcribe_audio(audio_base64)
# =============================================================================

import logging

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Limite de requêtes atteinte, veuillez patienter quelques secondes."
GENERIC_ERROR_MESSAGE = "Erreur de transcription. Veuillez réessayer."


class TranscriptionClientError(ApplicationError):
    """Error raised while transcribing audio."""

    def __init__(self, message: str, code: str = "TRANSCRIPTION_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


def transcribe_audio(
    audio_base64: str,
    api_key: str | None = None,
    url: str | None = None,
    timeout: float = 60.0,
) -> str:
    """
    Transcribe base64-encoded audio.

    Args:
        audio_base64: Audio payload as base64 (no data URL prefix needed)
        api_key: Bytez key (default: settings.BYTEZ_API_KEY)
        url: Model endpoint (default: settings.BYTEZ_WHISPER_URL)

    Returns:
        The transcript ("" when the model hears nothing)

    Raises:
        TranscriptionClientError: NOT_CONFIGURED, RATE_LIMITED or
            TRANSCRIPTION_ERROR
    """
    api_key = api_key or settings.BYTEZ_API_KEY
    if not api_key:
        raise TranscriptionClientError(
            "Service de transcription non configuré",
            code="NOT_CONFIGURED",
            status_code=500,
            suggestion="Set BYTEZ_API_KEY in the environment",
        )

    logger.info(f"Sending audio to Bytez Whisper ({len(audio_base64)} base64 chars)")

    try:
        response = httpx.post(
            url or settings.BYTEZ_WHISPER_URL,
            headers={
                "Authorization": api_key,
                "Content-Type": "application/json",
            },
            json={"base64": audio_base64},
            timeout=timeout,
        )
    except httpx.HTTPError as e:
        logger.error(f"Bytez unreachable: {e}")
        raise TranscriptionClientError(GENERIC_ERROR_MESSAGE, status_code=500)

    if response.status_code == 429:
        logger.warning("Bytez rate limited")
        raise TranscriptionClientError(RATE_LIMIT_MESSAGE, code="RATE_LIMITED", status_code=429)

    if response.status_code >= 400:
        logger.error(f"Bytez API error: {response.status_code} {response.text[:500]}")
        raise TranscriptionClientError(GENERIC_ERROR_MESSAGE, status_code=500)

    data = response.json()
    output = data.get("output") or data.get("text") or ""
    if isinstance(output, dict):
        output = output.get("text") or ""
    logger.debug(f"Transcription result: {str(output)[:200]}")
    return str(output)
