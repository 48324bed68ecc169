# =============================================================================
# agents/request_analyst.py - Poster Request Analyst
# =============================================================================
# Reads the user's free-text poster request and returns a structured
# analysis: suggested domain, extracted facts (title, dates, prices,
# contact...), missing information and a short summary.
#
# The analyst never blocks the user:
# - Malformed JSON from the model -> default analysis with keyword domain
# - Gateway down / timeout        -> regex heuristic analysis + warning
# - Rate limit (429) / billing (402) are the only gateway errors surfaced
#
# Usage:
#   from agents.request_analyst import RequestAnalystAgent
#   response = RequestAnalystAgent().analyze("Concert gospel samedi 18h")
#   response.analysis.suggested_domain  # "church"
# =============================================================================

import json
import logging
from typing import Any

from pydantic import ValidationError

from app.config import settings
from agents.prompts.analysis_prompts import REQUEST_ANALYSIS_SYSTEM_PROMPT
from core.models.analysis import AnalysisResult, AnalyzeResponse
from lib.ai_gateway import AIGatewayError, chat_completion
from lib.domain_detection import build_heuristic_analysis, detect_domain_heuristic
from lib.utils import ApplicationError, strip_code_fences

logger = logging.getLogger(__name__)

DEGRADED_WARNING = "Analyse simplifiée (IA indisponible)."


class RequestAnalysisError(ApplicationError):
    """Invalid input or empty answer from the model."""

    def __init__(self, message: str, code: str = "ANALYSIS_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class RequestAnalystAgent:
    """
    Turns a poster request into an AnalysisResult.

    Attributes:
        model: Gateway model id (default: settings.AI_MODEL)
        max_length: Longest accepted request (default: settings.MAX_REQUEST_TEXT_LENGTH)
    """

    def __init__(self, model: str | None = None, max_length: int | None = None):
        self.model = model or settings.AI_MODEL
        self.max_length = max_length or settings.MAX_REQUEST_TEXT_LENGTH

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def analyze(self, user_text: Any) -> AnalyzeResponse:
        """
        Analyze a poster request.

        Args:
            user_text: The request as typed (or dictated) by the user

        Returns:
            AnalyzeResponse with the analysis, and a warning when the
            heuristic fallback was used

        Raises:
            RequestAnalysisError: INVALID_INPUT (400) or NO_ANALYSIS (500)
            AIGatewayError: RATE_LIMITED (429) or PAYMENT_REQUIRED (402)
        """
        text = self.validate(user_text)
        logger.info(f"Analyzing user request: {text[:200]}")

        messages = [
            {"role": "system", "content": REQUEST_ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ]

        try:
            content = chat_completion(messages, model=self.model)
        except AIGatewayError as e:
            if e.is_surfaced:
                raise
            logger.warning(f"AI gateway unavailable, using heuristic analysis: {e.message}")
            return AnalyzeResponse(
                analysis=AnalysisResult.model_validate(build_heuristic_analysis(text)),
                warning=DEGRADED_WARNING,
            )

        if not content:
            raise RequestAnalysisError(
                "No analysis returned",
                code="NO_ANALYSIS",
                status_code=500,
            )

        analysis = self.parse(content, text)
        logger.info(f"Analysis result: domain={analysis.suggested_domain}")
        return AnalyzeResponse(analysis=analysis)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def validate(self, user_text: Any) -> str:
        """Return the trimmed request or raise INVALID_INPUT."""
        if not user_text or not isinstance(user_text, str):
            raise RequestAnalysisError(
                "User text is required and must be a string",
                code="INVALID_INPUT",
                status_code=400,
            )
        text = user_text.strip()
        if not text:
            raise RequestAnalysisError(
                "User text cannot be empty",
                code="INVALID_INPUT",
                status_code=400,
            )
        if len(text) > self.max_length:
            raise RequestAnalysisError(
                f"Text exceeds maximum length of {self.max_length} characters",
                code="INVALID_INPUT",
                status_code=400,
            )
        return text

    @staticmethod
    def parse(content: str, text: str) -> AnalysisResult:
        """
        Parse the model's JSON answer.

        Falls back to a default analysis (keyword domain, first 160 chars as
        summary) when the answer is not valid JSON.
        """
        try:
            return AnalysisResult.model_validate(json.loads(strip_code_fences(content)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse AI response ({e}): {content[:500]}")
            return AnalysisResult(
                suggested_domain=detect_domain_heuristic(text),
                summary=text[:160],
            )
