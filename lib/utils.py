# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Date Utilities
# =============================================================================

def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# =============================================================================
# AI Response Helpers
# =============================================================================

_FENCE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def strip_code_fences(content: str) -> str:
    """
    Remove markdown code fences that models wrap around JSON.

    Example:
        strip_code_fences('```json\\n{"a": 1}\\n```')  # '{"a": 1}'
    """
    content = content.strip()
    match = _FENCE_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    return content.replace("```json", "").replace("```", "").strip()


def clamp(value: Any, minimum: float, maximum: float, default: float) -> float:
    """
    Coerce a loosely-typed number into [minimum, maximum].

    Non-numeric and zero values fall back to `default` before clamping.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = 0.0
    if number != number or number == 0:  # NaN or zero
        number = default
    return max(minimum, min(maximum, number))


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
        status_code: Upstream HTTP status when the error came from a provider

    Example:
        class KieClientError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="KIE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        self.status_code = status_code

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
