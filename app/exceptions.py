# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code plus a suggestion telling the client
# HOW to recover, not just WHAT failed.
#
# Response shape:
#   {"success": false, "error": "<CODE>", "message": "...", "suggestion": "..."}
#
# Credit errors add "remaining", "needed" and "is_free" at the top level so the
# client can open the upgrade modal without a second request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class GraphisteException(Exception):
    """
    Base exception for the Graphiste GPT API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "GRAPHISTE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "error": self.code,
            "message": self.message,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Credit / Subscription Exceptions
# =============================================================================

class CreditError(GraphisteException):
    """
    Raised when a generation is refused by the credit check.

    `code` is one of INSUFFICIENT_CREDITS, FREE_LIMIT_REACHED,
    RESOLUTION_NOT_ALLOWED, AUTHENTICATION_REQUIRED.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 402,
        remaining: int = 0,
        needed: int = 0,
        is_free: bool = True,
        suggestion: str | None = "Passez à un plan supérieur pour continuer",
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            suggestion=suggestion,
        )
        self.remaining = remaining
        self.needed = needed
        self.is_free = is_free

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update({
            "remaining": self.remaining,
            "needed": self.needed,
            "is_free": self.is_free,
        })
        return result


class InsufficientCreditsError(CreditError):
    """Paid plan without enough credits for the requested resolution."""

    def __init__(self, remaining: int, needed: int):
        super().__init__(
            message=f"Crédits insuffisants: {needed} requis, {remaining} disponibles",
            code="INSUFFICIENT_CREDITS",
            remaining=remaining,
            needed=needed,
            is_free=False,
        )


class FreeLimitReachedError(CreditError):
    """Free tier has used all of its free generations."""

    def __init__(self, limit: int, needed: int = 1):
        super().__init__(
            message=f"Vous avez utilisé vos {limit} générations gratuites",
            code="FREE_LIMIT_REACHED",
            remaining=0,
            needed=needed,
            is_free=True,
        )


class ResolutionNotAllowedError(CreditError):
    """Requested resolution is above what the user's plan allows."""

    def __init__(self, resolution: str, remaining: int, needed: int, is_free: bool):
        super().__init__(
            message=f"La résolution {resolution} n'est pas disponible avec votre plan",
            code="RESOLUTION_NOT_ALLOWED",
            status_code=403,
            remaining=remaining,
            needed=needed,
            is_free=is_free,
        )


class AuthenticationRequiredError(CreditError):
    """No authenticated user on a route that needs one."""

    def __init__(self, message: str = "Authentification requise"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
            suggestion="Connectez-vous pour continuer",
        )


class PlanNotFoundError(GraphisteException):
    """Raised when a subscription plan slug or id doesn't exist."""

    def __init__(self, plan: str):
        super().__init__(
            message=f"Plan non trouvé: {plan}",
            code="PLAN_NOT_FOUND",
            status_code=404,
            suggestion="Use GET /api/v1/plans to list the available plans",
            details={"plan": plan},
        )


class PlanNotPurchasableError(GraphisteException):
    """Raised for plans that cannot be bought online (free, enterprise)."""

    def __init__(self, plan_slug: str, message: str):
        super().__init__(
            message=message,
            code="PLAN_NOT_PURCHASABLE",
            status_code=400,
            details={"plan_slug": plan_slug},
        )


# =============================================================================
# Payment / Webhook Exceptions
# =============================================================================

class PaymentInitializationError(GraphisteException):
    """Raised when the payment provider refuses to create a checkout."""

    def __init__(self, error: str, transaction_id: str | None = None):
        super().__init__(
            message=error,
            code="PAYMENT_INIT_FAILED",
            status_code=400,
            suggestion="Réessayez dans quelques instants ou choisissez un autre moyen de paiement",
            details={"transaction_id": transaction_id} if transaction_id else None,
        )


class InvalidWebhookSignatureError(GraphisteException):
    """Raised when a webhook signature is missing or doesn't match."""

    def __init__(self, provider: str, message: str = "Signature invalide"):
        super().__init__(
            message=message,
            code="INVALID_SIGNATURE",
            status_code=401,
            details={"provider": provider},
        )


class InvalidWebhookPayloadError(GraphisteException):
    """Raised when a webhook payload lacks the metadata we attach at checkout."""

    def __init__(self, provider: str, message: str = "Métadonnées manquantes"):
        super().__init__(
            message=message,
            code="INVALID_WEBHOOK_PAYLOAD",
            status_code=400,
            details={"provider": provider},
        )


# =============================================================================
# Conversation Exceptions
# =============================================================================

class ConversationNotFoundError(GraphisteException):
    """Raised when a conversation doesn't exist, expired, or isn't the caller's."""

    def __init__(self, conversation_id: str):
        super().__init__(
            message=f"Conversation not found: {conversation_id}",
            code="CONVERSATION_NOT_FOUND",
            status_code=404,
            suggestion="Start a new conversation with POST /api/v1/conversations",
            details={"conversation_id": conversation_id},
        )


class InvalidConversationStepError(GraphisteException):
    """Raised when an operation is sent at the wrong step of the wizard."""

    def __init__(self, operation: str, step: str, expected: list[str]):
        super().__init__(
            message=f"Cannot {operation} at step '{step}'",
            code="INVALID_STEP",
            status_code=409,
            suggestion=f"This operation is only allowed at: {', '.join(expected)}",
            details={"operation": operation, "step": step, "expected": expected},
        )


# =============================================================================
# AI / Generation Exceptions
# =============================================================================

class ImageGenerationError(GraphisteException):
    """Raised when the image generator fails or times out."""

    def __init__(self, error: str, status_code: int = 502, task_id: str | None = None):
        super().__init__(
            message=error,
            code="GENERATION_FAILED",
            status_code=status_code,
            suggestion="Réessayez la génération dans quelques instants",
            details={"task_id": task_id} if task_id else None,
        )


class AIServiceError(GraphisteException):
    """Raised when the AI gateway fails in a way the client must see (rate limit, billing)."""

    def __init__(self, message: str, code: str = "AI_SERVICE_ERROR", status_code: int = 502):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
        )


class TranscriptionError(GraphisteException):
    """Raised when speech-to-text fails."""

    def __init__(self, message: str = "Erreur de transcription. Veuillez réessayer.", status_code: int = 500):
        super().__init__(
            message=message,
            code="TRANSCRIPTION_FAILED",
            status_code=status_code,
        )


class ServiceNotConfiguredError(GraphisteException):
    """Raised when a provider key needed by an endpoint is not set."""

    def __init__(self, service: str, setting: str):
        super().__init__(
            message=f"{service} is not configured",
            code="SERVICE_NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {setting} in the environment",
            details={"service": service},
        )


# =============================================================================
# Resource / Permission Exceptions
# =============================================================================

class TemplateNotFoundError(GraphisteException):
    """Raised when a reference template id doesn't exist."""

    def __init__(self, template_id: str):
        super().__init__(
            message=f"Template not found: {template_id}",
            code="TEMPLATE_NOT_FOUND",
            status_code=404,
            details={"template_id": template_id},
        )


class ImageNotFoundError(GraphisteException):
    """Raised when a history image doesn't exist or belongs to another user."""

    def __init__(self, image_id: str):
        super().__init__(
            message=f"Image not found: {image_id}",
            code="IMAGE_NOT_FOUND",
            status_code=404,
            details={"image_id": image_id},
        )


class InvalidImageError(GraphisteException):
    """Raised when an image is neither an http(s) URL nor a base64 image data URL."""

    def __init__(self, message: str = "Image invalide"):
        super().__init__(
            message=message,
            code="INVALID_IMAGE",
            status_code=422,
            suggestion="Envoyez une URL https ou une image encodée (data:image/png;base64,...)",
        )


class StorageUploadError(GraphisteException):
    """Raised when an image can't be written to Supabase storage."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message="Impossible d'enregistrer l'image",
            code="STORAGE_UPLOAD_FAILED",
            status_code=502,
            suggestion="Réessayez dans quelques instants",
            details={"path": path, "error": error},
        )


class PermissionDeniedError(GraphisteException):
    """Raised when the caller lacks the role or permission for an action."""

    def __init__(self, required: str):
        super().__init__(
            message=f"Permission denied: {required} required",
            code="PERMISSION_DENIED",
            status_code=403,
            details={"required": required},
        )


class UpstreamServiceError(GraphisteException):
    """Raised when a provider (AI gateway, Kie, Moneroo, Supabase) fails."""

    def __init__(
        self,
        message: str,
        code: str = "UPSTREAM_ERROR",
        status_code: int = 502,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            suggestion=suggestion,
            details=details,
        )


# Provider statuses that mean the same thing to our client.
PASSTHROUGH_STATUSES = {400, 402, 429, 500, 503, 504}


def to_api_exception(error: Exception, status_code: int = 502) -> GraphisteException:
    """
    Translate a lower-layer error (AIGatewayError, KieClientError,
    SupabaseClientError...) into an API exception, keeping its code.

    Provider statuses such as 401 (our key is wrong) are not the client's
    problem and become `status_code`.
    """
    if isinstance(error, GraphisteException):
        return error
    upstream_status = getattr(error, "status_code", None)
    return UpstreamServiceError(
        message=getattr(error, "message", None) or str(error),
        code=getattr(error, "code", None) or "UPSTREAM_ERROR",
        status_code=upstream_status if upstream_status in PASSTHROUGH_STATUSES else status_code,
        suggestion=getattr(error, "suggestion", None),
        details=getattr(error, "details", None),
    )


# =============================================================================
# Exception Handlers
# =============================================================================

async def graphiste_exception_handler(
    request: Request,
    exc: GraphisteException
) -> JSONResponse:
    """
    Convert GraphisteException to JSON response.

    Returns structured error with:
    - error: Machine-readable error code
    - message: Human-readable message
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors on request bodies.

    Keeps the {success, error} envelope used by every other error.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", []) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": errors[0]["message"] if errors else "Validation error",
            "details": {"errors": errors},
        }
    )
