# =============================================================================
# core/services/credit_service.py - Credit Rules & Ledger
# =============================================================================
# Pricing is by output resolution: 1K = 1 credit, 2K = 2, 4K = 4.
#
# Two tiers:
# - Free tier (plan slug "free"): 1K only, FREE_GENERATION_LIMIT generations
#   counted in user_subscriptions.free_generations_used
# - Paid tiers: up to the plan's max_resolution, paid from credits_remaining
#
# check_generation() and get_balance() are pure functions over rows already
# fetched; CreditService wraps them with the Supabase reads/writes.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    AuthenticationRequiredError,
    CreditError,
    FreeLimitReachedError,
    InsufficientCreditsError,
    ResolutionNotAllowedError,
)
from core.models.generation import Resolution
from core.models.subscription import (
    FREE_PLAN_SLUG,
    CreditBalance,
    CreditCheck,
    CreditErrorCode,
    CreditTransactionType,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

CREDIT_COSTS: dict[str, int] = {
    Resolution.K1.value: 1,
    Resolution.K2.value: 2,
    Resolution.K4.value: 4,
}


def get_credits_needed(resolution: str | Resolution) -> int:
    """Credits charged for one generation at `resolution` (1 if unknown)."""
    value = resolution.value if isinstance(resolution, Resolution) else resolution
    return CREDIT_COSTS.get(value, 1)


def _is_free_plan(plan: dict[str, Any] | None) -> bool:
    return plan is None or plan.get("slug") == FREE_PLAN_SLUG


# =============================================================================
# Pure Rules
# =============================================================================

def check_generation(
    subscription: dict[str, Any] | None,
    plan: dict[str, Any] | None,
    resolution: str | Resolution,
    free_limit: int,
) -> CreditCheck:
    """
    Decide whether a generation at `resolution` is allowed.

    Args:
        subscription: Latest user_subscriptions row (None if the user has none)
        plan: The subscription's plan row
        resolution: Requested resolution
        free_limit: Free generations granted to the free tier

    Returns:
        CreditCheck (allowed=False carries the error code and a French message)

    Example:
        check_generation(None, None, "2K", 5).error
        # CreditErrorCode.RESOLUTION_NOT_ALLOWED
    """
    resolution = resolution.value if isinstance(resolution, Resolution) else resolution
    needed = get_credits_needed(resolution)

    # No subscription row yet: free tier, nothing used
    if subscription is None or _is_free_plan(plan):
        used = (subscription or {}).get("free_generations_used") or 0
        remaining = max(0, free_limit - used)

        if resolution != Resolution.K1.value:
            return CreditCheck(
                allowed=False,
                error=CreditErrorCode.RESOLUTION_NOT_ALLOWED,
                message=f"La résolution {resolution} n'est pas disponible avec le plan gratuit",
                needed=needed,
                remaining=remaining,
                is_free=True,
            )
        if used >= free_limit:
            return CreditCheck(
                allowed=False,
                error=CreditErrorCode.FREE_LIMIT_REACHED,
                message=f"Vous avez utilisé vos {free_limit} générations gratuites",
                needed=needed,
                remaining=0,
                is_free=True,
            )
        return CreditCheck(allowed=True, needed=needed, remaining=remaining, is_free=True)

    credits = subscription.get("credits_remaining") or 0
    max_resolution = plan.get("max_resolution") or Resolution.K1.value

    if needed > get_credits_needed(max_resolution):
        return CreditCheck(
            allowed=False,
            error=CreditErrorCode.RESOLUTION_NOT_ALLOWED,
            message=f"La résolution {resolution} n'est pas disponible avec votre plan",
            needed=needed,
            remaining=credits,
            is_free=False,
        )
    if credits < needed:
        return CreditCheck(
            allowed=False,
            error=CreditErrorCode.INSUFFICIENT_CREDITS,
            message=f"Crédits insuffisants: {needed} requis, {credits} disponibles",
            needed=needed,
            remaining=credits,
            is_free=False,
        )
    return CreditCheck(allowed=True, needed=needed, remaining=credits, is_free=False)


def get_balance(
    subscription: dict[str, Any] | None,
    plan: dict[str, Any] | None,
    free_limit: int,
) -> CreditBalance:
    """Credits and free generations left for a subscription row."""
    if subscription is None:
        return CreditBalance(credits=0, free_remaining=free_limit, is_free=True)

    is_free = _is_free_plan(plan)
    used = subscription.get("free_generations_used") or 0
    return CreditBalance(
        credits=subscription.get("credits_remaining") or 0,
        free_remaining=max(0, free_limit - used) if is_free else 0,
        is_free=is_free,
    )


def credit_error_from_check(check: CreditCheck, resolution: str) -> CreditError:
    """Map a refused CreditCheck to the API exception the client expects."""
    if check.error == CreditErrorCode.RESOLUTION_NOT_ALLOWED:
        return ResolutionNotAllowedError(resolution, check.remaining, check.needed, check.is_free)
    if check.error == CreditErrorCode.FREE_LIMIT_REACHED:
        return FreeLimitReachedError(settings.FREE_GENERATION_LIMIT, check.needed)
    if check.error == CreditErrorCode.AUTHENTICATION_REQUIRED:
        return AuthenticationRequiredError()
    return InsufficientCreditsError(check.remaining, check.needed)


# =============================================================================
# Service
# =============================================================================

class CreditService:
    """Credit checks and debits backed by Supabase."""

    @staticmethod
    def load(user_id: str | UUID) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
        """Fetch the user's latest subscription and its plan."""
        subscription = SupabaseClient.fetch_latest_subscription(user_id)
        plan = None
        if subscription and subscription.get("plan_id"):
            plan = SupabaseClient.fetch_plan(subscription["plan_id"])
        return subscription, plan

    @staticmethod
    def check(user_id: str | UUID | None, resolution: str | Resolution) -> CreditCheck:
        """Check a generation for a user (anonymous callers are refused)."""
        resolution = resolution.value if isinstance(resolution, Resolution) else resolution
        if not user_id:
            return CreditCheck(
                allowed=False,
                error=CreditErrorCode.AUTHENTICATION_REQUIRED,
                message="Authentification requise",
                needed=get_credits_needed(resolution),
                remaining=0,
                is_free=True,
            )
        subscription, plan = CreditService.load(user_id)
        return check_generation(subscription, plan, resolution, settings.FREE_GENERATION_LIMIT)

    @staticmethod
    def ensure_can_generate(user_id: str | UUID | None, resolution: str | Resolution) -> CreditCheck:
        """
        Raise the matching CreditError when the generation is not allowed.

        Raises:
            CreditError: INSUFFICIENT_CREDITS, FREE_LIMIT_REACHED,
                RESOLUTION_NOT_ALLOWED or AUTHENTICATION_REQUIRED
        """
        resolution = resolution.value if isinstance(resolution, Resolution) else resolution
        check = CreditService.check(user_id, resolution)
        if not check.allowed:
            logger.info(f"Generation refused for user {user_id}: {check.error.value}")
            raise credit_error_from_check(check, resolution)
        return check

    @staticmethod
    def debit(
        user_id: str | UUID,
        resolution: str | Resolution,
        image_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Charge one generation to the user.

        Free tier: increments free_generations_used (no credits involved).
        Paid tier: decrements credits_remaining by the resolution's cost.
        Both record a credit_transactions row with a negative amount.

        Returns:
            The updated subscription row
        """
        resolution = resolution.value if isinstance(resolution, Resolution) else resolution
        user_id_str = normalize_uuid(user_id)
        needed = get_credits_needed(resolution)
        subscription, plan = CreditService.load(user_id_str)

        if subscription is None or _is_free_plan(plan):
            used = (subscription or {}).get("free_generations_used") or 0
            values: dict[str, Any] = {"free_generations_used": used + 1}
            if subscription is None:
                free_plan = SupabaseClient.fetch_plan_by_slug(FREE_PLAN_SLUG)
                values.update({
                    "plan_id": free_plan["id"] if free_plan else None,
                    "status": "active",
                    "credits_remaining": 0,
                })
            transaction_type = CreditTransactionType.FREE_GENERATION
            description = f"Génération gratuite {resolution}"
        else:
            credits = subscription.get("credits_remaining") or 0
            values = {"credits_remaining": max(0, credits - needed)}
            transaction_type = CreditTransactionType.GENERATION
            description = f"Génération {resolution}"

        row = SupabaseClient.save_subscription(user_id_str, values)

        SupabaseClient.insert_row("credit_transactions", {
            "user_id": user_id_str,
            "amount": -needed,
            "type": transaction_type.value,
            "resolution_used": resolution,
            "related_image_id": image_id,
            "description": description,
        })

        logger.info(f"Debited {needed} credit(s) from user {user_id_str} ({transaction_type.value})")
        return row
