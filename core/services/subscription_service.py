# =============================================================================
# core/services/subscription_service.py - Plans & Subscriptions
# =============================================================================
# Read side of subscriptions (plans, current subscription, balance, ledger)
# and activate_plan(), the single write path used by payment webhooks and
# admin grants.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from dateutil.relativedelta import relativedelta

from app.config import settings
from app.exceptions import PlanNotFoundError
from core.models.generation import Resolution
from core.models.subscription import (
    CreditBalance,
    CreditCheck,
    CreditTransactionType,
    SubscriptionPlan,
    SubscriptionResponse,
    SubscriptionStatus,
    UserSubscription,
)
from core.services.credit_service import CreditService, get_balance
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Plans, subscriptions and the credit ledger."""

    @staticmethod
    def list_plans() -> list[SubscriptionPlan]:
        """Active plans, sorted by sort_order."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("subscription_plans")
                .select("*")
                .eq("is_active", True)
                .order("sort_order")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list plans: {e}")
            raise

        plans = [SubscriptionPlan.model_validate(row) for row in response.data or []]
        return sorted(plans, key=lambda plan: plan.sort_order)

    @staticmethod
    def get_plan(slug: str) -> dict[str, Any]:
        """
        Fetch an active plan by slug.

        Raises:
            PlanNotFoundError: If no active plan has this slug
        """
        plan = SupabaseClient.fetch_plan_by_slug(slug)
        if not plan:
            raise PlanNotFoundError(slug)
        return plan

    @staticmethod
    def get_subscription(user_id: str | UUID) -> SubscriptionResponse:
        """Latest subscription of the user, its plan and balance."""
        subscription, plan = CreditService.load(user_id)
        return SubscriptionResponse(
            subscription=UserSubscription.model_validate(subscription) if subscription else None,
            plan=SubscriptionPlan.model_validate(plan) if plan else None,
            balance=get_balance(subscription, plan, settings.FREE_GENERATION_LIMIT),
        )

    @staticmethod
    def get_balance(user_id: str | UUID) -> CreditBalance:
        subscription, plan = CreditService.load(user_id)
        return get_balance(subscription, plan, settings.FREE_GENERATION_LIMIT)

    @staticmethod
    def list_credit_transactions(user_id: str | UUID, limit: int = 50) -> list[dict[str, Any]]:
        """Most recent ledger entries of the user, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("credit_transactions")
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return response.data or []
        except Exception as e:
            logger.error(f"Failed to list credit transactions: {e}")
            raise

    @staticmethod
    def check(user_id: str | UUID | None, resolution: Resolution | str) -> CreditCheck:
        return CreditService.check(user_id, resolution)

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    @staticmethod
    def activate_plan(
        user_id: str | UUID,
        plan: dict[str, Any],
        credits: int | None = None,
        duration_months: int = 1,
        provider_subscription_id: str | None = None,
        transaction_type: CreditTransactionType = CreditTransactionType.SUBSCRIPTION_RENEWAL,
        description: str | None = None,
    ) -> dict[str, Any]:
        """
        Put the user on `plan` for `duration_months` and reset their credits.

        Args:
            user_id: Target user
            plan: subscription_plans row
            credits: Credits to grant (default: the plan's monthly credits)
            duration_months: Length of the period
            provider_subscription_id: Payment provider id stored on the row
            transaction_type: Ledger type of the credit grant
            description: Ledger description

        Returns:
            The written subscription row
        """
        user_id_str = normalize_uuid(user_id)
        granted = plan.get("credits_per_month", 0) if credits is None else credits
        now = utc_now()

        values: dict[str, Any] = {
            "plan_id": plan["id"],
            "status": SubscriptionStatus.ACTIVE.value,
            "credits_remaining": granted,
            "free_generations_used": 0,
            "current_period_start": now.isoformat(),
            "current_period_end": (now + relativedelta(months=duration_months)).isoformat(),
        }
        if provider_subscription_id:
            values["moneroo_subscription_id"] = provider_subscription_id

        row = SupabaseClient.save_subscription(user_id_str, values)

        SupabaseClient.insert_row("credit_transactions", {
            "user_id": user_id_str,
            "amount": granted,
            "type": transaction_type.value,
            "description": description or f"Abonnement {plan.get('name', plan.get('slug'))}",
        })

        logger.info(f"Activated plan {plan.get('slug')} for user {user_id_str} ({granted} credits)")
        return row
