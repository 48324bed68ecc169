# =============================================================================
# core/services/payment_service.py - Plan Checkout
# =============================================================================
# Starts a plan purchase with one of the two payment providers:
#
# - Moneroo: we initialize a hosted checkout and return its URL
# - FedaPay: the client opens the FedaPay widget with the configuration we
#   return (public key, amount, metadata)
#
# Both write a pending payment_transactions row first; its id travels in the
# provider metadata and comes back in the webhook.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    PaymentInitializationError,
    PlanNotPurchasableError,
    ServiceNotConfiguredError,
)
from core.models.payment import (
    CreatePaymentResponse,
    FedaPayCheckoutResponse,
    PaymentStatus,
)
from core.models.subscription import ENTERPRISE_PLAN_SLUG, FREE_PLAN_SLUG
from core.services.subscription_service import SubscriptionService
from lib.moneroo_client import MonerooClient, MonerooClientError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

CURRENCY = "XOF"
DEFAULT_FIRST_NAME = "Client"
DEFAULT_LAST_NAME = "Graphiste GPT"


def split_customer_name(full_name: str | None) -> tuple[str, str]:
    """
    Split a profile's full name into (first name, last name).

    Example:
        split_customer_name("Awa Koné Diallo")  # ("Awa", "Koné Diallo")
        split_customer_name(None)               # ("Client", "Graphiste GPT")
    """
    parts = (full_name or DEFAULT_FIRST_NAME).split()
    first = parts[0] if parts else DEFAULT_FIRST_NAME
    last = " ".join(parts[1:]) or DEFAULT_LAST_NAME
    return first, last


def plan_description(plan: dict[str, Any]) -> str:
    return f"Abonnement {plan['name']} - Graphiste GPT"


class PaymentService:
    """Creates payment transactions and provider checkouts."""

    @staticmethod
    def get_purchasable_plan(plan_slug: str) -> dict[str, Any]:
        """
        Fetch a plan that can be bought online.

        Raises:
            PlanNotFoundError: Unknown or inactive plan
            PlanNotPurchasableError: Free or enterprise plan
        """
        plan = SubscriptionService.get_plan(plan_slug)
        if plan["slug"] == FREE_PLAN_SLUG:
            raise PlanNotPurchasableError(plan_slug, "Le plan gratuit ne nécessite pas de paiement")
        if plan["slug"] == ENTERPRISE_PLAN_SLUG:
            raise PlanNotPurchasableError(plan_slug, "Veuillez nous contacter pour le plan Entreprise")
        return plan

    @staticmethod
    def create_transaction(user_id: str | UUID, plan: dict[str, Any], plan_slug: str) -> dict[str, Any]:
        """Insert the pending payment_transactions row for a checkout."""
        transaction = SupabaseClient.insert_row("payment_transactions", {
            "user_id": normalize_uuid(user_id),
            "plan_id": plan["id"],
            "amount_fcfa": plan.get("price_fcfa"),
            "amount_usd": plan.get("price_usd"),
            "status": PaymentStatus.PENDING.value,
            "metadata": {"plan_slug": plan_slug},
        })
        logger.info(f"Created payment transaction {transaction['id']} for plan {plan_slug}")
        return transaction

    # -------------------------------------------------------------------------
    # Moneroo
    # -------------------------------------------------------------------------

    @staticmethod
    def create_moneroo_payment(
        user_id: str | UUID,
        email: str | None,
        plan_slug: str,
        return_url: str | None = None,
        origin: str | None = None,
    ) -> CreatePaymentResponse:
        """
        Start a Moneroo checkout for a plan.

        Args:
            user_id: Buyer
            email: Buyer email (sent to Moneroo)
            plan_slug: Plan to buy
            return_url: Redirect after payment (default: <origin>/account?payment=success)
            origin: Origin header of the request

        Returns:
            CreatePaymentResponse with the checkout URL

        Raises:
            ServiceNotConfiguredError: MONEROO_SECRET_KEY is not set
            PlanNotFoundError / PlanNotPurchasableError: Bad plan
            PaymentInitializationError: Moneroo refused the payment
        """
        if not settings.MONEROO_SECRET_KEY:
            raise ServiceNotConfiguredError("Moneroo", "MONEROO_SECRET_KEY")

        user_id_str = normalize_uuid(user_id)
        plan = PaymentService.get_purchasable_plan(plan_slug)
        profile = SupabaseClient.fetch_profile(user_id_str) or {}
        first_name, last_name = split_customer_name(profile.get("full_name"))

        transaction = PaymentService.create_transaction(user_id_str, plan, plan_slug)

        base_url = (origin or settings.PUBLIC_APP_URL).rstrip("/")
        payload = {
            "amount": plan.get("price_fcfa"),
            "currency": CURRENCY,
            "description": plan_description(plan),
            "customer": {
                "email": email or "",
                "first_name": first_name,
                "last_name": last_name,
            },
            "return_url": return_url or f"{base_url}/account?payment=success",
            "metadata": {
                "user_id": user_id_str,
                "plan_id": plan["id"],
                "transaction_id": transaction["id"],
                "plan_slug": plan_slug,
            },
        }

        try:
            payment = MonerooClient(settings.MONEROO_SECRET_KEY).initialize_payment(payload)
        except MonerooClientError as e:
            logger.error(f"Moneroo payment failed for transaction {transaction['id']}: {e.message}")
            SupabaseClient.update_payment_transaction(transaction["id"], {
                "status": PaymentStatus.FAILED.value,
                "metadata": {**(transaction.get("metadata") or {}), "error": e.message},
            })
            raise PaymentInitializationError(e.message, transaction_id=transaction["id"])

        SupabaseClient.update_payment_transaction(transaction["id"], {
            "moneroo_payment_id": payment.get("id"),
        })

        return CreatePaymentResponse(
            checkout_url=payment["checkout_url"],
            payment_id=payment.get("id"),
            transaction_id=transaction["id"],
        )

    # -------------------------------------------------------------------------
    # FedaPay
    # -------------------------------------------------------------------------

    @staticmethod
    def create_fedapay_checkout(
        user_id: str | UUID,
        email: str | None,
        plan_slug: str,
    ) -> FedaPayCheckoutResponse:
        """
        Prepare a FedaPay widget checkout for a plan.

        Raises:
            ServiceNotConfiguredError: FEDAPAY_PUBLIC_KEY is not set
            PlanNotFoundError / PlanNotPurchasableError: Bad plan
        """
        if not settings.FEDAPAY_PUBLIC_KEY:
            raise ServiceNotConfiguredError("FedaPay", "FEDAPAY_PUBLIC_KEY")

        user_id_str = normalize_uuid(user_id)
        plan = PaymentService.get_purchasable_plan(plan_slug)
        profile = SupabaseClient.fetch_profile(user_id_str) or {}
        first_name, last_name = split_customer_name(profile.get("full_name"))

        transaction = PaymentService.create_transaction(user_id_str, plan, plan_slug)

        return FedaPayCheckoutResponse(
            public_key=settings.FEDAPAY_PUBLIC_KEY,
            environment=settings.FEDAPAY_ENVIRONMENT,
            transaction_id=transaction["id"],
            amount=plan.get("price_fcfa") or 0,
            currency=CURRENCY,
            description=plan_description(plan),
            customer={
                "email": email or "",
                "firstname": first_name,
                "lastname": last_name,
            },
            custom_metadata={
                "user_id": user_id_str,
                "plan_id": plan["id"],
                "plan_slug": plan_slug,
                "transaction_id": transaction["id"],
            },
        )
