# =============================================================================
# core/services/webhook_service.py - Payment Webhooks
# =============================================================================
# Handles the payment callbacks of Moneroo and FedaPay:
#
#   raw body + signature header
#     -> verify_signature()   HMAC-SHA256, skipped if the secret is unset
#     -> parse_*_event()      provider payload -> PaymentEvent
#     -> process()            transaction status + subscription activation
#
# Providers may deliver the same event twice. A success event whose
# transaction is already "success" is acknowledged without re-crediting.
# =============================================================================

import json
import logging
from typing import Any

from app.config import settings
from app.exceptions import InvalidWebhookPayloadError, InvalidWebhookSignatureError
from core.models.payment import (
    PaymentEvent,
    PaymentEventKind,
    PaymentProvider,
    PaymentStatus,
    WebhookResponse,
)
from core.models.subscription import FREE_PLAN_SLUG, SubscriptionStatus
from core.services.subscription_service import SubscriptionService
from lib.signatures import verify_fedapay_signature, verify_moneroo_signature
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

MONEROO_SUCCESS_EVENTS = {"payment.success", "payment.successful"}
MONEROO_FAILED_EVENTS = {"payment.failed"}
MONEROO_REFUND_EVENTS = {"payment.refunded"}

FEDAPAY_SUCCESS_EVENTS = {"transaction.approved", "transaction.completed"}
FEDAPAY_FAILED_EVENTS = {"transaction.declined", "transaction.canceled"}


# =============================================================================
# Signature
# =============================================================================

def verify_signature(provider: PaymentProvider, payload: bytes, signature: str | None) -> None:
    """
    Verify the webhook signature of `provider`.

    Raises:
        InvalidWebhookSignatureError: Missing or invalid signature
    """
    if provider == PaymentProvider.MONEROO:
        secret, verify = settings.MONEROO_WEBHOOK_SECRET, verify_moneroo_signature
    else:
        secret, verify = settings.FEDAPAY_WEBHOOK_SECRET, verify_fedapay_signature

    if not secret:
        logger.warning(f"{provider.value} webhook secret not set, skipping signature verification")
        return

    if not signature:
        logger.error(f"Missing {provider.value} webhook signature")
        raise InvalidWebhookSignatureError(provider.value, "Signature manquante")

    if not verify(payload, signature, secret):
        logger.error(f"Invalid {provider.value} webhook signature")
        raise InvalidWebhookSignatureError(provider.value)

    logger.info(f"{provider.value} webhook signature verified")


def load_payload(provider: PaymentProvider, payload: bytes) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidWebhookPayloadError(provider.value, "Payload invalide")
    if not isinstance(data, dict):
        raise InvalidWebhookPayloadError(provider.value, "Payload invalide")
    return data


# =============================================================================
# Payload Normalization
# =============================================================================

def _require_metadata(provider: PaymentProvider, metadata: Any) -> dict[str, Any]:
    metadata = metadata if isinstance(metadata, dict) else {}
    if not all(metadata.get(key) for key in ("user_id", "plan_id", "transaction_id")):
        logger.error(f"Missing {provider.value} metadata: {metadata}")
        raise InvalidWebhookPayloadError(provider.value)
    return metadata


def parse_moneroo_event(payload: dict[str, Any]) -> PaymentEvent:
    """
    Normalize a Moneroo webhook.

    Payload: {"event": "payment.success", "data": {"id", "status",
    "payment_method", "metadata": {user_id, plan_id, transaction_id, plan_slug}}}
    """
    provider = PaymentProvider.MONEROO
    event_name = payload.get("event")
    data = payload.get("data")
    if not event_name or not isinstance(data, dict):
        raise InvalidWebhookPayloadError(provider.value, "Payload invalide")

    metadata = _require_metadata(provider, data.get("metadata"))
    status = data.get("status")

    if event_name in MONEROO_SUCCESS_EVENTS or status == "success":
        kind = PaymentEventKind.SUCCESS
    elif event_name in MONEROO_FAILED_EVENTS or status == "failed":
        kind = PaymentEventKind.FAILED
    elif event_name in MONEROO_REFUND_EVENTS:
        kind = PaymentEventKind.REFUNDED
    else:
        kind = PaymentEventKind.UNKNOWN

    return PaymentEvent(
        provider=provider,
        kind=kind,
        event_name=event_name,
        user_id=str(metadata["user_id"]),
        plan_id=str(metadata["plan_id"]),
        transaction_id=str(metadata["transaction_id"]),
        plan_slug=metadata.get("plan_slug"),
        provider_payment_id=str(data["id"]) if data.get("id") else None,
        payment_method=data.get("payment_method") or "unknown",
    )


def parse_fedapay_event(payload: dict[str, Any]) -> PaymentEvent:
    """
    Normalize a FedaPay webhook.

    Payload: {"entity": "event", "name": "transaction.approved",
    "object": {"id", "status", "mode", "custom_metadata": {...}}}
    ("event" / "data" / "metadata" are accepted as aliases)
    """
    provider = PaymentProvider.FEDAPAY
    event_name = payload.get("name") or payload.get("event")
    data = payload.get("object") or payload.get("data")
    if not isinstance(data, dict):
        raise InvalidWebhookPayloadError(provider.value, "Payload invalide - pas de données de transaction")

    metadata = _require_metadata(provider, data.get("custom_metadata") or data.get("metadata"))
    status = data.get("status")

    if event_name in FEDAPAY_SUCCESS_EVENTS or status == "approved":
        kind = PaymentEventKind.SUCCESS
    elif event_name in FEDAPAY_FAILED_EVENTS or status == "declined":
        kind = PaymentEventKind.FAILED
    else:
        kind = PaymentEventKind.UNKNOWN

    return PaymentEvent(
        provider=provider,
        kind=kind,
        event_name=event_name,
        user_id=str(metadata["user_id"]),
        plan_id=str(metadata["plan_id"]),
        transaction_id=str(metadata["transaction_id"]),
        plan_slug=metadata.get("plan_slug"),
        provider_payment_id=str(data["id"]) if data.get("id") else None,
        payment_method=data.get("mode") or "fedapay",
    )


# =============================================================================
# Service
# =============================================================================

class WebhookService:
    """Applies normalized payment events to transactions and subscriptions."""

    @staticmethod
    def handle(provider: PaymentProvider, payload: bytes, signature: str | None) -> WebhookResponse:
        """Verify, normalize and process one webhook delivery."""
        verify_signature(provider, payload, signature)
        data = load_payload(provider, payload)

        if provider == PaymentProvider.MONEROO:
            event = parse_moneroo_event(data)
        else:
            event = parse_fedapay_event(data)

        logger.info(
            f"{provider.value} webhook: event={event.event_name}, kind={event.kind.value}, "
            f"transaction={event.transaction_id}"
        )
        return WebhookService.process(event)

    @staticmethod
    def process(event: PaymentEvent) -> WebhookResponse:
        if event.kind == PaymentEventKind.SUCCESS:
            return WebhookService._on_success(event)
        if event.kind == PaymentEventKind.FAILED:
            SupabaseClient.update_payment_transaction(event.transaction_id, {
                "status": PaymentStatus.FAILED.value,
            })
            logger.info(f"Payment failed for user {event.user_id}")
            return WebhookResponse(message="Paiement échoué enregistré")
        if event.kind == PaymentEventKind.REFUNDED:
            return WebhookService._on_refund(event)

        logger.info(f"Unknown event: {event.event_name}")
        return WebhookResponse(message="Événement reçu")

    @staticmethod
    def _on_success(event: PaymentEvent) -> WebhookResponse:
        transaction = SupabaseClient.fetch_payment_transaction(event.transaction_id)
        if transaction and transaction.get("status") == PaymentStatus.SUCCESS.value:
            logger.info(f"Transaction {event.transaction_id} already processed, skipping")
            return WebhookResponse(message="Abonnement déjà activé")

        plan = SupabaseClient.fetch_plan(event.plan_id)
        if not plan:
            logger.error(f"Plan not found: {event.plan_id}")
            raise InvalidWebhookPayloadError(event.provider.value, "Plan introuvable")

        updates: dict[str, Any] = {
            "status": PaymentStatus.SUCCESS.value,
            "payment_method": event.payment_method,
        }
        if event.provider_payment_id:
            updates["moneroo_payment_id"] = event.provider_payment_id
        SupabaseClient.update_payment_transaction(event.transaction_id, updates)

        suffix = " via FedaPay" if event.provider == PaymentProvider.FEDAPAY else ""
        SubscriptionService.activate_plan(
            event.user_id,
            plan,
            provider_subscription_id=event.provider_payment_id,
            description=f"Activation abonnement {plan.get('name')}{suffix}",
        )

        logger.info(f"Subscription activated for user {event.user_id} with {plan.get('credits_per_month')} credits")
        return WebhookResponse(message="Abonnement activé")

    @staticmethod
    def _on_refund(event: PaymentEvent) -> WebhookResponse:
        SupabaseClient.update_payment_transaction(event.transaction_id, {
            "status": PaymentStatus.REFUNDED.value,
        })

        free_plan = SupabaseClient.fetch_plan_by_slug(FREE_PLAN_SLUG)
        if free_plan:
            SupabaseClient.save_subscription(event.user_id, {
                "plan_id": free_plan["id"],
                "status": SubscriptionStatus.ACTIVE.value,
                "credits_remaining": 0,
            })

        logger.info(f"Payment refunded for user {event.user_id}")
        return WebhookResponse(message="Remboursement traité")
