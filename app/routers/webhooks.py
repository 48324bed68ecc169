# =============================================================================
# app/routers/webhooks.py - Payment Provider Webhooks
# =============================================================================
# POST /webhooks/moneroo   header x-moneroo-signature: <hex>
# POST /webhooks/fedapay   header x-fedapay-signature: t=<ts>,s=<hex> | <hex>
#
# No user authentication: the HMAC signature over the raw body authenticates
# the provider. The body is read raw, before any JSON parsing, so the
# signature is computed over the exact bytes sent.
# =============================================================================

import logging

from fastapi import APIRouter, Request

from core.models.payment import PaymentProvider, WebhookResponse
from core.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/moneroo", response_model=WebhookResponse)
async def moneroo_webhook(request: Request):
    """
    Moneroo payment events.

    payment.success activates the plan, payment.failed marks the
    transaction failed, payment.refunded moves the user back to the free
    plan. Redelivered success events are acknowledged without crediting
    twice.
    """
    payload = await request.body()
    return WebhookService.handle(
        PaymentProvider.MONEROO,
        payload,
        request.headers.get("x-moneroo-signature"),
    )


@router.post("/fedapay", response_model=WebhookResponse)
async def fedapay_webhook(request: Request):
    """FedaPay transaction events (approved, declined, canceled)."""
    payload = await request.body()
    return WebhookService.handle(
        PaymentProvider.FEDAPAY,
        payload,
        request.headers.get("x-fedapay-signature"),
    )
