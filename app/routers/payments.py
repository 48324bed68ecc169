# =============================================================================
# app/routers/payments.py - Plan Checkout
# =============================================================================
# POST /payments/moneroo    redirect checkout (Mobile Money, cards)
# POST /payments/fedapay    configuration for the FedaPay checkout widget
#
# Both create a pending payment_transactions row; the subscription is only
# activated by the provider webhook (see app/routers/webhooks.py).
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Request

from app.auth import AuthUser, get_current_user
from core.models.payment import (
    CreatePaymentRequest,
    CreatePaymentResponse,
    FedaPayCheckoutRequest,
    FedaPayCheckoutResponse,
)
from core.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/moneroo", response_model=CreatePaymentResponse)
def create_moneroo_payment(
    body: CreatePaymentRequest,
    request: Request,
    user: AuthUser = Depends(get_current_user),
):
    """
    Start a Moneroo payment for a plan.

    Returns the checkout URL to redirect the browser to. Without
    `returnUrl` Moneroo sends the user back to <Origin>/account.

    Errors:
    - 400 PLAN_NOT_PURCHASABLE: free or enterprise plan
    - 404 PLAN_NOT_FOUND
    - 400 PAYMENT_INIT_FAILED: Moneroo refused the payment
    """
    logger.info(f"User {user.id} starting Moneroo payment for plan {body.plan_slug}")
    return PaymentService.create_moneroo_payment(
        user.id,
        user.email,
        body.plan_slug,
        return_url=body.return_url,
        origin=request.headers.get("origin"),
    )


@router.post("/fedapay", response_model=FedaPayCheckoutResponse)
async def create_fedapay_checkout(
    body: FedaPayCheckoutRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Widget configuration (public key, amount, metadata) for a FedaPay checkout."""
    logger.info(f"User {user.id} starting FedaPay checkout for plan {body.plan_slug}")
    return PaymentService.create_fedapay_checkout(user.id, user.email, body.plan_slug)
