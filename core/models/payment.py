# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================
# These models define the API contract for payments:
# - CreatePaymentRequest / CreatePaymentResponse: Moneroo checkout
# - FedaPayCheckoutResponse: configuration for the FedaPay widget
# - PaymentTransaction: a row of payment_transactions
# - PaymentEvent: provider webhook normalized to one shape
#
# Flow:
#   checkout -> payment_transactions(pending) -> provider webhook
#            -> PaymentEvent -> subscription activated / transaction failed
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .base import CamelModel


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentProvider(str, Enum):
    MONEROO = "moneroo"
    FEDAPAY = "fedapay"


class PaymentEventKind(str, Enum):
    """What a webhook means for us, whatever the provider's vocabulary."""
    SUCCESS = "success"
    FAILED = "failed"
    REFUNDED = "refunded"
    UNKNOWN = "unknown"


class CreatePaymentRequest(CamelModel):
    """
    Body of POST /payments/moneroo.

    Example:
        {"planSlug": "pro", "returnUrl": "https://app.example/account?payment=success"}
    """
    plan_slug: str = Field(..., min_length=1, description="Slug of the plan to buy")
    return_url: str | None = Field(default=None, description="Where Moneroo redirects after payment")


class CreatePaymentResponse(CamelModel):
    """
    Example:
        {"success": true, "checkoutUrl": "https://checkout.moneroo.io/...",
         "paymentId": "py_123", "transactionId": "550e8400-..."}
    """
    success: bool = True
    checkout_url: str
    payment_id: str | None = None
    transaction_id: str


class FedaPayCheckoutRequest(CamelModel):
    plan_slug: str = Field(..., min_length=1)


class FedaPayCheckoutResponse(CamelModel):
    """Everything the FedaPay checkout widget needs to open."""
    success: bool = True
    public_key: str
    environment: str
    transaction_id: str
    amount: int
    currency: str = "XOF"
    description: str
    customer: dict[str, Any]
    custom_metadata: dict[str, Any]


class PaymentTransaction(BaseModel):
    """A row of payment_transactions."""
    id: str
    user_id: str
    plan_id: str | None = None
    amount_fcfa: int | None = None
    amount_usd: float | None = None
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    moneroo_payment_id: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaymentEvent(BaseModel):
    """
    A provider webhook normalized into the fields we act on.

    user_id / plan_id / transaction_id come from the metadata attached when
    the checkout was created.
    """
    provider: PaymentProvider
    kind: PaymentEventKind
    event_name: str | None = None
    user_id: str
    plan_id: str
    transaction_id: str
    plan_slug: str | None = None
    provider_payment_id: str | None = None
    payment_method: str | None = None


class WebhookResponse(BaseModel):
    success: bool = True
    message: str
