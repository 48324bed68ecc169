# =============================================================================
# core/models/subscription.py - Subscription & Credit Schemas
# =============================================================================
# These models define the API contract for plans, subscriptions and credits:
# - SubscriptionPlan: a row of subscription_plans
# - UserSubscription: a row of user_subscriptions
# - CreditTransaction: a row of credit_transactions (ledger)
# - CreditCheck / CreditBalance: results of the pure credit rules
#
# Credit errors use a closed set of codes (CreditErrorCode) that the client
# maps to its upgrade modal.
# =============================================================================

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .generation import Resolution

FREE_PLAN_SLUG = "free"
ENTERPRISE_PLAN_SLUG = "enterprise"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PAST_DUE = "past_due"


class CreditErrorCode(str, Enum):
    """Closed set of reasons a generation can be refused."""
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    FREE_LIMIT_REACHED = "FREE_LIMIT_REACHED"
    RESOLUTION_NOT_ALLOWED = "RESOLUTION_NOT_ALLOWED"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"


class CreditTransactionType(str, Enum):
    SUBSCRIPTION_RENEWAL = "subscription_renewal"
    GENERATION = "generation"
    FREE_GENERATION = "free_generation"
    ADMIN_GRANT = "admin_grant"


class SubscriptionPlan(BaseModel):
    """
    A purchasable (or free) plan.

    Example:
        {
            "id": "...", "name": "Pro", "slug": "pro",
            "price_fcfa": 15000, "price_usd": 25,
            "credits_per_month": 100, "max_resolution": "4K",
            "features": ["4K", "Support prioritaire"], "sort_order": 3
        }
    """
    id: str
    name: str
    slug: str
    description: str | None = None
    price_fcfa: int = 0
    price_usd: float = 0
    credits_per_month: int = 0
    max_resolution: Resolution = Resolution.K1
    features: list[str] = Field(default_factory=list)
    is_popular: bool = False
    is_active: bool = True
    sort_order: int = 0

    @field_validator("features", mode="before")
    @classmethod
    def coerce_features(cls, value: Any) -> list[str]:
        """features is a JSON column: accept a list, a JSON string or null."""
        if value is None:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return [value]
        if isinstance(value, list):
            return [str(item) for item in value]
        return []

    @field_validator("max_resolution", mode="before")
    @classmethod
    def default_resolution(cls, value: Any) -> Any:
        return value or Resolution.K1

    @property
    def is_free(self) -> bool:
        return self.slug == FREE_PLAN_SLUG


class UserSubscription(BaseModel):
    """A row of user_subscriptions. The newest row per user is authoritative."""
    id: str
    user_id: str
    plan_id: str | None = None
    status: str = SubscriptionStatus.ACTIVE.value
    credits_remaining: int = 0
    free_generations_used: int = 0
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    moneroo_subscription_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("credits_remaining", "free_generations_used", mode="before")
    @classmethod
    def null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class CreditTransaction(BaseModel):
    """A row of the credit ledger. Positive amounts credit, negative debit."""
    id: str
    user_id: str
    amount: int
    type: str
    resolution_used: str | None = None
    related_image_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class CreditCheck(BaseModel):
    """Result of checking whether a generation is allowed."""
    allowed: bool
    error: CreditErrorCode | None = None
    message: str | None = None
    needed: int
    remaining: int
    is_free: bool


class CreditBalance(BaseModel):
    """
    What the user can still generate.

    - credits: paid credits left (0 on the free tier)
    - free_remaining: free 1K generations left (0 on paid tiers)
    """
    credits: int
    free_remaining: int
    is_free: bool


class CreditCheckRequest(BaseModel):
    resolution: Resolution = Resolution.K1


class SubscriptionResponse(BaseModel):
    """Current subscription of the caller, with its plan and balance."""
    subscription: UserSubscription | None = None
    plan: SubscriptionPlan | None = None
    balance: CreditBalance


class GrantSubscriptionRequest(BaseModel):
    """Admin grant of a plan to a user."""
    user_id: str
    plan_slug: str = Field(..., min_length=1)
    credits: int | None = Field(default=None, ge=0, description="Overrides the plan's monthly credits")
    duration_months: int = Field(default=1, ge=1, le=24)
