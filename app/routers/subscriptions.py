# =============================================================================
# app/routers/subscriptions.py - Plans, Subscription and Credits
# =============================================================================
# GET  /plans                        public price list
# GET  /subscription                 caller's subscription, plan and balance
# GET  /subscription/credits         balance only (header badge)
# GET  /subscription/transactions    credit ledger
# POST /subscription/check           can the caller generate at a resolution?
# =============================================================================

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user, get_current_user_optional
from core.models.subscription import (
    CreditBalance,
    CreditCheck,
    CreditCheckRequest,
    SubscriptionPlan,
    SubscriptionResponse,
)
from core.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/plans", response_model=list[SubscriptionPlan])
async def list_plans():
    """Active plans, in display order."""
    return SubscriptionService.list_plans()


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(user: AuthUser = Depends(get_current_user)):
    """
    Current subscription of the caller.

    Users who never subscribed get `subscription: null` and the free-tier
    balance.
    """
    return SubscriptionService.get_subscription(user.id)


@router.get("/subscription/credits", response_model=CreditBalance)
async def get_credits(user: AuthUser = Depends(get_current_user)):
    return SubscriptionService.get_balance(user.id)


@router.get("/subscription/transactions")
async def list_credit_transactions(
    user: AuthUser = Depends(get_current_user),
    limit: Annotated[int, Query(ge=1, le=200, description="Max entries")] = 50,
) -> dict[str, Any]:
    """Credit ledger of the caller, newest first."""
    transactions = SubscriptionService.list_credit_transactions(user.id, limit=limit)
    return {"transactions": transactions, "count": len(transactions)}


@router.post("/subscription/check", response_model=CreditCheck)
async def check_credits(
    request: CreditCheckRequest,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """
    Dry-run of the generation credit check.

    Always 200: `allowed` is false with the refusal code and message when
    the generation would be refused (AUTHENTICATION_REQUIRED for anonymous
    callers).
    """
    return SubscriptionService.check(user.id if user else None, request.resolution)
