# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Role and subscription management for admins and super admins.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, require_admin
from core.models.profile import GrantRoleRequest
from core.models.subscription import GrantSubscriptionRequest
from core.services.role_service import RoleService
from core.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users/{user_id}/roles")
async def get_user_roles(
    user_id: Annotated[str, Path(description="User UUID")],
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    roles = RoleService.get_roles(user_id)
    return {"user_id": user_id, "roles": [role.value for role in roles]}


@router.get("/users/{user_id}/subscription")
async def get_user_subscription(
    user_id: Annotated[str, Path(description="User UUID")],
    admin: AuthUser = Depends(require_admin),
):
    return SubscriptionService.get_subscription(user_id)


@router.post("/roles")
async def grant_role(
    request: GrantRoleRequest,
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """Give a role to a user (no-op if they already have it)."""
    row = RoleService.grant_role(admin.id, request.user_id, request.role)
    return {"success": True, "role": row}


@router.post("/subscriptions")
async def grant_subscription(
    request: GrantSubscriptionRequest,
    admin: AuthUser = Depends(require_admin),
) -> dict[str, Any]:
    """
    Put a user on a plan without payment (partners, support gestures).

    `credits` overrides the plan's monthly credits; the period lasts
    `duration_months` months.
    """
    row = RoleService.grant_subscription(
        admin.id,
        request.user_id,
        request.plan_slug,
        credits=request.credits,
        duration_months=request.duration_months,
    )
    return {"success": True, "subscription": row}
