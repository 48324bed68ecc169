# =============================================================================
# core/services/role_service.py - Roles, Permissions & Admin Actions
# =============================================================================
# Roles live in user_roles (one row per user/role); role_permissions maps a
# role to permission strings such as "templates.manage".
#
# Admins (admin, super_admin) implicitly hold every permission.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import PermissionDeniedError
from core.models.profile import ADMIN_ROLES, AppRole
from core.services.subscription_service import SubscriptionService
from core.models.subscription import CreditTransactionType
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class RoleService:
    """Service for roles and admin-only operations."""

    @staticmethod
    def get_roles(user_id: str | UUID) -> list[AppRole]:
        """Roles of a user (unknown role values are ignored)."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("user_roles")
                .select("role")
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Error checking roles: {e}")
            raise

        roles = []
        for row in response.data or []:
            try:
                roles.append(AppRole(row.get("role")))
            except ValueError:
                logger.warning(f"Unknown role in user_roles: {row.get('role')}")
        return roles

    @staticmethod
    def has_role(user_id: str | UUID, role: AppRole) -> bool:
        return role in RoleService.get_roles(user_id)

    @staticmethod
    def is_admin(user_id: str | UUID) -> bool:
        return any(role in ADMIN_ROLES for role in RoleService.get_roles(user_id))

    @staticmethod
    def has_permission(user_id: str | UUID, permission: str) -> bool:
        """True if the user is an admin or one of their roles grants `permission`."""
        roles = RoleService.get_roles(user_id)
        if any(role in ADMIN_ROLES for role in roles):
            return True
        if not roles:
            return False

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("role_permissions")
                .select("role")
                .eq("permission", permission)
                .in_("role", [role.value for role in roles])
                .execute()
            )
        except Exception as e:
            logger.error(f"Error checking permission {permission}: {e}")
            raise

        return bool(response.data)

    @staticmethod
    def require_admin(user_id: str | UUID) -> None:
        if not RoleService.is_admin(user_id):
            raise PermissionDeniedError("admin")

    # -------------------------------------------------------------------------
    # Admin Actions
    # -------------------------------------------------------------------------

    @staticmethod
    def grant_role(admin_id: str | UUID, user_id: str | UUID, role: AppRole) -> dict[str, Any]:
        """
        Give `role` to a user. Granting a role the user already has is a no-op.

        Raises:
            PermissionDeniedError: If the caller is not an admin
        """
        RoleService.require_admin(admin_id)

        user_id_str = normalize_uuid(user_id)
        if RoleService.has_role(user_id_str, role):
            return {"user_id": user_id_str, "role": role.value}

        row = SupabaseClient.insert_row("user_roles", {"user_id": user_id_str, "role": role.value})
        logger.info(f"Admin {admin_id} granted role {role.value} to user {user_id_str}")
        return row

    @staticmethod
    def grant_subscription(
        admin_id: str | UUID,
        target_user_id: str | UUID,
        plan_slug: str,
        credits: int | None = None,
        duration_months: int = 1,
    ) -> dict[str, Any]:
        """
        Put a user on a plan without payment.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            PlanNotFoundError: If the plan doesn't exist
        """
        RoleService.require_admin(admin_id)
        plan = SubscriptionService.get_plan(plan_slug)

        row = SubscriptionService.activate_plan(
            target_user_id,
            plan,
            credits=credits,
            duration_months=duration_months,
            transaction_type=CreditTransactionType.ADMIN_GRANT,
            description=f"Attribution admin: {plan.get('name')}",
        )
        logger.info(f"Admin {admin_id} granted plan {plan_slug} to user {target_user_id}")
        return row
