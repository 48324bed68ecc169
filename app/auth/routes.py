# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from core.models.profile import ADMIN_ROLES
from core.services.profile_service import ProfileService
from core.services.role_service import RoleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user with profile and roles.

    Returns:
        UserResponse: id, email, profile (None until the signup trigger
        created it), roles and is_admin

    Raises:
        401: If not authenticated
    """
    profile = ProfileService.get_profile(user.id)
    roles = RoleService.get_roles(user.id)

    return UserResponse(
        id=user.id,
        email=user.email,
        profile=profile,
        roles=roles,
        is_admin=any(role in ADMIN_ROLES for role in roles),
    )
