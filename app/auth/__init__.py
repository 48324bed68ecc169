# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus role and
# permission guards backed by user_roles / role_permissions.
#
# Usage:
#   from app.auth import get_current_user, require_permission, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    require_admin,
    require_permission,
)
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
    "require_permission",
    "AuthUser",
    "UserResponse",
]
