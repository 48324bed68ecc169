# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from typing import Optional

from core.models.profile import AppRole, UserProfile


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class UserResponse(BaseModel):
    """
    Current user, with the profile and roles stored in the database.
    """
    id: UUID
    email: Optional[str] = None
    profile: Optional[UserProfile] = None
    roles: list[AppRole] = []
    is_admin: bool = False


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus custom claims.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: str  # Audience (should be "authenticated")
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    role: Optional[str] = None  # Supabase role, not an AppRole
