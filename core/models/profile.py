# =============================================================================
# core/models/profile.py - User Profile & Role Schemas
# =============================================================================
# - UserProfile: a row of profiles (one per auth user)
# - ProfileUpdate: the columns a user may change on their own profile
# - AppRole: roles stored in user_roles, highest privilege first
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class AppRole(str, Enum):
    """
    Back-office roles.

    - super_admin / admin: full administration
    - content_manager: manages templates and showcase
    - designer: uploads templates to the marketplace
    - user: default role
    """
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    CONTENT_MANAGER = "content_manager"
    DESIGNER = "designer"
    USER = "user"


ADMIN_ROLES = frozenset({AppRole.SUPER_ADMIN, AppRole.ADMIN})


class UserProfile(BaseModel):
    """A row of profiles."""
    id: str
    user_id: str
    full_name: str | None = None
    avatar_url: str | None = None
    cover_image_url: str | None = None
    company_name: str | None = None
    phone: str | None = None
    website: str | None = None
    default_color_palette: list[str] | None = None
    default_logo_url: str | None = None
    industry: str | None = None
    how_heard_about_us: str | None = None
    expectations: str | None = None
    onboarding_completed: bool | None = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """
    Editable profile fields. Omitted fields are left unchanged.

    Example:
        {"full_name": "Awa Diallo", "default_color_palette": ["#0033AA", "#FFD700"]}
    """
    full_name: str | None = Field(default=None, max_length=200)
    avatar_url: str | None = None
    cover_image_url: str | None = None
    company_name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=40)
    website: str | None = None
    default_color_palette: list[str] | None = Field(default=None, max_length=6)
    default_logo_url: str | None = None
    industry: str | None = Field(default=None, max_length=100)
    how_heard_about_us: str | None = Field(default=None, max_length=200)
    expectations: str | None = Field(default=None, max_length=2000)
    onboarding_completed: bool | None = None


class GrantRoleRequest(BaseModel):
    user_id: str
    role: AppRole
