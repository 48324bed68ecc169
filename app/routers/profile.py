# =============================================================================
# app/routers/profile.py - User Profile
# =============================================================================
# Company details, default palette and logo reused across posters, plus the
# onboarding questionnaire answers.
# =============================================================================

from typing import Optional

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.profile import ProfileUpdate, UserProfile
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=Optional[UserProfile])
async def get_profile(user: AuthUser = Depends(get_current_user)):
    """The caller's profile (null until the signup trigger created it)."""
    return ProfileService.get_profile(user.id)


@router.patch("", response_model=Optional[UserProfile])
async def update_profile(
    updates: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Update only the fields present in the body."""
    return ProfileService.update_profile(user.id, updates)
