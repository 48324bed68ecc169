# =============================================================================
# core/services/profile_service.py - User Profiles
# =============================================================================
# Profiles are created by a database trigger at signup; we only read and
# update them. Updates are limited to the columns of ProfileUpdate.
# =============================================================================

import logging
from uuid import UUID

from core.models.profile import ProfileUpdate, UserProfile
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)


class ProfileService:

    @staticmethod
    def get_profile(user_id: str | UUID) -> UserProfile | None:
        """The user's profile, or None if the signup trigger hasn't run yet."""
        row = SupabaseClient.fetch_profile(user_id)
        return UserProfile.model_validate(row) if row else None

    @staticmethod
    def update_profile(user_id: str | UUID, updates: ProfileUpdate) -> UserProfile | None:
        """
        Apply the fields set in `updates` and refresh updated_at.

        Returns:
            The updated profile (None if the user has no profile row)
        """
        values = updates.model_dump(exclude_unset=True)
        if not values:
            return ProfileService.get_profile(user_id)

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .update({**values, "updated_at": utc_now().isoformat()})
                .eq("user_id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            raise

        logger.info(f"Updated profile of user {user_id_str}: {sorted(values)}")
        rows = response.data or []
        return UserProfile.model_validate(rows[0]) if rows else None
