# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for the lookups shared by several services:
# - Subscription plans (by slug or id)
# - The latest subscription row of a user
# - User profiles
# - Payment transactions (fetch + status updates)
#
# Single-row lookups use limit(1) and return None when nothing matches.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   plan = SupabaseClient.fetch_plan_by_slug("pro")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import utc_now

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        plan = SupabaseClient.fetch_plan_by_slug("pro")
        subscription = SupabaseClient.fetch_latest_subscription(user_id)
        credits = subscription["credits_remaining"] if subscription else 0
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Every service therefore scopes its queries by user_id itself.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @classmethod
    def _first(cls, response: Any) -> dict[str, Any] | None:
        """Return the first row of a query response, or None."""
        rows = getattr(response, "data", None) or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Subscription Plans
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_plan_by_slug(
        cls,
        slug: str,
        active_only: bool = True,
    ) -> dict[str, Any] | None:
        """
        Fetch a subscription plan by its slug.

        Args:
            slug: Plan slug ("free", "starter", "pro", "enterprise", ...)
            active_only: Ignore plans with is_active = false

        Returns:
            Plan dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = client.table("subscription_plans").select("*").eq("slug", slug)
            if active_only:
                query = query.eq("is_active", True)
            return cls._first(query.limit(1).execute())

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch plan: {e}",
                code="FETCH_PLAN_FAILED",
                suggestion="Check that the subscription_plans table is accessible",
                details={"slug": slug}
            )

    @classmethod
    def fetch_plan(cls, plan_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a subscription plan by id.

        Args:
            plan_id: The plan UUID

        Returns:
            Plan dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        plan_id_str = cls._normalize_uuid(plan_id)

        try:
            response = (
                client.table("subscription_plans")
                .select("*")
                .eq("id", plan_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch plan: {e}",
                code="FETCH_PLAN_FAILED",
                details={"plan_id": plan_id_str}
            )

    # -------------------------------------------------------------------------
    # User Subscriptions
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_latest_subscription(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the most recent subscription row of a user.

        A user may accumulate several rows over time; the newest one
        (by created_at) is the one that counts.

        Args:
            user_id: The user UUID

        Returns:
            Subscription dict, or None if the user never had one

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("user_subscriptions")
                .select("*")
                .eq("user_id", user_id_str)
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch subscription: {e}",
                code="FETCH_SUBSCRIPTION_FAILED",
                suggestion="Check that the user_subscriptions table is accessible",
                details={"user_id": user_id_str}
            )

    @classmethod
    def save_subscription(
        cls,
        user_id: str | UUID,
        values: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Update the user's latest subscription row, or insert one.

        Args:
            user_id: The user UUID
            values: Columns to write (plan_id, status, credits_remaining, ...)

        Returns:
            The written subscription row

        Raises:
            SupabaseClientError: If the write fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)
        existing = cls.fetch_latest_subscription(user_id_str)

        try:
            if existing:
                response = (
                    client.table("user_subscriptions")
                    .update({**values, "updated_at": utc_now().isoformat()})
                    .eq("id", existing["id"])
                    .execute()
                )
                row = cls._first(response) or {**existing, **values}
                logger.info(f"Updated subscription {existing['id']} for user {user_id_str}")
            else:
                response = (
                    client.table("user_subscriptions")
                    .insert({"user_id": user_id_str, **values})
                    .execute()
                )
                row = cls._first(response)
                if row is None:
                    raise SupabaseClientError(
                        message="Insert returned no data",
                        code="INSERT_NO_DATA"
                    )
                logger.info(f"Created subscription for user {user_id_str}")
            return row

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save subscription: {e}",
                code="SAVE_SUBSCRIPTION_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the profile row of a user.

        Args:
            user_id: The auth user UUID (profiles.user_id)

        Returns:
            Profile dict, or None if the profile trigger hasn't run yet

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Payment Transactions
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_payment_transaction(cls, transaction_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a payment transaction by id.

        Returns:
            Transaction dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        transaction_id_str = cls._normalize_uuid(transaction_id)

        try:
            response = (
                client.table("payment_transactions")
                .select("*")
                .eq("id", transaction_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch payment transaction: {e}",
                code="FETCH_TRANSACTION_FAILED",
                details={"transaction_id": transaction_id_str}
            )

    @classmethod
    def update_payment_transaction(
        cls,
        transaction_id: str | UUID,
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a payment transaction and refresh its updated_at.

        Args:
            transaction_id: The transaction UUID
            updates: Columns to change (status, payment_method, metadata, ...)

        Returns:
            The updated row, or None if no row matched

        Raises:
            SupabaseClientError: If the update fails
        """
        client = cls.get_client()
        transaction_id_str = cls._normalize_uuid(transaction_id)

        try:
            response = (
                client.table("payment_transactions")
                .update({**updates, "updated_at": utc_now().isoformat()})
                .eq("id", transaction_id_str)
                .execute()
            )
            logger.debug(f"Updated payment transaction {transaction_id_str}: {list(updates)}")
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update payment transaction: {e}",
                code="UPDATE_TRANSACTION_FAILED",
                details={"transaction_id": transaction_id_str}
            )

    # -------------------------------------------------------------------------
    # Generic Insert
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it with its generated id.

        Args:
            table: Table name
            data: Column values

        Returns:
            Inserted row dict

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
            row = cls._first(response)
            if row is None:
                raise SupabaseClientError(
                    message="Insert returned no data",
                    code="INSERT_NO_DATA",
                    details={"table": table}
                )
            return row

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )
