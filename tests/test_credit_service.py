# =============================================================================
# tests/test_credit_service.py - Credit Rules & Ledger Tests
# =============================================================================
# Covers the pure rules (check_generation, get_balance, costs) and the
# Supabase-backed CreditService (check, ensure_can_generate, debit).
#
# Run with: pytest tests/test_credit_service.py -v
# =============================================================================

import pytest

from app.exceptions import (
    AuthenticationRequiredError,
    FreeLimitReachedError,
    InsufficientCreditsError,
    ResolutionNotAllowedError,
)
from core.models.subscription import CreditErrorCode
from core.services.credit_service import (
    CreditService,
    check_generation,
    get_balance,
    get_credits_needed,
)
from tests.conftest import FREE_PLAN_ID, PRO_PLAN_ID, STARTER_PLAN_ID


FREE_PLAN = {"id": FREE_PLAN_ID, "slug": "free", "max_resolution": "1K"}
STARTER_PLAN = {"id": STARTER_PLAN_ID, "slug": "starter", "max_resolution": "2K"}
PRO_PLAN = {"id": PRO_PLAN_ID, "slug": "pro", "max_resolution": "4K"}


# =============================================================================
# Costs
# =============================================================================

class TestCreditsNeeded:
    """Tests for the resolution price list."""

    @pytest.mark.parametrize("resolution,expected", [("1K", 1), ("2K", 2), ("4K", 4)])
    def test_known_resolutions(self, resolution, expected):
        assert get_credits_needed(resolution) == expected

    def test_unknown_resolution_costs_one(self):
        assert get_credits_needed("8K") == 1


# =============================================================================
# Free Tier Rules
# =============================================================================

class TestFreeTier:
    """Users without a subscription or on the free plan."""

    def test_no_subscription_allows_1k(self):
        check = check_generation(None, None, "1K", free_limit=5)

        assert check.allowed is True
        assert check.remaining == 5
        assert check.needed == 1
        assert check.is_free is True

    def test_higher_resolution_refused_on_free_plan(self):
        subscription = {"free_generations_used": 2}

        check = check_generation(subscription, FREE_PLAN, "2K", free_limit=5)

        assert check.allowed is False
        assert check.error == CreditErrorCode.RESOLUTION_NOT_ALLOWED
        assert check.message == "La résolution 2K n'est pas disponible avec le plan gratuit"
        assert check.remaining == 3
        assert check.needed == 2

    def test_resolution_checked_before_limit(self):
        """A user who used everything and asks for 4K hears about the resolution."""
        subscription = {"free_generations_used": 5}

        check = check_generation(subscription, FREE_PLAN, "4K", free_limit=5)

        assert check.error == CreditErrorCode.RESOLUTION_NOT_ALLOWED
        assert check.remaining == 0

    def test_limit_reached(self):
        subscription = {"free_generations_used": 5}

        check = check_generation(subscription, FREE_PLAN, "1K", free_limit=5)

        assert check.allowed is False
        assert check.error == CreditErrorCode.FREE_LIMIT_REACHED
        assert check.message == "Vous avez utilisé vos 5 générations gratuites"
        assert check.remaining == 0

    def test_last_free_generation_allowed(self):
        subscription = {"free_generations_used": 4}

        check = check_generation(subscription, FREE_PLAN, "1K", free_limit=5)

        assert check.allowed is True
        assert check.remaining == 1

    def test_subscription_without_plan_is_free_tier(self):
        check = check_generation({"free_generations_used": None}, None, "1K", free_limit=5)

        assert check.allowed is True
        assert check.is_free is True


# =============================================================================
# Paid Tier Rules
# =============================================================================

class TestPaidTier:
    """Users on a paid plan spend credits_remaining."""

    def test_enough_credits(self):
        check = check_generation({"credits_remaining": 10}, PRO_PLAN, "4K", free_limit=5)

        assert check.allowed is True
        assert check.needed == 4
        assert check.remaining == 10
        assert check.is_free is False

    def test_insufficient_credits(self):
        check = check_generation({"credits_remaining": 1}, STARTER_PLAN, "2K", free_limit=5)

        assert check.allowed is False
        assert check.error == CreditErrorCode.INSUFFICIENT_CREDITS
        assert check.message == "Crédits insuffisants: 2 requis, 1 disponibles"
        assert check.remaining == 1

    def test_resolution_above_plan_maximum(self):
        check = check_generation({"credits_remaining": 50}, STARTER_PLAN, "4K", free_limit=5)

        assert check.allowed is False
        assert check.error == CreditErrorCode.RESOLUTION_NOT_ALLOWED
        assert check.message == "La résolution 4K n'est pas disponible avec votre plan"

    def test_exact_credits_allowed(self):
        check = check_generation({"credits_remaining": 2}, STARTER_PLAN, "2K", free_limit=5)

        assert check.allowed is True


# =============================================================================
# Balance
# =============================================================================

class TestBalance:
    """Tests for get_balance."""

    def test_no_subscription(self):
        balance = get_balance(None, None, free_limit=5)

        assert balance.credits == 0
        assert balance.free_remaining == 5
        assert balance.is_free is True

    def test_free_plan_counts_down(self):
        balance = get_balance({"free_generations_used": 7}, FREE_PLAN, free_limit=5)

        assert balance.free_remaining == 0

    def test_paid_plan_has_no_free_generations(self):
        balance = get_balance(
            {"credits_remaining": 12, "free_generations_used": 1}, PRO_PLAN, free_limit=5
        )

        assert balance.credits == 12
        assert balance.free_remaining == 0
        assert balance.is_free is False


# =============================================================================
# CreditService (Supabase-backed)
# =============================================================================

class TestCreditServiceCheck:
    """CreditService.check / ensure_can_generate read the latest subscription."""

    def test_anonymous_caller_refused(self, fake_db):
        check = CreditService.check(None, "1K")

        assert check.allowed is False
        assert check.error == CreditErrorCode.AUTHENTICATION_REQUIRED

    def test_anonymous_caller_raises(self, fake_db):
        with pytest.raises(AuthenticationRequiredError):
            CreditService.ensure_can_generate(None, "1K")

    def test_new_user_allowed(self, fake_db, user_id):
        check = CreditService.ensure_can_generate(user_id, "1K")

        assert check.allowed is True
        assert check.remaining == 5

    def test_latest_subscription_wins(self, fake_db, make_subscription, user_id):
        # Arrange: an old free row, then a newer paid row
        make_subscription(user_id, FREE_PLAN_ID, free_generations_used=5)
        make_subscription(user_id, PRO_PLAN_ID, credits_remaining=20)

        # Act
        check = CreditService.check(user_id, "4K")

        # Assert
        assert check.allowed is True
        assert check.is_free is False

    def test_free_limit_raises_402(self, fake_db, make_subscription, user_id):
        make_subscription(user_id, FREE_PLAN_ID, free_generations_used=5)

        with pytest.raises(FreeLimitReachedError) as exc_info:
            CreditService.ensure_can_generate(user_id, "1K")

        assert exc_info.value.status_code == 402

    def test_resolution_raises_403(self, fake_db, make_subscription, user_id):
        make_subscription(user_id, FREE_PLAN_ID)

        with pytest.raises(ResolutionNotAllowedError) as exc_info:
            CreditService.ensure_can_generate(user_id, "2K")

        assert exc_info.value.status_code == 403

    def test_insufficient_credits_raises_402(self, fake_db, make_subscription, user_id):
        make_subscription(user_id, STARTER_PLAN_ID, credits_remaining=1)

        with pytest.raises(InsufficientCreditsError) as exc_info:
            CreditService.ensure_can_generate(user_id, "2K")

        assert exc_info.value.status_code == 402


class TestCreditServiceDebit:
    """CreditService.debit updates the subscription and writes the ledger."""

    def test_first_free_generation_creates_subscription(self, fake_db, user_id):
        # Act
        row = CreditService.debit(user_id, "1K", image_id="img-1")

        # Assert
        assert row["free_generations_used"] == 1
        assert row["plan_id"] == FREE_PLAN_ID
        assert row["status"] == "active"
        assert row["credits_remaining"] == 0

        transactions = fake_db.rows("credit_transactions")
        assert len(transactions) == 1
        assert transactions[0]["amount"] == -1
        assert transactions[0]["type"] == "free_generation"
        assert transactions[0]["related_image_id"] == "img-1"
        assert transactions[0]["description"] == "Génération gratuite 1K"

    def test_free_generation_increments_counter(self, fake_db, make_subscription, user_id):
        existing = make_subscription(user_id, FREE_PLAN_ID, free_generations_used=2)

        CreditService.debit(user_id, "1K")

        rows = fake_db.rows("user_subscriptions")
        assert len(rows) == 1
        assert rows[0]["id"] == existing["id"]
        assert rows[0]["free_generations_used"] == 3

    def test_paid_generation_spends_credits(self, fake_db, make_subscription, user_id):
        make_subscription(user_id, STARTER_PLAN_ID, credits_remaining=10)

        row = CreditService.debit(user_id, "2K")

        assert row["credits_remaining"] == 8
        transaction = fake_db.rows("credit_transactions")[0]
        assert transaction["amount"] == -2
        assert transaction["type"] == "generation"
        assert transaction["resolution_used"] == "2K"
        assert transaction["description"] == "Génération 2K"

    def test_credits_never_negative(self, fake_db, make_subscription, user_id):
        make_subscription(user_id, PRO_PLAN_ID, credits_remaining=1)

        row = CreditService.debit(user_id, "4K")

        assert row["credits_remaining"] == 0
