# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Conversations, credits, subscriptions, payments, history
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
