# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - generation.py: Direct poster generation
# - conversations.py: Poster wizard
# - analysis.py: Request / image analysis, text extraction, transcription
# - tasks.py: Background generation status
# - subscriptions.py: Plans, subscription and credits
# - payments.py: Moneroo and FedaPay checkouts
# - webhooks.py: Payment provider webhooks
# - templates.py: Reference templates
# - history.py: Generated poster history
# - profile.py: User profile
# - admin.py: Role and subscription management
# - feedback.py: Generation ratings
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import admin
from . import analysis
from . import conversations
from . import feedback
from . import generation
from . import health
from . import history
from . import payments
from . import profile
from . import subscriptions
from . import tasks
from . import templates
from . import webhooks

__all__ = [
    "admin",
    "analysis",
    "conversations",
    "feedback",
    "generation",
    "health",
    "history",
    "payments",
    "profile",
    "subscriptions",
    "tasks",
    "templates",
    "webhooks",
]
