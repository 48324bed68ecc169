# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .credit_service import CreditService, CREDIT_COSTS, check_generation, get_balance, get_credits_needed
from .subscription_service import SubscriptionService
from .payment_service import PaymentService
from .webhook_service import WebhookService
from .template_service import TemplateService
from .storage_service import StorageService
from .feedback_service import FeedbackService
from .history_service import HistoryService
from .profile_service import ProfileService
from .role_service import RoleService
from .generation_service import GenerationService
from .conversation_service import ConversationService, build_generation_prompt, build_generation_request
from .conversation_store import ConversationStore

__all__ = [
    "CreditService",
    "CREDIT_COSTS",
    "check_generation",
    "get_balance",
    "get_credits_needed",
    "SubscriptionService",
    "PaymentService",
    "WebhookService",
    "TemplateService",
    "StorageService",
    "FeedbackService",
    "HistoryService",
    "ProfileService",
    "RoleService",
    "GenerationService",
    "ConversationService",
    "build_generation_prompt",
    "build_generation_request",
    "ConversationStore",
]
