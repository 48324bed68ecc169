# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: CamelModel (camelCase contract with the web client)
# - generation.py: Poster generation request/result and history rows
# - conversation.py: Poster wizard state, transcript and step requests
# - subscription.py: Plans, subscriptions, credit ledger and checks
# - payment.py: Checkout requests, payment transactions, webhook events
# - template.py: Reference templates
# - analysis.py: AI analysis results (request, image, text extraction)
# - profile.py: User profiles and back-office roles
# - feedback.py: Generation ratings
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import CamelModel

# -----------------------------------------------------------------------------
# Generation Models - Poster generation and history
# -----------------------------------------------------------------------------
from .generation import (
    AspectRatio,
    Domain,
    GeneratedImage,
    GenerateImageRequest,
    GenerateImageResponse,
    GenerationResult,
    OutputFormat,
    Resolution,
    SaveImageRequest,
)

# -----------------------------------------------------------------------------
# Conversation Models - Poster wizard
# -----------------------------------------------------------------------------
from .conversation import (
    ColorsConfirmRequest,
    Conversation,
    ConversationMessage,
    ConversationState,
    ConversationStep,
    DomainSelectRequest,
    FormatRequest,
    GenerationQueuedResponse,
    ImageSubmitRequest,
    MessageRole,
    UserMessageRequest,
)

# -----------------------------------------------------------------------------
# Subscription Models - Plans and credits
# -----------------------------------------------------------------------------
from .subscription import (
    ENTERPRISE_PLAN_SLUG,
    FREE_PLAN_SLUG,
    CreditBalance,
    CreditCheck,
    CreditCheckRequest,
    CreditErrorCode,
    CreditTransaction,
    CreditTransactionType,
    GrantSubscriptionRequest,
    SubscriptionPlan,
    SubscriptionResponse,
    SubscriptionStatus,
    UserSubscription,
)

# -----------------------------------------------------------------------------
# Payment Models - Checkout and webhooks
# -----------------------------------------------------------------------------
from .payment import (
    CreatePaymentRequest,
    CreatePaymentResponse,
    FedaPayCheckoutRequest,
    FedaPayCheckoutResponse,
    PaymentEvent,
    PaymentEventKind,
    PaymentProvider,
    PaymentStatus,
    PaymentTransaction,
    WebhookResponse,
)

# -----------------------------------------------------------------------------
# Template Models - Reference templates
# -----------------------------------------------------------------------------
from .template import (
    AddTemplatesRequest,
    MigratedTemplate,
    MigrateTemplatesRequest,
    MigrationReport,
    RandomTemplateResponse,
    ReferenceTemplate,
    TemplateInput,
    TemplateStats,
    TemplateUploadRequest,
    TemplateUploadResponse,
)

# -----------------------------------------------------------------------------
# Analysis Models - AI helpers
# -----------------------------------------------------------------------------
from .analysis import (
    AnalysisResult,
    AnalyzeRequest,
    AnalyzeResponse,
    ExtractedInfo,
    ExtractTextResponse,
    ImageDataRequest,
    ImageDescriptionResponse,
    TextBlock,
    TranscribeRequest,
    TranscriptionResponse,
)

# -----------------------------------------------------------------------------
# Profile Models - Profiles and roles
# -----------------------------------------------------------------------------
from .profile import (
    ADMIN_ROLES,
    AppRole,
    GrantRoleRequest,
    ProfileUpdate,
    UserProfile,
)

# -----------------------------------------------------------------------------
# Feedback Models - Generation ratings
# -----------------------------------------------------------------------------
from .feedback import (
    Feedback,
    FeedbackCreate,
    FeedbackItem,
    FeedbackOverview,
    FeedbackStats,
)

__all__ = [
    "CamelModel",
    # Generation
    "AspectRatio",
    "Domain",
    "GeneratedImage",
    "GenerateImageRequest",
    "GenerateImageResponse",
    "GenerationResult",
    "OutputFormat",
    "Resolution",
    "SaveImageRequest",
    # Conversation
    "ColorsConfirmRequest",
    "Conversation",
    "ConversationMessage",
    "ConversationState",
    "ConversationStep",
    "DomainSelectRequest",
    "FormatRequest",
    "GenerationQueuedResponse",
    "ImageSubmitRequest",
    "MessageRole",
    "UserMessageRequest",
    # Subscription
    "ENTERPRISE_PLAN_SLUG",
    "FREE_PLAN_SLUG",
    "CreditBalance",
    "CreditCheck",
    "CreditCheckRequest",
    "CreditErrorCode",
    "CreditTransaction",
    "CreditTransactionType",
    "GrantSubscriptionRequest",
    "SubscriptionPlan",
    "SubscriptionResponse",
    "SubscriptionStatus",
    "UserSubscription",
    # Payment
    "CreatePaymentRequest",
    "CreatePaymentResponse",
    "FedaPayCheckoutRequest",
    "FedaPayCheckoutResponse",
    "PaymentEvent",
    "PaymentEventKind",
    "PaymentProvider",
    "PaymentStatus",
    "PaymentTransaction",
    "WebhookResponse",
    # Template
    "AddTemplatesRequest",
    "RandomTemplateResponse",
    "ReferenceTemplate",
    "MigratedTemplate",
    "MigrateTemplatesRequest",
    "MigrationReport",
    "TemplateInput",
    "TemplateStats",
    "TemplateUploadRequest",
    "TemplateUploadResponse",
    # Analysis
    "AnalysisResult",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ExtractedInfo",
    "ExtractTextResponse",
    "ImageDataRequest",
    "ImageDescriptionResponse",
    "TextBlock",
    "TranscribeRequest",
    "TranscriptionResponse",
    # Profile
    "ADMIN_ROLES",
    "AppRole",
    "GrantRoleRequest",
    "ProfileUpdate",
    "UserProfile",
    # Feedback
    "Feedback",
    "FeedbackCreate",
    "FeedbackItem",
    "FeedbackOverview",
    "FeedbackStats",
]
