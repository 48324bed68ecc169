# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends() and replaced with
# fakes in tests via app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from agents.image_analyst import ImageAnalystAgent
from agents.request_analyst import RequestAnalystAgent
from agents.text_extractor import TextExtractorAgent
from core.services.conversation_service import ConversationService
from core.services.conversation_store import ConversationStore
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


def get_conversation_store() -> ConversationStore:
    """Redis-backed conversation store."""
    return ConversationStore()


def get_conversation_service() -> ConversationService:
    """Conversation wizard with the default AI agents."""
    return ConversationService()


def get_request_analyst() -> RequestAnalystAgent:
    return RequestAnalystAgent()


def get_image_analyst() -> ImageAnalystAgent:
    return ImageAnalystAgent()


def get_text_extractor() -> TextExtractorAgent:
    return TextExtractorAgent()


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
ConversationStoreDep = Annotated[ConversationStore, Depends(get_conversation_store)]
ConversationServiceDep = Annotated[ConversationService, Depends(get_conversation_service)]
RequestAnalystDep = Annotated[RequestAnalystAgent, Depends(get_request_analyst)]
ImageAnalystDep = Annotated[ImageAnalystAgent, Depends(get_image_analyst)]
TextExtractorDep = Annotated[TextExtractorAgent, Depends(get_text_extractor)]
