# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable clients and helpers:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - ai_gateway.py: OpenAI-compatible client for the AI chat/vision gateway
# - kie_client.py: Kie AI image generation client (create task + poll)
# - moneroo_client.py: Moneroo payment initialization client
# - transcription.py: Bytez Whisper speech-to-text client
# - signatures.py: Webhook HMAC-SHA256 verification
# - domain_detection.py: Keyword heuristics for poster domains
# - utils.py: Shared utilities (error base, dates, JSON fences)
#
# Only the dependency-free modules are re-exported here so that importing
# lib.utils from core.models never drags in the model layer itself.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "normalize_uuid",
]
