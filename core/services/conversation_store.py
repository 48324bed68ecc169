# =============================================================================
# core/services/conversation_store.py - Conversation Persistence
# =============================================================================
# Conversations are short-lived wizard sessions: they are stored as JSON in
# Redis under `graphiste:conversation:<id>` and expire after
# CONVERSATION_TTL_SECONDS of inactivity (each save refreshes the TTL).
#
# Ownership is checked on every load; a conversation of another user is
# reported as not found.
#
# Usage:
#   store = ConversationStore()
#   store.save(conversation)
#   conversation = store.load(conversation_id, user_id)
# =============================================================================

import logging
from uuid import UUID

import redis
from pydantic import ValidationError

from app.config import settings
from app.exceptions import ConversationNotFoundError
from core.models.conversation import Conversation
from lib.utils import normalize_uuid, utc_now

logger = logging.getLogger(__name__)

KEY_PREFIX = "graphiste:conversation:"


def get_redis_client() -> redis.Redis:
    """Get a Redis client for conversation storage."""
    return redis.from_url(settings.REDIS_URL, decode_responses=True)


class ConversationStore:
    """Redis-backed conversation storage."""

    def __init__(self, client: redis.Redis | None = None, ttl_seconds: int | None = None):
        self.client = client or get_redis_client()
        self.ttl_seconds = ttl_seconds or settings.CONVERSATION_TTL_SECONDS

    @staticmethod
    def key(conversation_id: str) -> str:
        return f"{KEY_PREFIX}{conversation_id}"

    def save(self, conversation: Conversation) -> Conversation:
        """Write the conversation and refresh its TTL."""
        conversation.updated_at = utc_now()
        self.client.set(
            self.key(conversation.id),
            conversation.model_dump_json(),
            ex=self.ttl_seconds,
        )
        logger.debug(f"Saved conversation {conversation.id} at step {conversation.state.step.value}")
        return conversation

    def get(self, conversation_id: str) -> Conversation | None:
        """Load a conversation without ownership check (worker side)."""
        raw = self.client.get(self.key(conversation_id))
        if raw is None:
            return None
        try:
            return Conversation.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Corrupted conversation {conversation_id}: {e}")
            return None

    def load(self, conversation_id: str, user_id: str | UUID) -> Conversation:
        """
        Load a conversation owned by `user_id`.

        Raises:
            ConversationNotFoundError: Missing, expired or owned by someone else
        """
        conversation = self.get(conversation_id)
        if conversation is None or conversation.user_id != normalize_uuid(user_id):
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def delete(self, conversation_id: str) -> bool:
        return bool(self.client.delete(self.key(conversation_id)))
