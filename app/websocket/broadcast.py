# =============================================================================
# app/websocket/broadcast.py - Cross-Process Broadcasting
# =============================================================================
# Provides utilities for Celery workers to publish events that get broadcast
# to WebSocket clients.
#
# Uses Redis pub/sub for cross-process communication:
# - Workers call publish_event() to send events
# - FastAPI subscribes and broadcasts to WebSocket clients
#
# Events:
#   - generation_started: Kie task created, polling in progress
#   - generation_complete: Poster ready (image_url, image_id)
#   - generation_failed: Generation or credit check failed (error)
# =============================================================================

import json
import logging
from typing import Any

import redis

from app.config import settings

logger = logging.getLogger(__name__)

# Redis channel for WebSocket events
WEBSOCKET_CHANNEL = "graphiste:websocket:events"


def get_redis_client() -> redis.Redis:
    """Get a Redis client for pub/sub operations."""
    return redis.from_url(settings.REDIS_URL)


def publish_event(conversation_id: str, event_type: str, data: dict[str, Any]) -> bool:
    """
    Publish an event that will be broadcast to WebSocket clients.

    Args:
        conversation_id: The conversation to broadcast to
        event_type: generation_started, generation_complete or generation_failed
        data: Event data to include

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()

        message = json.dumps({
            "conversation_id": conversation_id,
            "type": event_type,
            **data
        })

        client.publish(WEBSOCKET_CHANNEL, message)

        logger.debug(f"Published {event_type} event for conversation {conversation_id}")
        return True

    except redis.RedisError as e:
        logger.error(f"Failed to publish event: {e}")
        return False


def publish_generation_started(conversation_id: str, task_id: str, kie_task_id: str) -> bool:
    return publish_event(
        conversation_id=conversation_id,
        event_type="generation_started",
        data={
            "task_id": task_id,
            "kie_task_id": kie_task_id,
        }
    )


def publish_generation_complete(
    conversation_id: str,
    task_id: str,
    image_url: str,
    image_id: str | None,
) -> bool:
    return publish_event(
        conversation_id=conversation_id,
        event_type="generation_complete",
        data={
            "task_id": task_id,
            "status": "SUCCESS",
            "image_url": image_url,
            "image_id": image_id,
        }
    )


def publish_generation_failed(
    conversation_id: str,
    task_id: str,
    error: str,
    code: str | None = None,
) -> bool:
    return publish_event(
        conversation_id=conversation_id,
        event_type="generation_failed",
        data={
            "task_id": task_id,
            "status": "FAILURE",
            "error": error,
            "code": code,
        }
    )
