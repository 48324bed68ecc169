# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Real-time poster generation updates.
#
# Usage:
#   # Broadcast to all connections of a conversation (from FastAPI)
#   from app.websocket import websocket_manager
#
#   await websocket_manager.broadcast(conversation_id, {
#       "type": "generation_complete",
#       "image_url": "..."
#   })
#
#   # Publish events from Celery workers
#   from app.websocket.broadcast import publish_generation_complete
#
#   publish_generation_complete(conversation_id, task_id, image_url, image_id)
# =============================================================================

from app.websocket.manager import websocket_manager
from app.websocket.broadcast import (
    publish_event,
    publish_generation_started,
    publish_generation_complete,
    publish_generation_failed,
    WEBSOCKET_CHANNEL,
)

__all__ = [
    "websocket_manager",
    "publish_event",
    "publish_generation_started",
    "publish_generation_complete",
    "publish_generation_failed",
    "WEBSOCKET_CHANNEL",
]
