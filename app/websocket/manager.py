# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Manages WebSocket connections per conversation and handles broadcasting.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   # Connect a client
#   await websocket_manager.connect(conversation_id, websocket)
#
#   # Broadcast to all clients watching a conversation
#   await websocket_manager.broadcast(conversation_id, {"type": "generation_complete", ...})
#
#   # Disconnect a client
#   websocket_manager.disconnect(conversation_id, websocket)
# =============================================================================

import logging
from typing import Dict, Set
from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by conversation ID.

    A conversation can have several clients (e.g. two browser tabs); poster
    events are sent to all of them.
    """

    def __init__(self):
        # conversation_id -> set of WebSocket connections
        self.connections: Dict[str, Set[WebSocket]] = {}
        self._total_connections = 0

    async def connect(self, conversation_id: str, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection and track it."""
        await websocket.accept()

        if conversation_id not in self.connections:
            self.connections[conversation_id] = set()

        self.connections[conversation_id].add(websocket)
        self._total_connections += 1

        logger.info(
            f"WebSocket connected to conversation {conversation_id}. "
            f"Total connections: {self._total_connections}"
        )

    def disconnect(self, conversation_id: str, websocket: WebSocket) -> None:
        """Remove a WebSocket connection from tracking."""
        connections = self.connections.get(conversation_id)
        if connections and websocket in connections:
            connections.discard(websocket)
            self._total_connections -= 1

            if not connections:
                del self.connections[conversation_id]

        logger.info(
            f"WebSocket disconnected from conversation {conversation_id}. "
            f"Total connections: {self._total_connections}"
        )

    async def broadcast(self, conversation_id: str, message: dict) -> int:
        """
        Send a message to all connections watching a conversation.

        Returns:
            int: Number of clients the message was sent to
        """
        if conversation_id not in self.connections:
            logger.debug(f"No connections for conversation {conversation_id}, skipping broadcast")
            return 0

        dead_connections: Set[WebSocket] = set()
        sent_count = 0

        for websocket in list(self.connections[conversation_id]):
            try:
                await websocket.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                dead_connections.add(websocket)

        for ws in dead_connections:
            self.connections[conversation_id].discard(ws)
            self._total_connections -= 1

        if dead_connections:
            logger.info(f"Cleaned up {len(dead_connections)} dead connections")

        if conversation_id in self.connections and not self.connections[conversation_id]:
            del self.connections[conversation_id]

        logger.debug(
            f"Broadcast to conversation {conversation_id}: "
            f"type={message.get('type')}, sent to {sent_count} clients"
        )

        return sent_count

    def get_connection_count(self, conversation_id: str | None = None) -> int:
        """Connections for one conversation, or in total."""
        if conversation_id:
            return len(self.connections.get(conversation_id, set()))
        return self._total_connections

    def get_active_conversations(self) -> list[str]:
        return list(self.connections.keys())


# Global singleton instance
websocket_manager = ConnectionManager()
