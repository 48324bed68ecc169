# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for real-time poster generation updates.
#
# Connect: ws://host/ws/conversations/{conversation_id}?token={jwt}
#
# Events:
#   - {"type": "generation_started", "task_id": "...", "kie_task_id": "..."}
#   - {"type": "generation_complete", "task_id": "...", "image_url": "...", "image_id": "..."}
#   - {"type": "generation_failed", "task_id": "...", "error": "...", "code": "..."}
# =============================================================================

import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from app.auth.dependencies import decode_token
from app.exceptions import AuthenticationRequiredError
from app.websocket.manager import websocket_manager
from core.services.conversation_store import ConversationStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/conversations/{conversation_id}")
async def conversation_websocket(
    websocket: WebSocket,
    conversation_id: str,
    token: str = Query(..., description="JWT token for authentication")
):
    """
    WebSocket endpoint for poster generation updates.

    Browsers can't set headers on WebSocket connections, so the Supabase
    JWT comes in the `token` query parameter. The user must own the
    conversation.

    Close codes:
        4001 invalid token, 4003 not the owner, 4004 unknown or expired
        conversation, 4000 server error
    """
    # 1. Verify JWT token
    try:
        user = decode_token(token)
    except AuthenticationRequiredError as e:
        logger.warning(f"WebSocket auth failed: {e.message}")
        await websocket.close(code=4001, reason="Invalid token")
        return

    # 2. Verify user owns this conversation
    try:
        conversation = ConversationStore().get(conversation_id)
    except Exception as e:
        logger.error(f"WebSocket: error fetching conversation: {e}")
        await websocket.close(code=4000, reason="Server error")
        return

    if conversation is None:
        logger.warning(f"WebSocket: conversation {conversation_id} not found")
        await websocket.close(code=4004, reason="Conversation not found")
        return

    if conversation.user_id != str(user.id):
        logger.warning(
            f"WebSocket access denied: user {user.id} "
            f"tried to access conversation owned by {conversation.user_id}"
        )
        await websocket.close(code=4003, reason="Access denied")
        return

    # 3. Accept connection and add to manager
    await websocket_manager.connect(conversation_id, websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "conversation_id": conversation_id,
            "step": conversation.state.step.value,
        })

        while True:
            data = await websocket.receive_text()

            # Keepalive
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected from conversation {conversation_id}")
    finally:
        websocket_manager.disconnect(conversation_id, websocket)


@router.get("/ws/status")
async def websocket_status():
    """WebSocket connection statistics."""
    active = websocket_manager.get_active_conversations()
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "conversation_count": len(active),
    }
