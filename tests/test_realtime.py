# =============================================================================
# tests/test_realtime.py - Progress Reporting Tests
# =============================================================================
# Tests for the WebSocket connection manager, the Redis event publisher, the
# task status endpoint and the voice transcription client.
#
# Run with: pytest tests/test_realtime.py -v
# =============================================================================

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID

import httpx
import pytest
import redis
from fastapi.testclient import TestClient

from app.auth import AuthUser, get_current_user
from app.main import app
from app.websocket.broadcast import WEBSOCKET_CHANNEL, publish_event, publish_generation_failed
from app.websocket.manager import ConnectionManager
from lib.transcription import TranscriptionClientError, transcribe_audio


# =============================================================================
# Connection Manager
# =============================================================================

class TestConnectionManager:
    """Clients are grouped by conversation."""

    def test_broadcast_to_conversation(self):
        # Arrange
        manager = ConnectionManager()
        first, second, other = AsyncMock(), AsyncMock(), AsyncMock()

        async def scenario():
            await manager.connect("conv-1", first)
            await manager.connect("conv-1", second)
            await manager.connect("conv-2", other)
            return await manager.broadcast("conv-1", {"type": "generation_complete"})

        # Act
        sent = asyncio.run(scenario())

        # Assert
        assert sent == 2
        first.send_json.assert_awaited_once_with({"type": "generation_complete"})
        other.send_json.assert_not_awaited()
        assert manager.get_connection_count() == 3

    def test_dead_connections_removed(self):
        manager = ConnectionManager()
        alive, dead = AsyncMock(), AsyncMock()
        dead.send_json.side_effect = RuntimeError("closed")

        async def scenario():
            await manager.connect("conv-1", alive)
            await manager.connect("conv-1", dead)
            return await manager.broadcast("conv-1", {"type": "generation_started"})

        assert asyncio.run(scenario()) == 1
        assert manager.get_connection_count("conv-1") == 1
        assert manager.get_connection_count() == 1

    def test_disconnect_last_client(self):
        manager = ConnectionManager()
        websocket = AsyncMock()

        asyncio.run(manager.connect("conv-1", websocket))
        manager.disconnect("conv-1", websocket)

        assert manager.get_active_conversations() == []
        assert asyncio.run(manager.broadcast("conv-1", {"type": "x"})) == 0


# =============================================================================
# Event Publisher
# =============================================================================

class TestPublishEvent:
    def test_message_shape(self, fake_redis):
        with patch("app.websocket.broadcast.get_redis_client", return_value=fake_redis):
            assert publish_generation_failed("conv-1", "celery-1", "Délai dépassé", "GENERATION_FAILED") is True

        channel, message = fake_redis.published[0]
        assert channel == WEBSOCKET_CHANNEL
        assert json.loads(message) == {
            "conversation_id": "conv-1",
            "type": "generation_failed",
            "task_id": "celery-1",
            "status": "FAILURE",
            "error": "Délai dépassé",
            "code": "GENERATION_FAILED",
        }

    def test_redis_down(self):
        client = MagicMock()
        client.publish.side_effect = redis.ConnectionError("refused")

        with patch("app.websocket.broadcast.get_redis_client", return_value=client):
            assert publish_event("conv-1", "generation_started", {}) is False


# =============================================================================
# Task Status Endpoint
# =============================================================================

class TestTaskStatusRoute:
    """GET /api/v1/tasks/{task_id} over a mocked AsyncResult."""

    @pytest.fixture
    def client(self, user_id):
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=UUID(user_id))
        yield TestClient(app, raise_server_exceptions=False)
        app.dependency_overrides.clear()

    def status(self, client, async_result) -> dict:
        with patch("workers.celery_app.celery_app.AsyncResult", return_value=async_result):
            return client.get("/api/v1/tasks/celery-1").json()

    def test_progress(self, client):
        body = self.status(client, MagicMock(status="PROGRESS", info={"percent": 66, "message": "Génération..."}))

        assert body["progress"] == 66
        assert body["message"] == "Génération..."

    def test_success_with_refusal(self, client):
        result = {"success": False, "error": "Crédits insuffisants", "code": "INSUFFICIENT_CREDITS"}

        body = self.status(client, MagicMock(status="SUCCESS", result=result))

        assert body["error"] == "Crédits insuffisants"
        assert body["message"] == "Failed"
        assert body["progress"] == 100

    def test_cancel_finished_task(self, client):
        async_result = MagicMock(status="SUCCESS")

        with patch("workers.celery_app.celery_app.AsyncResult", return_value=async_result):
            body = client.delete("/api/v1/tasks/celery-1").json()

        assert body["cancelled"] is False
        async_result.revoke.assert_not_called()


# =============================================================================
# Transcription
# =============================================================================

class TestTranscribeAudio:
    """transcribe_audio against a patched httpx.post."""

    def response(self, status_code: int, body: dict | None = None) -> MagicMock:
        response = MagicMock(status_code=status_code, text="")
        response.json.return_value = body or {}
        return response

    def test_output_text(self):
        with patch("lib.transcription.httpx.post", return_value=self.response(200, {"output": {"text": "Bonjour"}})) as mock_post:
            text = transcribe_audio("UklGRg==", api_key="bytez-key", url="https://bytez.test/whisper")

        assert text == "Bonjour"
        assert mock_post.call_args.kwargs["json"] == {"base64": "UklGRg=="}
        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "bytez-key"

    def test_rate_limited(self):
        with patch("lib.transcription.httpx.post", return_value=self.response(429)):
            with pytest.raises(TranscriptionClientError) as exc_info:
                transcribe_audio("UklGRg==", api_key="bytez-key", url="https://bytez.test/whisper")

        assert exc_info.value.code == "RATE_LIMITED"
        assert exc_info.value.status_code == 429

    def test_unreachable(self):
        with patch("lib.transcription.httpx.post", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(TranscriptionClientError) as exc_info:
                transcribe_audio("UklGRg==", api_key="bytez-key", url="https://bytez.test/whisper")

        assert exc_info.value.code == "TRANSCRIPTION_ERROR"

    def test_not_configured(self, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "BYTEZ_API_KEY", None)

        with pytest.raises(TranscriptionClientError) as exc_info:
            transcribe_audio("UklGRg==")

        assert exc_info.value.code == "NOT_CONFIGURED"
