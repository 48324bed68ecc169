# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# Exercises the FastAPI routes with TestClient. The client is not entered as
# a context manager so the lifespan (Redis pub/sub listener) never starts.
# Authentication, the conversation store and the AI agents are overridden
# through app.dependency_overrides.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import json
from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.config import settings
from app.dependencies import get_conversation_service, get_conversation_store
from app.main import app
from core.models.analysis import AnalysisResult, AnalyzeResponse
from core.models.conversation import Conversation, ConversationState, ConversationStep
from core.services.conversation_service import ConversationService
from core.services.conversation_store import ConversationStore
from tests.conftest import PRO_PLAN_ID, STARTER_PLAN_ID


API = "/api/v1"


@pytest.fixture
def client():
    app.dependency_overrides.clear()
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def store(fake_redis) -> ConversationStore:
    return ConversationStore(client=fake_redis)


@pytest.fixture
def service() -> ConversationService:
    request_analyst = MagicMock()
    request_analyst.analyze.return_value = AnalyzeResponse(
        analysis=AnalysisResult(
            suggested_domain="church",
            extracted_info={"title": "Veillée de prière"},
            summary="Veillée de prière",
        )
    )
    image_analyst = MagicMock()
    image_analyst.describe.return_value = "Fond bleu nuit, typographie dorée"
    return ConversationService(request_analyst=request_analyst, image_analyst=image_analyst)


@pytest.fixture
def auth_client(client, fake_db, store, service, user_id):
    """Client authenticated as `user_id` with in-memory storage."""
    user = AuthUser(id=UUID(user_id), email="awa@example.com")
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_current_user_optional] = lambda: user
    app.dependency_overrides[get_conversation_store] = lambda: store
    app.dependency_overrides[get_conversation_service] = lambda: service
    return client


def saved_conversation(store: ConversationStore, user_id: str, step: ConversationStep, **values) -> Conversation:
    conversation = Conversation(
        user_id=user_id,
        state=ConversationState(step=step, description="Veillée de prière"),
        **values,
    )
    return store.save(conversation)


# =============================================================================
# Health & Auth
# =============================================================================

class TestHealth:
    def test_liveness(self, client):
        response = client.get(f"{API}/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_ready_when_a_worker_answers(self, client, fake_db):
        with patch("workers.celery_app.ping_workers", return_value=1):
            response = client.get(f"{API}/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["checks"] == {
            "database": "healthy",
            "storage": "healthy",
            "workers": "healthy",
        }

    def test_degraded_without_workers(self, client, fake_db):
        with patch("workers.celery_app.ping_workers", return_value=0):
            response = client.get(f"{API}/health/ready")

        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["workers"] == "unhealthy: no worker answered"
        assert response.json()["checks"]["database"] == "healthy"

    def test_degraded_when_broker_unreachable(self, client, fake_db):
        with patch("workers.celery_app.ping_workers", side_effect=ConnectionError("Redis down")):
            response = client.get(f"{API}/health/ready")

        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["workers"] == "unhealthy: Redis down"


class TestAuthentication:
    """Protected routes without a bearer token."""

    def test_missing_token(self, client, fake_db):
        response = client.get(f"{API}/subscription")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "AUTHENTICATION_REQUIRED"
        assert body["message"] == "Authentification requise"

    def test_invalid_token(self, client, fake_db):
        response = client.post(f"{API}/conversations", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_anonymous_credit_check(self, client, fake_db):
        response = client.post(f"{API}/subscription/check", json={"resolution": "1K"})

        assert response.status_code == 200
        assert response.json()["allowed"] is False
        assert response.json()["error"] == "AUTHENTICATION_REQUIRED"


# =============================================================================
# Conversations
# =============================================================================

class TestConversationRoutes:
    """Wizard endpoints."""

    def test_start_and_describe(self, auth_client, store, user_id):
        # Act
        started = auth_client.post(f"{API}/conversations")
        conversation_id = started.json()["id"]
        answered = auth_client.post(
            f"{API}/conversations/{conversation_id}/messages",
            json={"content": "Veillée de prière vendredi"},
        )

        # Assert
        assert started.status_code == 200
        assert started.json()["state"]["step"] == "greeting"
        assert answered.status_code == 200
        assert answered.json()["state"]["step"] == "domain"
        assert answered.json()["state"]["suggested_domain"] == "church"
        assert store.get(conversation_id).state.step == ConversationStep.DOMAIN

    def test_wrong_step_is_conflict(self, auth_client, store, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.GREETING)

        response = auth_client.post(f"{API}/conversations/{conversation.id}/colors", json={"colors": ["#000000"]})

        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_STEP"

    def test_other_users_conversation(self, auth_client, store, other_user_id):
        conversation = saved_conversation(store, other_user_id, ConversationStep.GREETING)

        response = auth_client.get(f"{API}/conversations/{conversation.id}")

        assert response.status_code == 404
        assert response.json()["error"] == "CONVERSATION_NOT_FOUND"

    def test_empty_message_is_validation_error(self, auth_client, store, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.GREETING)

        response = auth_client.post(f"{API}/conversations/{conversation.id}/messages", json={"content": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "content"

    def test_delete(self, auth_client, store, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.DETAILS)

        response = auth_client.delete(f"{API}/conversations/{conversation.id}")

        assert response.json() == {"success": True, "conversation_id": conversation.id}
        assert store.get(conversation.id) is None


class TestGenerateRoute:
    """POST /conversations/{id}/generate."""

    @pytest.fixture
    def task(self):
        """Stands in for workers.tasks.generate_poster."""
        task = MagicMock()
        with patch("workers.tasks.generate_poster", task):
            yield task

    def test_enqueues_task(self, auth_client, store, task, user_id):
        # Arrange
        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING)
        conversation.state.color_palette = ["#1E3A8A"]
        store.save(conversation)

        # Act
        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        # Assert
        assert response.status_code == 200
        task_id = response.json()["task_id"]
        assert response.json()["status"] == "PENDING"

        kwargs = task.apply_async.call_args.kwargs
        assert kwargs["task_id"] == task_id
        assert kwargs["args"][0] == user_id
        assert kwargs["args"][1]["resolution"] == "1K"
        assert kwargs["kwargs"] == {"conversation_id": conversation.id, "color_palette": ["#1E3A8A"]}
        assert store.get(conversation.id).generation_task_id == task_id

    def test_task_id_saved_before_enqueue(self, auth_client, store, task, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING)
        seen = []
        task.apply_async.side_effect = lambda **kwargs: seen.append(store.get(conversation.id).generation_task_id)

        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        assert seen == [response.json()["task_id"]]

    def test_worker_failure_before_response_allows_retry(self, auth_client, fake_redis, store, task, user_id):
        # Arrange: the worker fails before the route returns
        from workers.tasks import _finish_conversation

        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING)

        def fail_immediately(args, kwargs, task_id):
            with patch("core.services.conversation_store.get_redis_client", return_value=fake_redis):
                _finish_conversation(kwargs["conversation_id"], error="Clé API invalide")

        task.apply_async.side_effect = fail_immediately

        # Act
        first = auth_client.post(f"{API}/conversations/{conversation.id}/generate")
        stored = store.get(conversation.id)
        task.apply_async.side_effect = None
        retry = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        # Assert
        assert first.status_code == 200
        assert stored.state.step == ConversationStep.GENERATING
        assert stored.generation_task_id is None
        assert stored.last_error == "Clé API invalide"

        assert retry.status_code == 200
        assert retry.json()["task_id"] != first.json()["task_id"]
        assert task.apply_async.call_count == 2

    def test_queue_down_releases_conversation(self, auth_client, store, task, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING)
        task.apply_async.side_effect = ConnectionError("redis down")

        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        assert response.status_code == 503
        assert response.json()["error"] == "QUEUE_UNAVAILABLE"
        assert store.get(conversation.id).generation_task_id is None

    def test_already_queued_returns_same_task(self, auth_client, store, task, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING, generation_task_id="celery-1")

        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        assert response.json()["task_id"] == "celery-1"
        task.apply_async.assert_not_called()

    def test_credits_refused_before_enqueue(self, auth_client, store, task, make_subscription, user_id):
        make_subscription(user_id, STARTER_PLAN_ID, credits_remaining=0)
        conversation = saved_conversation(store, user_id, ConversationStep.GENERATING)

        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        assert response.status_code == 402
        body = response.json()
        assert body["error"] == "INSUFFICIENT_CREDITS"
        assert body["remaining"] == 0
        assert body["needed"] == 1
        assert body["is_free"] is False
        task.apply_async.assert_not_called()
        assert store.get(conversation.id).generation_task_id is None

    def test_not_ready(self, auth_client, store, user_id):
        conversation = saved_conversation(store, user_id, ConversationStep.COLORS)

        response = auth_client.post(f"{API}/conversations/{conversation.id}/generate")

        assert response.status_code == 409


# =============================================================================
# Subscriptions, Payments & Webhooks
# =============================================================================

class TestSubscriptionRoutes:
    def test_public_plans(self, client, fake_db):
        response = client.get(f"{API}/plans")

        assert response.status_code == 200
        assert [plan["slug"] for plan in response.json()] == ["free", "starter", "pro", "enterprise"]

    def test_new_user_subscription(self, auth_client):
        body = auth_client.get(f"{API}/subscription").json()

        assert body["subscription"] is None
        assert body["balance"]["free_remaining"] == settings.FREE_GENERATION_LIMIT

    def test_resolution_not_allowed(self, auth_client, make_subscription, user_id):
        make_subscription(user_id, STARTER_PLAN_ID, credits_remaining=30)

        body = auth_client.post(f"{API}/subscription/check", json={"resolution": "4K"}).json()

        assert body["allowed"] is False
        assert body["error"] == "RESOLUTION_NOT_ALLOWED"


class TestPaymentRoutes:
    def test_free_plan_not_purchasable(self, auth_client, monkeypatch):
        monkeypatch.setattr(settings, "MONEROO_SECRET_KEY", "mon_sk_test")

        response = auth_client.post(f"{API}/payments/moneroo", json={"planSlug": "free"})

        assert response.status_code == 400
        assert response.json()["error"] == "PLAN_NOT_PURCHASABLE"

    def test_moneroo_not_configured(self, auth_client, monkeypatch):
        monkeypatch.setattr(settings, "MONEROO_SECRET_KEY", None)

        response = auth_client.post(f"{API}/payments/moneroo", json={"planSlug": "pro"})

        assert response.status_code == 503


class TestWebhookRoutes:
    """Provider webhooks are public and signed."""

    def payload(self, user_id: str) -> bytes:
        return json.dumps({
            "event": "payment.success",
            "data": {
                "id": "py_1",
                "metadata": {"user_id": user_id, "plan_id": PRO_PLAN_ID, "transaction_id": "tx-1"},
            },
        }).encode()

    def test_moneroo_activation(self, client, fake_db, monkeypatch, user_id):
        monkeypatch.setattr(settings, "MONEROO_WEBHOOK_SECRET", None)
        fake_db.tables["payment_transactions"] = [{"id": "tx-1", "user_id": user_id, "status": "pending"}]

        response = client.post(f"{API}/webhooks/moneroo", content=self.payload(user_id))

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert fake_db.rows("user_subscriptions")[0]["credits_remaining"] == 100

    def test_bad_signature(self, client, fake_db, monkeypatch, user_id):
        monkeypatch.setattr(settings, "MONEROO_WEBHOOK_SECRET", "whsec_test")

        response = client.post(
            f"{API}/webhooks/moneroo",
            content=self.payload(user_id),
            headers={"x-moneroo-signature": "deadbeef"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_SIGNATURE"
        assert fake_db.rows("user_subscriptions") == []


# =============================================================================
# Admin
# =============================================================================

class TestAdminRoutes:
    def test_non_admin_forbidden(self, auth_client, other_user_id):
        response = auth_client.post(f"{API}/admin/roles", json={"user_id": other_user_id, "role": "admin"})

        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"

    def test_admin_grants_subscription(self, auth_client, fake_db, user_id, other_user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "super_admin"}]

        response = auth_client.post(
            f"{API}/admin/subscriptions",
            json={"user_id": other_user_id, "plan_slug": "pro", "credits": 12},
        )

        assert response.status_code == 200
        subscription = fake_db.rows("user_subscriptions")[0]
        assert subscription["user_id"] == other_user_id
        assert subscription["credits_remaining"] == 12


# =============================================================================
# Templates
# =============================================================================

class TestTemplateRoutes:
    def test_upload_requires_permission(self, auth_client, fake_db):
        response = auth_client.post(
            f"{API}/templates/upload",
            json={"imageData": "data:image/png;base64,cG9zdGVy", "domain": "church"},
        )

        assert response.status_code == 403
        assert fake_db.rows("reference_templates") == []

    def test_content_manager_uploads(self, auth_client, fake_db, user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "content_manager"}]
        fake_db.tables["role_permissions"] = [{"role": "content_manager", "permission": "templates.manage"}]
        body = {"imageData": "data:image/png;base64,cG9zdGVy", "domain": "church", "designCategory": "crusade"}

        first = auth_client.post(f"{API}/templates/upload", json=body)
        second = auth_client.post(f"{API}/templates/upload", json=body)

        assert first.status_code == 200
        assert first.json()["is_duplicate"] is False
        assert first.json()["template"]["design_category"] == "crusade"
        assert second.json()["is_duplicate"] is True
        assert second.json()["existing_id"] == first.json()["template"]["id"]

    def test_upload_invalid_image(self, auth_client, fake_db, user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "admin"}]

        response = auth_client.post(
            f"{API}/templates/upload",
            json={"imageData": "data:image/bmp;base64,cG9zdGVy", "domain": "church"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_IMAGE"

    def test_migrate_admin_only(self, auth_client, fake_db):
        response = auth_client.post(f"{API}/templates/migrate", json={"sourceOrigin": "https://graphiste.app"})

        assert response.status_code == 403

    def test_migrate_rejects_non_http_origin(self, auth_client, fake_db, user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "admin"}]

        response = auth_client.post(f"{API}/templates/migrate", json={"sourceOrigin": "graphiste.app"})

        assert response.status_code == 422

    def test_migrate_without_legacy_templates(self, auth_client, fake_db, user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "admin"}]

        response = auth_client.post(f"{API}/templates/migrate", json={"sourceOrigin": "https://graphiste.app/"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Migration terminée: 0 succès, 0 échecs",
            "results": [],
        }


# =============================================================================
# Feedback
# =============================================================================

class TestFeedbackRoutes:
    def test_anonymous_feedback(self, client, fake_db):
        response = client.post(f"{API}/feedback", json={"rating": 5, "comment": "Bravo"})

        assert response.status_code == 200
        assert response.json()["user_id"] is None
        assert fake_db.rows("generation_feedback")[0]["comment"] == "Bravo"

    def test_feedback_tied_to_user(self, auth_client, fake_db, user_id):
        response = auth_client.post(f"{API}/feedback", json={"imageId": "img-1", "rating": 2})

        assert response.status_code == 200
        row = fake_db.rows("generation_feedback")[0]
        assert row["user_id"] == user_id
        assert row["image_id"] == "img-1"

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, client, fake_db, rating):
        response = client.post(f"{API}/feedback", json={"rating": rating})

        assert response.status_code == 422
        assert fake_db.rows("generation_feedback") == []

    def test_listing_is_admin_only(self, auth_client, fake_db):
        response = auth_client.get(f"{API}/feedback")

        assert response.status_code == 403

    def test_admin_overview(self, auth_client, fake_db, user_id):
        fake_db.tables["user_roles"] = [{"user_id": user_id, "role": "admin"}]
        auth_client.post(f"{API}/feedback", json={"rating": 5})
        auth_client.post(f"{API}/feedback", json={"rating": 1})

        response = auth_client.get(f"{API}/feedback")

        assert response.status_code == 200
        assert response.json()["stats"] == {
            "total": 2,
            "average_rating": 3.0,
            "positive_count": 1,
            "negative_count": 1,
        }
