# =============================================================================
# tests/test_kie_client.py - Kie AI Client & Poster Generator Tests
# =============================================================================
# HTTP calls are patched at lib.kie_client.httpx and time.sleep is patched so
# polling tests run instantly.
#
# Run with: pytest tests/test_kie_client.py -v
# =============================================================================

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from agents.poster_generator import PosterGenerator
from core.models.generation import AspectRatio, Domain, GenerateImageRequest, Resolution
from lib.kie_client import KieClient, KieClientError


def http_response(status_code: int = 200, body: dict | None = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body or {}
    response.text = text or json.dumps(body or {})
    return response


def record(state: str, **values) -> MagicMock:
    return http_response(body={"code": 200, "data": {"state": state, **values}})


@pytest.fixture
def client() -> KieClient:
    return KieClient("kie-key", base_url="https://kie.test/api/v1/jobs/", model="nano-banana-pro")


# =============================================================================
# Task Creation
# =============================================================================

class TestCreateTask:
    """KieClient.create_task."""

    def test_success(self, client):
        with patch("lib.kie_client.httpx.post") as mock_post:
            mock_post.return_value = http_response(body={"code": 200, "data": {"taskId": "task_1"}})

            task_id = client.create_task("Affiche gala", ["https://img/ref.png"], "3:4", "2K", "png")

        assert task_id == "task_1"
        args, kwargs = mock_post.call_args
        assert args[0] == "https://kie.test/api/v1/jobs/createTask"
        assert kwargs["headers"]["Authorization"] == "Bearer kie-key"
        assert kwargs["json"] == {
            "model": "nano-banana-pro",
            "input": {
                "prompt": "Affiche gala",
                "image_input": ["https://img/ref.png"],
                "aspect_ratio": "3:4",
                "resolution": "2K",
                "output_format": "png",
            },
        }

    @pytest.mark.parametrize("status,message", [
        (401, "Clé API invalide"),
        (402, "Solde insuffisant sur le compte Kie AI"),
        (429, "Limite de requêtes atteinte. Réessayez plus tard."),
    ])
    def test_known_http_errors(self, client, status, message):
        with patch("lib.kie_client.httpx.post", return_value=http_response(status, text="err")):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.message == message
        assert exc_info.value.code == "KIE_CREATE_FAILED"
        assert exc_info.value.status_code == status

    def test_other_http_error(self, client):
        with patch("lib.kie_client.httpx.post", return_value=http_response(500, text="boom")):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.message == "Erreur création tâche: 500 - boom"

    def test_missing_task_id(self, client):
        body = {"code": 422, "msg": "prompt too long", "data": None}
        with patch("lib.kie_client.httpx.post", return_value=http_response(body=body)):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.message == "Erreur API Kie: prompt too long"

    def test_network_error(self, client):
        with patch("lib.kie_client.httpx.post", side_effect=httpx.ConnectError("refused")):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.code == "KIE_UNREACHABLE"

    def test_non_json_body(self, client):
        response = http_response(200, text="<html>Bad Gateway</html>")
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with patch("lib.kie_client.httpx.post", return_value=response):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.code == "KIE_INVALID_RESPONSE"
        assert exc_info.value.status_code == 200

    def test_body_not_an_object(self, client):
        with patch("lib.kie_client.httpx.post", return_value=http_response(body=["task_1"])):
            with pytest.raises(KieClientError) as exc_info:
                client.create_task("p", [], "1:1", "1K", "png")

        assert exc_info.value.code == "KIE_INVALID_RESPONSE"


# =============================================================================
# Polling
# =============================================================================

class TestExtractImageUrl:
    def test_string_result_json(self):
        url = KieClient.extract_image_url({"resultJson": '{"resultUrls": ["https://cdn/a.png"]}'})

        assert url == "https://cdn/a.png"

    def test_dict_result_json(self):
        assert KieClient.extract_image_url({"resultJson": {"resultUrls": ["https://cdn/b.png"]}}) == "https://cdn/b.png"

    def test_missing_or_invalid(self):
        assert KieClient.extract_image_url({}) is None
        assert KieClient.extract_image_url({"resultJson": "{oops"}) is None
        assert KieClient.extract_image_url({"resultJson": '{"resultUrls": []}'}) is None

    @pytest.mark.parametrize("result_json", [
        '["https://cdn/a.png"]',
        '"https://cdn/a.png"',
        '{"resultUrls": "https://cdn/a.png"}',
        '{"resultUrls": [null]}',
        ["https://cdn/a.png"],
    ])
    def test_unexpected_shapes(self, result_json):
        assert KieClient.extract_image_url({"resultJson": result_json}) is None


class TestPollForResult:
    """KieClient.poll_for_result."""

    def test_waits_then_succeeds(self, client):
        responses = [
            record("waiting"),
            record("waiting"),
            record("success", resultJson='{"resultUrls": ["https://cdn/poster.png"]}'),
        ]
        with patch("lib.kie_client.httpx.get", side_effect=responses) as mock_get, \
                patch("lib.kie_client.time.sleep") as mock_sleep:
            url = client.poll_for_result("task_1", max_attempts=5, interval_seconds=2)

        assert url == "https://cdn/poster.png"
        assert mock_get.call_count == 3
        assert mock_get.call_args.kwargs["params"] == {"taskId": "task_1"}
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(2)

    def test_failed_task(self, client):
        with patch("lib.kie_client.httpx.get", return_value=record("fail", failMsg="NSFW content")), \
                patch("lib.kie_client.time.sleep"):
            with pytest.raises(KieClientError) as exc_info:
                client.poll_for_result("task_1", max_attempts=3, interval_seconds=0)

        assert exc_info.value.message == "Génération échouée: NSFW content"
        assert exc_info.value.code == "KIE_TASK_FAILED"

    def test_success_without_url(self, client):
        with patch("lib.kie_client.httpx.get", return_value=record("success", resultJson="{}")), \
                patch("lib.kie_client.time.sleep"):
            with pytest.raises(KieClientError) as exc_info:
                client.poll_for_result("task_1", max_attempts=3, interval_seconds=0)

        assert exc_info.value.code == "KIE_NO_RESULT"

    def test_timeout(self, client):
        with patch("lib.kie_client.httpx.get", return_value=record("waiting")) as mock_get, \
                patch("lib.kie_client.time.sleep"):
            with pytest.raises(KieClientError) as exc_info:
                client.poll_for_result("task_1", max_attempts=3, interval_seconds=0)

        assert exc_info.value.code == "KIE_TIMEOUT"
        assert exc_info.value.status_code == 504
        assert mock_get.call_count == 3

    def test_poll_http_error(self, client):
        with patch("lib.kie_client.httpx.get", return_value=http_response(503, text="down")):
            with pytest.raises(KieClientError) as exc_info:
                client.get_record("task_1")

        assert exc_info.value.code == "KIE_POLL_FAILED"
        assert exc_info.value.status_code == 503

    def test_poll_non_json_body(self, client):
        response = http_response(200, text="maintenance")
        response.json.side_effect = ValueError("not json")

        with patch("lib.kie_client.httpx.get", return_value=response):
            with pytest.raises(KieClientError) as exc_info:
                client.get_record("task_1")

        assert exc_info.value.code == "KIE_INVALID_RESPONSE"

    def test_list_result_is_no_result(self, client):
        with patch("lib.kie_client.httpx.get", return_value=record("success", resultJson='["https://cdn/a.png"]')), \
                patch("lib.kie_client.time.sleep"):
            with pytest.raises(KieClientError) as exc_info:
                client.poll_for_result("task_1", max_attempts=1, interval_seconds=0)

        assert exc_info.value.code == "KIE_NO_RESULT"


# =============================================================================
# Poster Generator
# =============================================================================

class TestPosterGenerator:
    """PosterGenerator over a mocked KieClient."""

    @pytest.fixture
    def kie(self):
        kie = MagicMock(spec=KieClient)
        kie.create_task.return_value = "task_9"
        kie.poll_for_result.return_value = "https://cdn/poster.png"
        return kie

    def test_image_inputs_keep_order(self, kie):
        generator = PosterGenerator(client=kie)
        request = GenerateImageRequest(
            prompt="Gala",
            reference_image="https://img/ref.png",
            content_image="https://img/pastor.png",
        )

        assert generator.collect_image_inputs(request) == ["https://img/ref.png", "https://img/pastor.png"]

    def test_content_image_only(self, kie):
        generator = PosterGenerator(client=kie)
        request = GenerateImageRequest(prompt="Menu du jour", content_image="https://img/dish.png")

        generator.generate(request)

        kwargs = kie.create_task.call_args.kwargs
        assert kwargs["image_inputs"] == ["https://img/dish.png"]
        assert "CRITICAL - CONTENT IMAGE" in kwargs["prompt"]
        assert "CRITICAL - STYLE REFERENCE" not in kwargs["prompt"]

    def test_generate_success(self, kie):
        # Arrange
        generator = PosterGenerator(client=kie)
        created = []
        request = GenerateImageRequest(
            prompt="Veillée de prière",
            aspect_ratio=AspectRatio.STORY,
            resolution=Resolution.K4,
            reference_image="https://img/ref.png",
            content_image="https://img/pastor.png",
            domain=Domain.CHURCH,
        )

        # Act
        result = generator.generate(request, on_task_created=created.append)

        # Assert
        assert result.success is True
        assert result.image_url == "https://cdn/poster.png"
        assert result.task_id == "task_9"
        assert created == ["task_9"]

        kwargs = kie.create_task.call_args.kwargs
        assert kwargs["image_inputs"] == ["https://img/ref.png", "https://img/pastor.png"]
        assert kwargs["aspect_ratio"] == "9:16"
        assert kwargs["resolution"] == "4K"
        assert kwargs["output_format"] == "png"
        assert "CRITICAL - STYLE REFERENCE" in kwargs["prompt"]
        assert "CRITICAL - CONTENT IMAGE" in kwargs["prompt"]
        kie.poll_for_result.assert_called_once_with("task_9")

    def test_generate_failure_is_a_result(self, kie):
        kie.poll_for_result.side_effect = KieClientError("Génération échouée: quota", code="KIE_TASK_FAILED")
        generator = PosterGenerator(client=kie)

        result = generator.generate(GenerateImageRequest(prompt="Gala"))

        assert result.success is False
        assert result.error == "Génération échouée: quota"
        assert result.task_id == "task_9"
        assert result.image_url is None

    def test_missing_api_key(self, monkeypatch):
        from app.config import settings
        from app.exceptions import ServiceNotConfiguredError

        monkeypatch.setattr(settings, "KIE_AI_API_KEY", None)

        with pytest.raises(ServiceNotConfiguredError):
            PosterGenerator()
