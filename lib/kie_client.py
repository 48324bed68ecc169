# =============================================================================
# lib/kie_client.py - Kie AI Image Generation Client
# =============================================================================
# Kie AI runs image generation as asynchronous jobs:
#
#   POST {KIE_API_BASE}/createTask          -> {"code": 200, "data": {"taskId"}}
#   GET  {KIE_API_BASE}/recordInfo?taskId=  -> {"data": {"state", "resultJson"}}
#
# state is "waiting" until it becomes "success" (resultJson holds
# {"resultUrls": [...]}) or "fail" (failMsg / failCode).
#
# Error messages are French because they are shown to the end user.
#
# Usage:
#   from lib.kie_client import KieClient
#   client = KieClient(api_key)
#   task_id = client.create_task(prompt, [], "3:4", "2K", "png")
#   image_url = client.poll_for_result(task_id)
# =============================================================================

import json
import logging
import time
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class KieClientError(ApplicationError):
    """Error returned by Kie AI or raised while waiting for a task."""

    def __init__(self, message: str, code: str = "KIE_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class KieClient:
    """
    Thin client over the Kie AI jobs API.

    Attributes:
        api_key: Kie AI bearer token
        base_url: Jobs API base (default: settings.KIE_API_BASE)
        model: Model id (default: settings.KIE_MODEL)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.KIE_API_BASE).rstrip("/")
        self.model = model or settings.KIE_MODEL
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _json_body(response: httpx.Response, operation: str) -> dict[str, Any]:
        """Decode a JSON object body; anything else is a KieClientError."""
        try:
            data = response.json()
        except ValueError:
            logger.error(f"Kie {operation} returned non-JSON body: {response.text[:500]}")
            data = None

        if not isinstance(data, dict):
            raise KieClientError(
                f"Réponse invalide de Kie AI ({operation})",
                code="KIE_INVALID_RESPONSE",
                status_code=response.status_code,
            )
        return data

    # -------------------------------------------------------------------------
    # Task Creation
    # -------------------------------------------------------------------------

    def create_task(
        self,
        prompt: str,
        image_inputs: list[str],
        aspect_ratio: str,
        resolution: str,
        output_format: str,
    ) -> str:
        """
        Create a generation task.

        Args:
            prompt: Final prompt sent to the model
            image_inputs: Image URLs, style reference first, then content image
            aspect_ratio: e.g. "3:4"
            resolution: "1K", "2K" or "4K"
            output_format: "png" or "jpg"

        Returns:
            The Kie task id

        Raises:
            KieClientError: If the request is refused or returns no task id
        """
        logger.info(
            f"Creating Kie task: model={self.model}, images={len(image_inputs)}, "
            f"aspect_ratio={aspect_ratio}, resolution={resolution}"
        )

        payload = {
            "model": self.model,
            "input": {
                "prompt": prompt,
                "image_input": image_inputs,
                "aspect_ratio": aspect_ratio,
                "resolution": resolution,
                "output_format": output_format,
            },
        }

        try:
            response = httpx.post(
                f"{self.base_url}/createTask",
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise KieClientError(
                f"Erreur création tâche: {e}",
                code="KIE_UNREACHABLE",
                suggestion="Check KIE_API_BASE and network connectivity",
            )

        if response.status_code >= 400:
            logger.error(f"Kie create task error: {response.status_code} {response.text[:500]}")
            messages = {
                401: "Clé API invalide",
                402: "Solde insuffisant sur le compte Kie AI",
                429: "Limite de requêtes atteinte. Réessayez plus tard.",
            }
            raise KieClientError(
                messages.get(
                    response.status_code,
                    f"Erreur création tâche: {response.status_code} - {response.text}",
                ),
                code="KIE_CREATE_FAILED",
                status_code=response.status_code,
            )

        data = self._json_body(response, "createTask")
        task_data = data.get("data")
        task_id = task_data.get("taskId") if isinstance(task_data, dict) else None
        if data.get("code") != 200 or not task_id:
            raise KieClientError(
                f"Erreur API Kie: {data.get('msg') or 'Pas de taskId retourné'}",
                code="KIE_CREATE_FAILED",
                details={"response": data},
            )

        logger.info(f"Kie task created: {task_id}")
        return task_id

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    def get_record(self, task_id: str) -> dict[str, Any]:
        """
        Fetch the current record of a task.

        Returns:
            The "data" object of the recordInfo response (may be empty)

        Raises:
            KieClientError: On HTTP error or a body that is not a JSON object
        """
        try:
            response = httpx.get(
                f"{self.base_url}/recordInfo",
                headers={"Authorization": f"Bearer {self.api_key}"},
                params={"taskId": task_id},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise KieClientError(
                f"Erreur polling: {e}",
                code="KIE_POLL_FAILED",
                details={"task_id": task_id},
            )

        if response.status_code >= 400:
            logger.error(f"Kie poll error: {response.status_code} {response.text[:500]}")
            raise KieClientError(
                f"Erreur polling: {response.status_code}",
                code="KIE_POLL_FAILED",
                status_code=response.status_code,
                details={"task_id": task_id},
            )

        record = self._json_body(response, "recordInfo").get("data")
        return record if isinstance(record, dict) else {}

    @staticmethod
    def extract_image_url(record: dict[str, Any]) -> str | None:
        """Return the first result URL of a successful record, if any."""
        result_json = record.get("resultJson")
        if not result_json:
            return None
        try:
            result = json.loads(result_json) if isinstance(result_json, str) else result_json
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing resultJson: {e}")
            return None
        if not isinstance(result, dict):
            return None
        urls = result.get("resultUrls")
        if not isinstance(urls, list) or not urls or not isinstance(urls[0], str):
            return None
        return urls[0]

    def poll_for_result(
        self,
        task_id: str,
        max_attempts: int | None = None,
        interval_seconds: float | None = None,
    ) -> str:
        """
        Poll a task until it succeeds, fails or runs out of attempts.

        Args:
            task_id: The Kie task id
            max_attempts: Number of polls (default: settings.KIE_POLL_MAX_ATTEMPTS)
            interval_seconds: Delay between polls (default: settings.KIE_POLL_INTERVAL_SECONDS)

        Returns:
            URL of the generated image

        Raises:
            KieClientError: On failure state, missing URL or timeout
        """
        max_attempts = max_attempts or settings.KIE_POLL_MAX_ATTEMPTS
        if interval_seconds is None:
            interval_seconds = settings.KIE_POLL_INTERVAL_SECONDS

        for attempt in range(1, max_attempts + 1):
            record = self.get_record(task_id)
            state = record.get("state")
            logger.debug(f"Kie task {task_id} poll {attempt}/{max_attempts}: state={state}")

            if state == "success":
                image_url = self.extract_image_url(record)
                if not image_url:
                    raise KieClientError(
                        "Pas d'URL d'image dans la réponse",
                        code="KIE_NO_RESULT",
                        details={"task_id": task_id},
                    )
                logger.info(f"Kie task {task_id} succeeded after {attempt} polls")
                return image_url

            if state == "fail":
                reason = record.get("failMsg") or record.get("failCode") or "Erreur inconnue"
                logger.error(f"Kie task {task_id} failed: {reason}")
                raise KieClientError(
                    f"Génération échouée: {reason}",
                    code="KIE_TASK_FAILED",
                    details={"task_id": task_id},
                )

            time.sleep(interval_seconds)

        raise KieClientError(
            "Timeout: la génération a pris trop de temps",
            code="KIE_TIMEOUT",
            status_code=504,
            details={"task_id": task_id},
        )
