# =============================================================================
# lib/moneroo_client.py - Moneroo Payment Client
# =============================================================================
# Moneroo hosts the checkout page. We initialize a payment and redirect the
# user to the returned checkout_url; the outcome arrives later through the
# Moneroo webhook.
#
#   POST {MONEROO_API_BASE}/payments/initialize
#     -> {"status", "message", "data": {"id", "checkout_url", "status"}}
#
# Usage:
#   from lib.moneroo_client import MonerooClient
#   payment = MonerooClient(secret_key).initialize_payment(payload)
#   redirect_to(payment["checkout_url"])
# =============================================================================

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class MonerooClientError(ApplicationError):
    """Error returned by Moneroo when a payment can't be initialized."""

    def __init__(self, message: str, code: str = "MONEROO_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class MonerooClient:
    """Client for the Moneroo REST API."""

    def __init__(self, secret_key: str, base_url: str | None = None, timeout: float = 30.0):
        self.secret_key = secret_key
        self.base_url = (base_url or settings.MONEROO_API_BASE).rstrip("/")
        self.timeout = timeout

    def initialize_payment(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Initialize a hosted checkout.

        Args:
            payload: {amount, currency, description, customer, return_url, metadata}

        Returns:
            The "data" object: {"id", "checkout_url", "status"}

        Raises:
            MonerooClientError: If Moneroo refuses the payment or returns
                no checkout URL. The message is Moneroo's own when present.
        """
        logger.info(
            f"Initializing Moneroo payment: amount={payload.get('amount')} "
            f"{payload.get('currency')}, metadata={payload.get('metadata')}"
        )

        try:
            response = httpx.post(
                f"{self.base_url}/payments/initialize",
                headers={
                    "Authorization": f"Bearer {self.secret_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise MonerooClientError(
                f"Erreur initialisation paiement: {e}",
                code="MONEROO_UNREACHABLE",
            )

        try:
            body = response.json()
        except ValueError:
            body = {}

        data = body.get("data") or {}
        if response.status_code >= 400 or not data.get("checkout_url"):
            logger.error(f"Moneroo error {response.status_code}: {body}")
            raise MonerooClientError(
                body.get("message") or "Erreur initialisation paiement",
                code="MONEROO_INIT_FAILED",
                status_code=response.status_code,
                details={"response": body},
            )

        logger.info(f"Moneroo payment initialized: {data.get('id')}")
        return data
