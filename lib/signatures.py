# =============================================================================
# lib/signatures.py - Webhook Signature Verification
# =============================================================================
# HMAC-SHA256 helpers for payment provider webhooks.
#
# - Moneroo sends `x-moneroo-signature`: hex HMAC-SHA256 of the raw body.
# - FedaPay sends `x-fedapay-signature`: either `t=<timestamp>,s=<hex>` where
#   the signed payload is `<timestamp>.<raw body>`, or a bare hex digest of
#   the raw body.
#
# All comparisons are constant-time (hmac.compare_digest).
#
# Usage:
#   from lib.signatures import verify_moneroo_signature
#   if not verify_moneroo_signature(raw_body, header, secret):
#       raise InvalidWebhookSignatureError("moneroo")
# =============================================================================

import hashlib
import hmac


def compute_signature(payload: bytes, secret: str) -> str:
    """
    Hex HMAC-SHA256 of `payload` keyed with `secret`.

    Example:
        compute_signature(b'{"event":"payment.success"}', "whsec")  # "5f2c..."
    """
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_moneroo_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Check a Moneroo webhook signature against the raw request body.

    Args:
        payload: Raw request body, exactly as received
        signature: Value of the x-moneroo-signature header
        secret: MONEROO_WEBHOOK_SECRET

    Returns:
        True when the signature matches
    """
    if not signature:
        return False
    expected = compute_signature(payload, secret)
    return hmac.compare_digest(expected, signature.strip().lower())


def parse_fedapay_signature(header: str) -> tuple[str | None, list[str]]:
    """
    Split a FedaPay signature header into (timestamp, signatures).

    "t=1700000000,s=abc" -> ("1700000000", ["abc"])
    "abc"                -> (None, ["abc"])
    """
    timestamp = None
    signatures: list[str] = []
    for part in header.split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            signatures.append(key.strip())
        elif key == "t":
            timestamp = value.strip()
        elif key in ("s", "v1"):
            signatures.append(value.strip())
    return timestamp, [sig.lower() for sig in signatures if sig]


def verify_fedapay_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Check a FedaPay webhook signature against the raw request body.

    Args:
        payload: Raw request body, exactly as received
        signature: Value of the x-fedapay-signature header
        secret: FEDAPAY_WEBHOOK_SECRET

    Returns:
        True when one of the signatures in the header matches
    """
    if not signature:
        return False

    timestamp, candidates = parse_fedapay_signature(signature)
    if timestamp:
        signed_payload = timestamp.encode("utf-8") + b"." + payload
    else:
        signed_payload = payload

    expected = compute_signature(signed_payload, secret)
    return any(hmac.compare_digest(expected, candidate) for candidate in candidates)
