# =============================================================================
# tests/test_signatures.py - Webhook Signature Helper Tests
# =============================================================================
# Run with: pytest tests/test_signatures.py -v
# =============================================================================

import hashlib
import hmac

from lib.signatures import (
    compute_signature,
    parse_fedapay_signature,
    verify_fedapay_signature,
    verify_moneroo_signature,
)

SECRET = "whsec_test"
BODY = b'{"event":"payment.success","data":{"id":"py_1"}}'


class TestComputeSignature:
    def test_matches_hmac_sha256(self):
        expected = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()

        assert compute_signature(BODY, SECRET) == expected


class TestMonerooSignature:
    """verify_moneroo_signature."""

    def test_valid(self):
        assert verify_moneroo_signature(BODY, compute_signature(BODY, SECRET), SECRET) is True

    def test_uppercase_and_whitespace_accepted(self):
        signature = f"  {compute_signature(BODY, SECRET).upper()}\n"

        assert verify_moneroo_signature(BODY, signature, SECRET) is True

    def test_body_tampered(self):
        signature = compute_signature(BODY, SECRET)

        assert verify_moneroo_signature(BODY + b" ", signature, SECRET) is False

    def test_missing(self):
        assert verify_moneroo_signature(BODY, None, SECRET) is False
        assert verify_moneroo_signature(BODY, "", SECRET) is False


class TestFedaPaySignature:
    """parse_fedapay_signature / verify_fedapay_signature."""

    def test_parse_timestamped_header(self):
        assert parse_fedapay_signature("t=1700000000,s=ABC") == ("1700000000", ["abc"])

    def test_parse_bare_digest(self):
        assert parse_fedapay_signature("abc") == (None, ["abc"])

    def test_parse_v1_key(self):
        assert parse_fedapay_signature("t=1, v1=def") == ("1", ["def"])

    def test_timestamped_signature(self):
        signature = compute_signature(b"1700000000." + BODY, SECRET)

        assert verify_fedapay_signature(BODY, f"t=1700000000,s={signature}", SECRET) is True

    def test_timestamp_is_part_of_signed_payload(self):
        signature = compute_signature(BODY, SECRET)

        assert verify_fedapay_signature(BODY, f"t=1700000000,s={signature}", SECRET) is False

    def test_bare_signature(self):
        assert verify_fedapay_signature(BODY, compute_signature(BODY, SECRET), SECRET) is True

    def test_wrong_secret(self):
        signature = compute_signature(BODY, "other")

        assert verify_fedapay_signature(BODY, signature, SECRET) is False
