"""
Tests for request signing.
"""

import hashlib
import hmac

from aanbieders.services.signer import RequestSigner, compute_signature, default_nonce
from conftest import FIXED_NONCE, FIXED_TIME


def expected_apikey(key, secret, timestamp, nonce):
    return hmac.new(key.encode(), f"{secret}{timestamp}{nonce}".encode(), hashlib.sha1).hexdigest()


def test_sign_produces_all_fields(signer):
    """Test that every authentication field is filled."""
    fields = signer.sign(ip="10.0.0.1", tracking_id="visitor-1")

    assert fields.key == "public-key"
    assert fields.time == FIXED_TIME
    assert fields.nonce == FIXED_NONCE
    assert fields.ip == "10.0.0.1"
    assert fields.abcid == "visitor-1"


def test_signature_uses_public_key_as_hmac_key(signer):
    """Test the key/message layout of the HMAC."""
    fields = signer.sign()

    assert fields.apikey == expected_apikey("public-key", "s3cret", FIXED_TIME, FIXED_NONCE)

    # Swapped roles must not match
    swapped = hmac.new(
        f"s3cret{FIXED_TIME}{FIXED_NONCE}".encode(), b"public-key", hashlib.sha1
    ).hexdigest()
    assert fields.apikey != swapped


def test_compute_signature_is_hex_sha1(credentials):
    """Test signature format."""
    signature = compute_signature(credentials, 1, "n")

    assert len(signature) == 40
    assert int(signature, 16) >= 0


def test_missing_ip_and_tracking_default_to_empty(signer):
    """Test empty defaults for advisory fields."""
    fields = signer.sign(ip=None, tracking_id=None)

    assert fields.ip == ""
    assert fields.abcid == ""


def test_fresh_nonce_and_time_per_call(credentials):
    """Test that consecutive signatures differ only in time, nonce and apikey."""
    clock_values = [1700000000.7, 1700000005.2]
    nonces = ["nonce-a", "nonce-b"]
    signer = RequestSigner(
        credentials,
        clock=lambda: clock_values.pop(0),
        nonce_source=lambda: nonces.pop(0)
    )

    first = signer.sign(ip="1.1.1.1", tracking_id="v")
    second = signer.sign(ip="1.1.1.1", tracking_id="v")

    assert first.time == 1700000000
    assert second.time == 1700000005
    assert first.nonce != second.nonce
    assert first.apikey != second.apikey
    assert (first.key, first.ip, first.abcid) == (second.key, second.ip, second.abcid)


def test_as_dict_field_order(signer):
    """Test auth field order used when merging into parameters."""
    assert list(signer.sign().as_dict()) == ["key", "time", "nonce", "ip", "apikey", "abcid"]


def test_default_nonce_is_unpredictable():
    """Test default nonce shape and uniqueness."""
    nonces = {default_nonce() for _ in range(50)}

    assert len(nonces) == 50
    assert all(len(nonce) == 32 for nonce in nonces)
