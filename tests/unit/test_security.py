"""
Tests for auth cookie forging.
"""
import hashlib
import hmac
import json

import pytest
from cryptography.exceptions import InvalidTag

from teammates_e2e.security import (
    UserInfoCookie,
    decrypt,
    encrypt,
    encrypted_auth_cookie,
    generate_signature,
)

KEY = "000102030405060708090A0B0C0D0E0F"


class TestEncryption:
    """AES-GCM cookie encryption compatible with the server."""

    def test_output_is_upper_hex_with_iv_prefix(self):
        ciphertext = encrypt("hello", KEY)

        assert ciphertext == ciphertext.upper()
        # 12-byte IV + 5 bytes of payload + 16-byte tag
        assert len(bytes.fromhex(ciphertext)) == 12 + 5 + 16

    def test_random_iv_makes_ciphertexts_differ(self):
        assert encrypt("same", KEY) != encrypt("same", KEY)

    def test_decrypt_recovers_plaintext(self):
        assert decrypt(encrypt("{\"userId\":\"alice\"}", KEY), KEY) == "{\"userId\":\"alice\"}"

    def test_tampered_ciphertext_rejected(self):
        ciphertext = bytearray(bytes.fromhex(encrypt("hello", KEY)))
        ciphertext[-1] ^= 0x01

        with pytest.raises(InvalidTag):
            decrypt(bytes(ciphertext).hex(), KEY)

    @pytest.mark.parametrize("key, message", [
        ("", "not configured"),
        ("zz", "hex string"),
        ("0011", "bits"),
    ])
    def test_invalid_keys_rejected(self, key, message):
        with pytest.raises(ValueError, match=message):
            encrypt("hello", key)


def test_signature_is_upper_hex_hmac_sha1():
    expected = hmac.new(bytes.fromhex(KEY), b"alice", hashlib.sha1).hexdigest().upper()

    assert generate_signature("alice", KEY) == expected


def test_cookie_json_is_compact_camel_case():
    cookie = UserInfoCookie.for_user("alice", KEY)

    assert cookie.to_compact_json() == (
        '{"userId":"alice","verificationCode":"' + generate_signature("alice", KEY) + '"}'
    )


def test_encrypted_auth_cookie_carries_signed_user():
    payload = json.loads(decrypt(encrypted_auth_cookie("tm.instr", KEY), KEY))

    assert payload["userId"] == "tm.instr"
    assert payload["verificationCode"] == generate_signature("tm.instr", KEY)
