"""
Auth cookie forging.

Outside the dev server, automated logins through the identity provider are
blocked, so tests inject the same encrypted ``AUTH-TOKEN`` cookie the server
would issue. Encryption must match the server: AES-GCM with a 12-byte IV,
hex(IV || ciphertext+tag) in upper case.
"""

import hashlib
import hmac
import json
import os

from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GCM_IV_LENGTH = 12


def _key_bytes(key_hex: str) -> bytes:
    if not key_hex:
        raise ValueError("Encryption key not configured (set E2E_ENCRYPTION_KEY)")
    try:
        key = bytes.fromhex(key_hex)
    except ValueError as e:
        raise ValueError("Encryption key must be a hex string") from e
    if len(key) not in (16, 24, 32):
        raise ValueError(f"Encryption key must be 128, 192 or 256 bits, got {len(key) * 8}")
    return key


def encrypt(plaintext: str, key_hex: str) -> str:
    """Encrypt ``plaintext`` the way the server encrypts its cookies."""
    aesgcm = AESGCM(_key_bytes(key_hex))
    iv = os.urandom(GCM_IV_LENGTH)
    ciphertext = aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
    return (iv + ciphertext).hex().upper()


def decrypt(ciphertext_hex: str, key_hex: str) -> str:
    """Inverse of ``encrypt``. Raises ``cryptography.exceptions.InvalidTag`` on tampering."""
    aesgcm = AESGCM(_key_bytes(key_hex))
    raw = bytes.fromhex(ciphertext_hex)
    return aesgcm.decrypt(raw[:GCM_IV_LENGTH], raw[GCM_IV_LENGTH:], None).decode("utf-8")


def generate_signature(data: str, key_hex: str) -> str:
    """HMAC-SHA1 signature of ``data``, upper-case hex."""
    digest = hmac.new(_key_bytes(key_hex), data.encode("utf-8"), hashlib.sha1).hexdigest()
    return digest.upper()


class UserInfoCookie(BaseModel):
    """Payload of the auth cookie: the user id plus a server-verifiable signature."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    verification_code: str = Field(default="")

    @classmethod
    def for_user(cls, user_id: str, key_hex: str) -> "UserInfoCookie":
        return cls(user_id=user_id, verification_code=generate_signature(user_id, key_hex))

    def to_compact_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))


def encrypted_auth_cookie(user_id: str, key_hex: str) -> str:
    """Cookie value that logs the browser in as ``user_id``."""
    return encrypt(UserInfoCookie.for_user(user_id, key_hex).to_compact_json(), key_hex)
