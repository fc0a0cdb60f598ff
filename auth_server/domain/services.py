# auth_server/domain/services.py
from __future__ import annotations

import base64
import binascii
import hashlib
import os
import secrets


def generate_numeric_code(length: int = 6) -> str:
    """Zero-padded numeric code of `length` digits from the OS CSPRNG."""
    if length < 1:
        raise ValueError("code length must be positive")
    return f"{secrets.randbelow(10**length):0{length}d}"


def _sha256_salt_plus_code(salt: bytes, code: str) -> bytes:
    h = hashlib.sha256()
    h.update(salt)
    h.update(code.encode("utf-8"))
    return h.digest()


def make_code_digest(code: str) -> tuple[str, str]:
    """
    Return (salt_b64, digest_b64) where digest = SHA256(salt || code).
    """
    salt = os.urandom(16)
    digest = _sha256_salt_plus_code(salt, code)
    return (
        base64.b64encode(salt).decode("utf-8"),
        base64.b64encode(digest).decode("utf-8"),
    )


def code_digest_b64(code: str, salt_b64: str) -> str:
    """
    Digest of `code` under an existing salt, in the same encoding as
    make_code_digest(). Raises ValueError on a malformed salt.
    Stores compare this against the saved digest inside their atomic
    consume step.
    """
    try:
        salt = base64.b64decode(salt_b64.encode("utf-8"), validate=True)
    except binascii.Error as exc:
        raise ValueError("salt is not valid base64") from exc
    return base64.b64encode(_sha256_salt_plus_code(salt, code)).decode("utf-8")
