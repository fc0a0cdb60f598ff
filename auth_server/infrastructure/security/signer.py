from __future__ import annotations

from jwt.algorithms import HMACAlgorithm
from jwt.exceptions import InvalidKeyError

from auth_server.domain.errors import ConfigError
from auth_server.settings import Settings


class Signer:
    """
    Process-wide HMAC-SHA256 signer.

    The secret is checked when the signer is built, so a misconfigured
    process fails at startup instead of on the first login.
    """

    algorithm = "HS256"

    def __init__(self, secret: str | bytes | None) -> None:
        raw = secret.encode("utf-8") if isinstance(secret, str) else secret
        if not raw or not raw.strip():
            raise ConfigError("JWT_SECRET is not set")
        self._alg = HMACAlgorithm(HMACAlgorithm.SHA256)
        try:
            self._key = self._alg.prepare_key(raw)
        except InvalidKeyError as exc:
            raise ConfigError("JWT_SECRET is not usable as an HMAC key") from exc

    @classmethod
    def from_settings(cls, settings: Settings) -> "Signer":
        secret = settings.jwt_secret
        return cls(secret.get_secret_value() if secret is not None else None)

    def sign(self, payload: bytes) -> bytes:
        return self._alg.sign(payload, self._key)

    def verify(self, payload: bytes, signature: bytes) -> bool:
        # constant-time comparison happens inside HMACAlgorithm.verify
        return self._alg.verify(payload, self._key, signature)
