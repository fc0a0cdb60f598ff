from __future__ import annotations

import logging
from typing import Mapping

import auth_server.domain.services as domain_services
from auth_server.domain.codes import CodeNamespace, ConsumeResult
from auth_server.domain.ports.code_cache import CodeCachePort
from auth_server.settings import Settings

logger = logging.getLogger("auth_server.application.verification_codes")

DEFAULT_TTLS: Mapping[CodeNamespace, int] = {
    CodeNamespace.OTP: 5 * 60,
    CodeNamespace.PASSWORD_RESET: 15 * 60,
}


class VerificationCodeStore:
    """
    Single-use, TTL-bound verification codes keyed by (namespace, subject).

    At most one code is live per key: issuing replaces whatever was pending.
    Codes are stored salted and hashed; the plaintext only leaves through the
    return value of issue().
    """

    def __init__(
        self,
        cache: CodeCachePort,
        *,
        ttls: Mapping[CodeNamespace, int] | None = None,
        code_length: int = 6,
        max_attempts: int = 5,
    ) -> None:
        self._cache = cache
        self._ttls = dict(DEFAULT_TTLS if ttls is None else ttls)
        self._code_length = code_length
        self._max_attempts = max_attempts

    @classmethod
    def from_settings(
        cls, cache: CodeCachePort, settings: Settings
    ) -> "VerificationCodeStore":
        return cls(
            cache,
            ttls={
                CodeNamespace.OTP: settings.otp_ttl_seconds,
                CodeNamespace.PASSWORD_RESET: settings.reset_code_ttl_seconds,
            },
            code_length=settings.code_length,
            max_attempts=settings.code_max_attempts,
        )

    @staticmethod
    def _key(namespace: CodeNamespace, subject: str) -> str:
        if not subject:
            raise ValueError("subject is required")
        return f"{namespace.value}:{subject}"

    def ttl_for(self, namespace: CodeNamespace) -> int:
        return self._ttls[namespace]

    async def issue(self, namespace: CodeNamespace, subject: str) -> str:
        key = self._key(namespace, subject)
        code = domain_services.generate_numeric_code(self._code_length)
        salt_b64, digest_b64 = domain_services.make_code_digest(code)
        ttl = self.ttl_for(namespace)
        await self._cache.store_hashed_code(key, salt_b64, digest_b64, ttl)
        logger.info(
            "verification code issued",
            extra={"namespace": namespace.value, "ttl_seconds": ttl},
        )
        return code

    async def consume(
        self, namespace: CodeNamespace, subject: str, submitted: str
    ) -> ConsumeResult:
        result = await self._cache.verify_and_consume(
            self._key(namespace, subject),
            submitted,
            max_attempts=self._max_attempts,
        )
        logger.info(
            "verification code checked",
            extra={"namespace": namespace.value, "result": result.value},
        )
        return result

    async def invalidate(self, namespace: CodeNamespace, subject: str) -> None:
        await self._cache.invalidate(self._key(namespace, subject))
