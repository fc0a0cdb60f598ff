from typing import Protocol

from auth_server.domain.codes import ConsumeResult


class CodeCachePort(Protocol):
    async def store_hashed_code(
        self, key: str, salt_b64: str, digest_b64: str, ttl_seconds: int
    ) -> None:
        """Store/replace the hashed code under `key` with TTL=ttl_seconds."""

    async def verify_and_consume(
        self, key: str, code: str, *, max_attempts: int
    ) -> ConsumeResult:
        """
        Atomically compare and, only on match, delete the stored code.
        A miss on a present code counts one attempt; reaching max_attempts
        deletes the entry.
        """

    async def invalidate(self, key: str) -> None:
        """Delete any pending code under `key`."""
