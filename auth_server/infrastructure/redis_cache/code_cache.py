from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError

from auth_server.domain.codes import ConsumeResult
from auth_server.domain.errors import StoreUnavailable
from auth_server.domain.ports.code_cache import CodeCachePort
from auth_server.domain.services import code_digest_b64

logger = logging.getLogger("auth_server.infrastructure.redis_cache.code_cache")

T = TypeVar("T")

_LUA_CONSUME = """
-- KEYS[1]: code key
-- ARGV[1]: expected digest (base64)
-- ARGV[2]: max attempts (0 = unlimited)
local key = KEYS[1]
local cur = redis.call('HGET', key, 'digest')
if not cur then
  return 0
end
if cur == ARGV[1] then
  redis.call('DEL', key)
  return 1
end
local attempts = redis.call('HINCRBY', key, 'attempts', 1)
local max_attempts = tonumber(ARGV[2])
if max_attempts > 0 and attempts >= max_attempts then
  redis.call('DEL', key)
end
return 2
"""

_RESULTS = {
    0: ConsumeResult.EXPIRED,
    1: ConsumeResult.OK,
    2: ConsumeResult.MISMATCH,
}


class RedisCodeCache(CodeCachePort):
    def __init__(
        self,
        redis: Redis,
        *,
        key_prefix: str = "code:",
        timeout_seconds: float = 2.0,
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._timeout = timeout_seconds

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def _call(self, awaitable: Awaitable[T]) -> T:
        # cancellation of the calling task propagates untouched
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("code store timed out", extra={"timeout": self._timeout})
            raise StoreUnavailable("code store timed out") from exc
        except RedisError as exc:
            logger.warning("code store unavailable", extra={"error": str(exc)})
            raise StoreUnavailable("code store unavailable") from exc

    async def store_hashed_code(
        self, key: str, salt_b64: str, digest_b64: str, ttl_seconds: int
    ) -> None:
        key = self._key(key)
        pipe = self._redis.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(
            key, mapping={"salt": salt_b64, "digest": digest_b64, "attempts": 0}
        )
        pipe.expire(key, ttl_seconds)
        await self._call(pipe.execute())

    async def verify_and_consume(
        self, key: str, code: str, *, max_attempts: int
    ) -> ConsumeResult:
        key = self._key(key)
        # read salt (to compute expected digest)
        salt_b64 = await self._call(self._redis.hget(key, "salt"))
        if salt_b64 is None:
            return ConsumeResult.EXPIRED
        expected = code_digest_b64(code, salt_b64)
        # atomic compare-and-delete; a re-issue in between shows up as a mismatch
        res = await self._call(
            self._redis.eval(_LUA_CONSUME, 1, key, expected, max_attempts)
        )
        return _RESULTS[int(res)]

    async def invalidate(self, key: str) -> None:
        await self._call(self._redis.delete(self._key(key)))
