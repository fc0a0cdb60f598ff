from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis

from auth_server.settings import Settings, get_settings

_client: Optional[Redis] = None


def get_redis(settings: Optional[Settings] = None) -> Redis:
    """
    Lazy singleton Redis client using REDIS_URL from `settings`
    (the process settings when omitted).
    decode_responses=True -> we get/put str, not bytes.
    Socket timeouts follow STORE_TIMEOUT_SECONDS so a dead server cannot
    hang a request.
    """
    global _client
    if _client is None:
        settings = settings or get_settings()
        _client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=settings.store_timeout_seconds,
            socket_connect_timeout=settings.store_timeout_seconds,
        )
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
