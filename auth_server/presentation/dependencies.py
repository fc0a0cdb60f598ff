from typing import Annotated

from fastapi import Depends, Request

from auth_server.application.verification_codes import VerificationCodeStore
from auth_server.domain.ports.code_cache import CodeCachePort
from auth_server.domain.ports.delivery_port import DeliveryPort
from auth_server.domain.ports.password_hasher import PasswordHasherPort
from auth_server.domain.ports.user_directory import UserDirectoryPort
from auth_server.infrastructure.redis_cache.code_cache import RedisCodeCache
from auth_server.infrastructure.security.password import BcryptPasswordHasher
from auth_server.infrastructure.security.tokens import TokenIssuer, TokenVerifier
from auth_server.settings import Settings

# Everything below reads what auth_server.main create_app()/lifespan() put
# on app.state, so settings passed to create_app() win over the environment.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_code_cache(request: Request) -> CodeCachePort:
    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        raise RuntimeError("Redis client not opened yet (see lifespan).")
    return RedisCodeCache(
        redis, timeout_seconds=request.app.state.settings.store_timeout_seconds
    )


def get_code_store(
    cache: Annotated[CodeCachePort, Depends(get_code_cache)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> VerificationCodeStore:
    return VerificationCodeStore.from_settings(cache, settings)


def get_password_hasher(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PasswordHasherPort:
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def get_user_directory(request: Request) -> UserDirectoryPort:
    return request.app.state.user_directory


def get_delivery(request: Request) -> DeliveryPort:
    delivery = getattr(request.app.state, "delivery", None)
    if delivery is None:
        raise RuntimeError("Delivery channel not opened yet (see lifespan).")
    return delivery
