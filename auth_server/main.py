from contextlib import asynccontextmanager
from fastapi import FastAPI

from auth_server.domain.errors import ConfigError
from auth_server.domain.ports.delivery_port import DeliveryPort
from auth_server.domain.ports.user_directory import UserDirectoryPort
from auth_server.infrastructure.delivery.http_delivery_adapter import (
    HttpDeliveryAdapter,
)
from auth_server.infrastructure.http.client import (
    close_http_client,
    open_http_client,
    get_http_client,
)
from auth_server.infrastructure.redis_cache.pool import get_redis, close_redis
from auth_server.infrastructure.security.signer import Signer
from auth_server.infrastructure.security.tokens import TokenIssuer, TokenVerifier
from auth_server.logging import setup_logging
from auth_server.presentation.api import api
from auth_server.presentation.errors import register_exception_handlers
from auth_server.settings import Settings, get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    settings: Settings = app.state.settings
    await open_http_client()

    app.state.redis = get_redis(settings)

    # Create ONE shared delivery adapter, using the shared HTTP client,
    # unless the embedding application supplied its own channel
    owned_adapter = None
    if app.state.delivery is None:
        owned_adapter = HttpDeliveryAdapter(
            base_url=settings.delivery_base_url,
            client=get_http_client(),
        )
        app.state.delivery = owned_adapter  # expose to dependencies

    try:
        yield
    finally:
        # shutdown
        if owned_adapter is not None:
            await owned_adapter.aclose()  # it won't close the shared client
            app.state.delivery = None
        await close_http_client()  # closes the shared client
        await close_redis()
        app.state.redis = None


def create_app(
    *,
    user_directory: UserDirectoryPort | None = None,
    delivery: DeliveryPort | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the API around the embedding application's user directory.

    There is no module-level app: serve it through a factory that supplies
    the directory, e.g. `uvicorn --factory myservice.asgi:build_app`.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    # Fails with ConfigError right here when JWT_SECRET is missing
    signer = Signer.from_settings(settings)
    if user_directory is None:
        raise ConfigError("a user directory is required to serve /auth routes")

    app = FastAPI(title="Auth API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.token_issuer = TokenIssuer.from_settings(signer, settings)
    app.state.token_verifier = TokenVerifier(signer)
    app.state.user_directory = user_directory
    app.state.delivery = delivery
    app.state.redis = None
    register_exception_handlers(app)
    app.include_router(api)
    return app
