import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from auth_server.domain.errors import StoreUnavailable

logger = logging.getLogger("auth_server.presentation.errors")


async def _store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error(
        "verification code store unavailable",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "service unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreUnavailable, _store_unavailable)
