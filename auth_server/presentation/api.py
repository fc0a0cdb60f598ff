from fastapi import APIRouter

from auth_server.presentation.routers.auth import router as auth_router
from auth_server.presentation.routers.profile import router as profile_router
from auth_server.presentation.routes.health import router as health_router

api = APIRouter()

routers = (auth_router, profile_router, health_router)
for router in routers:
    api.include_router(router)
