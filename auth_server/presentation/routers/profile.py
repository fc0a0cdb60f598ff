from typing import Annotated

from fastapi import APIRouter, Depends

from auth_server.presentation.auth_gate import require_access_token
from auth_server.schemas.responses import ProfileOut

router = APIRouter(prefix="/api", tags=["Protected"])


@router.get("/profile", response_model=ProfileOut)
async def get_profile(subject: Annotated[str, Depends(require_access_token)]):
    return ProfileOut(subject=subject)
