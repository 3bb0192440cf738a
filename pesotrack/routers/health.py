from fastapi import APIRouter, Depends

from pesotrack.core.config import Settings
from pesotrack.services.session import get_app_settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health(settings: Settings = Depends(get_app_settings)):
    return {"status": "ok", "version": settings.version}
