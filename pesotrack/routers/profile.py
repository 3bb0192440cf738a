import logging

from fastapi import APIRouter, Depends, HTTPException

from pesotrack.core.config import Settings
from pesotrack.db.dal import Database
from pesotrack.models.profile import AvatarIn, ProfileUpdateIn, UserProfile, decoded_size
from pesotrack.services.session import get_app_settings, get_current_owner, get_db

router = APIRouter(prefix="/profile", tags=["profile"])
logger = logging.getLogger("pesotrack.profile")


def _load(db: Database, owner_id: str) -> UserProfile:
    row = db.get_profile(owner_id)
    if not row:
        raise HTTPException(status_code=404, detail="profile not found")
    return UserProfile(**row)


@router.get("", response_model=UserProfile, summary="Current user's profile")
async def get_profile(
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    return _load(db, owner_id)


@router.patch("", response_model=UserProfile, summary="Edit name, email or contact number")
async def update_profile(
    payload: ProfileUpdateIn,
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    if not db.update_profile(owner_id, payload.changes()):
        raise HTTPException(status_code=404, detail="profile not found")
    return _load(db, owner_id)


@router.put("/avatar", response_model=UserProfile, summary="Replace the profile picture")
async def set_avatar(
    payload: AvatarIn,
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if decoded_size(payload.data_url) > settings.avatar_max_bytes:
        limit_mb = settings.avatar_max_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=413, detail=f"Image size should be less than {limit_mb}MB"
        )
    if not db.set_avatar(owner_id, payload.data_url):
        raise HTTPException(status_code=404, detail="profile not found")
    logger.info("avatar updated")
    return _load(db, owner_id)


@router.delete("/avatar", response_model=UserProfile, summary="Remove the profile picture")
async def clear_avatar(
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    if not db.set_avatar(owner_id, None):
        raise HTTPException(status_code=404, detail="profile not found")
    return _load(db, owner_id)
