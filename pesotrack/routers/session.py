from typing import Optional

from fastapi import APIRouter, Depends

from pesotrack.db.dal import Database
from pesotrack.models.auth import SessionState
from pesotrack.models.profile import UserProfile
from pesotrack.services.identity.base import VerifiedIdentity
from pesotrack.services.session import get_db, get_optional_identity

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionState, summary="Which top-level view to show")
async def session_state(
    identity: Optional[VerifiedIdentity] = Depends(get_optional_identity),
    db: Database = Depends(get_db),
):
    """Return the gate decision for the caller.

    No token or a token the provider rejects -> the login view. A valid
    token -> the main view, with the profile when one exists.
    """
    if identity is None:
        return SessionState(authenticated=False, view="login")
    row = db.get_profile(identity.owner_id)
    return SessionState(
        authenticated=True,
        view="main",
        profile=UserProfile(**row) if row else None,
    )
