import logging

from fastapi import APIRouter, Depends, HTTPException

from pesotrack.db.dal import Database
from pesotrack.models.auth import (
    AuthResponse,
    LoginIn,
    PasswordChangeIn,
    PasswordResetIn,
    RefreshIn,
    SessionTokens,
    SignupIn,
)
from pesotrack.models.profile import UserProfile
from pesotrack.services.identity.base import IdentityProvider, IdentitySession, VerifiedIdentity
from pesotrack.services.session import get_current_identity, get_db, get_identity_provider

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("pesotrack.auth")

# Endpoints here are plain `def`: provider calls block, so FastAPI runs them in
# its threadpool.


def _tokens(session: IdentitySession) -> SessionTokens:
    return SessionTokens(
        owner_id=session.owner_id,
        id_token=session.id_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
    )


def _profile(db: Database, owner_id: str):
    row = db.get_profile(owner_id)
    return UserProfile(**row) if row else None


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=201,
    summary="Create an account and its profile",
)
def signup(
    payload: SignupIn,
    provider: IdentityProvider = Depends(get_identity_provider),
    db: Database = Depends(get_db),
):
    # 1. Credential account at the provider (raises AuthProviderError on rejection)
    session = provider.sign_up(payload.email, payload.password, payload.name)
    # 2. Profile record keyed by the provider uid
    db.create_profile(
        session.owner_id,
        name=payload.name,
        email=payload.email,
        contact_number=payload.contact_number,
    )
    logger.info("created profile for %s", session.owner_id)
    return AuthResponse(tokens=_tokens(session), profile=_profile(db, session.owner_id))


@router.post("/login", response_model=AuthResponse, summary="Sign in with email and password")
def login(
    payload: LoginIn,
    provider: IdentityProvider = Depends(get_identity_provider),
    db: Database = Depends(get_db),
):
    session = provider.sign_in(payload.email, payload.password)
    return AuthResponse(tokens=_tokens(session), profile=_profile(db, session.owner_id))


@router.post("/refresh", response_model=SessionTokens, summary="Exchange a refresh token")
def refresh(
    payload: RefreshIn,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    return _tokens(provider.refresh(payload.refresh_token))


@router.post(
    "/password-reset",
    status_code=202,
    summary="Send a password reset email",
)
def password_reset(
    payload: PasswordResetIn,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    provider.send_password_reset(payload.email)
    return {
        "detail": "Password reset email sent! Please check your inbox and spam folder."
    }


@router.post(
    "/password",
    response_model=SessionTokens,
    summary="Change password after re-authenticating",
)
def change_password(
    payload: PasswordChangeIn,
    identity: VerifiedIdentity = Depends(get_current_identity),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    if not identity.email:
        raise HTTPException(status_code=400, detail="No user is currently logged in")
    session = provider.change_password(
        identity.email, payload.current_password, payload.new_password
    )
    logger.info("password updated")
    return _tokens(session)
