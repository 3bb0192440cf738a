"""Request-scoped session utilities (the profile gate).

Resolves the bearer token on a request to the owning account through the
configured identity provider and stamps the owner id onto log records for
the rest of the request. FastAPI caches dependency results per request, so
the provider is asked at most once.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from pesotrack.core.config import Settings
from pesotrack.core.logging import owner_id_ctx
from pesotrack.db.dal import Database
from pesotrack.services.identity.base import IdentityProvider, VerifiedIdentity
from pesotrack.services.identity.errors import AuthProviderError


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return Database(request.app.state.settings.db_path)


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _bind_owner(request: Request, owner_id: str) -> None:
    # request.state is shared with the middleware, the ContextVar is not.
    owner_id_ctx.set(owner_id)
    request.state.owner_id = owner_id


async def get_current_identity(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> VerifiedIdentity:
    token = bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail="not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    identity = await run_in_threadpool(provider.verify, token)
    _bind_owner(request, identity.owner_id)
    return identity


async def get_optional_identity(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[VerifiedIdentity]:
    """Like get_current_identity but yields None instead of failing."""
    token = bearer_token(request)
    if token is None:
        return None
    try:
        identity = await run_in_threadpool(provider.verify, token)
    except AuthProviderError:
        return None
    _bind_owner(request, identity.owner_id)
    return identity


async def get_current_owner(
    identity: VerifiedIdentity = Depends(get_current_identity),
) -> str:
    return identity.owner_id


__all__ = [
    "get_app_settings",
    "get_db",
    "get_identity_provider",
    "bearer_token",
    "get_current_identity",
    "get_optional_identity",
    "get_current_owner",
]
