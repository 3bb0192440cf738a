from __future__ import annotations

"""Concrete identity providers and factory.

Both kinds speak the Identity Toolkit REST API (``accounts:*`` endpoints plus
the secure-token refresh endpoint). 'firebase-emulator' targets the local
auth emulator, which serves the same paths under its own host and accepts
any API key.
"""
import logging
from typing import Any, Dict, Optional

from pesotrack.core.config import Settings
from pesotrack.services.http_client import HttpError, HttpStatusError, post_json
from .base import IdentityProvider, IdentitySession, VerifiedIdentity
from .errors import AuthProviderError, Operation, ProviderUnavailableError

logger = logging.getLogger("pesotrack.identity")

IDENTITY_TOOLKIT_PATH = "identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_PATH = "securetoken.googleapis.com/v1"


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(
        self,
        api_key: str,
        *,
        identity_base_url: str = f"https://{IDENTITY_TOOLKIT_PATH}",
        token_base_url: str = f"https://{SECURE_TOKEN_PATH}",
        timeout: float = 5.0,
        retries: int = 2,
    ):
        self._api_key = api_key
        self._identity_base_url = identity_base_url.rstrip("/")
        self._token_base_url = token_base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries

    # ------------------------------------------------------------------
    def _call(
        self, url: str, payload: Dict[str, Any], operation: Operation
    ) -> Dict[str, Any]:
        try:
            return post_json(
                f"{url}?key={self._api_key}",
                payload,
                timeout=self._timeout,
                retries=self._retries,
            )
        except HttpStatusError as e:
            error = e.body.get("error") or {}
            code: Optional[str] = error.get("message") if isinstance(error, dict) else None
            raise AuthProviderError(code or f"HTTP_{e.status}", operation) from e
        except HttpError as e:
            logger.warning("identity provider call failed: %s", e)
            raise ProviderUnavailableError(str(e)) from e

    def _accounts(self, method: str, payload: Dict[str, Any], operation: Operation):
        return self._call(
            f"{self._identity_base_url}/accounts:{method}", payload, operation
        )

    @staticmethod
    def _session(data: Dict[str, Any], email: str = "") -> IdentitySession:
        return IdentitySession(
            owner_id=data["localId"],
            email=data.get("email", email),
            id_token=data["idToken"],
            refresh_token=data["refreshToken"],
            expires_in=int(data.get("expiresIn", 3600)),
        )

    # ------------------------------------------------------------------
    def sign_up(self, email: str, password: str, display_name: str) -> IdentitySession:  # type: ignore[override]
        data = self._accounts(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
            "signup",
        )
        session = self._session(data, email)
        if display_name:
            self._accounts(
                "update",
                {"idToken": session.id_token, "displayName": display_name},
                "signup",
            )
        return session

    def sign_in(self, email: str, password: str) -> IdentitySession:  # type: ignore[override]
        data = self._accounts(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
            "login",
        )
        return self._session(data, email)

    def refresh(self, refresh_token: str) -> IdentitySession:  # type: ignore[override]
        data = self._call(
            f"{self._token_base_url}/token",
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            "refresh",
        )
        # The token endpoint answers in snake_case.
        return IdentitySession(
            owner_id=data["user_id"],
            email="",
            id_token=data["id_token"],
            refresh_token=data["refresh_token"],
            expires_in=int(data.get("expires_in", 3600)),
        )

    def verify(self, id_token: str) -> VerifiedIdentity:  # type: ignore[override]
        data = self._accounts("lookup", {"idToken": id_token}, "verify")
        users = data.get("users") or []
        if not users:
            raise AuthProviderError("USER_NOT_FOUND", "verify")
        user = users[0]
        return VerifiedIdentity(owner_id=user["localId"], email=user.get("email", ""))

    def send_password_reset(self, email: str) -> None:  # type: ignore[override]
        self._accounts(
            "sendOobCode",
            {"requestType": "PASSWORD_RESET", "email": email},
            "password_reset",
        )

    def change_password(
        self, email: str, current_password: str, new_password: str
    ) -> IdentitySession:  # type: ignore[override]
        data = self._accounts(
            "signInWithPassword",
            {"email": email, "password": current_password, "returnSecureToken": True},
            "password_change",
        )
        fresh = self._session(data, email)
        updated = self._accounts(
            "update",
            {
                "idToken": fresh.id_token,
                "password": new_password,
                "returnSecureToken": True,
            },
            "password_change",
        )
        return self._session(updated, email)


def _hosted(settings: Settings) -> IdentityProvider:
    return FirebaseIdentityProvider(
        settings.identity_api_key,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    )


def _emulator(settings: Settings) -> IdentityProvider:
    host = settings.identity_emulator_host
    return FirebaseIdentityProvider(
        settings.identity_api_key or "emulator",
        identity_base_url=f"http://{host}/{IDENTITY_TOOLKIT_PATH}",
        token_base_url=f"http://{host}/{SECURE_TOKEN_PATH}",
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    )


_PROVIDER_REGISTRY = {
    "firebase": _hosted,
    "firebase-emulator": _emulator,
}


def make_identity_provider(settings: Settings) -> IdentityProvider:
    factory = _PROVIDER_REGISTRY.get(settings.identity_provider)
    if not factory:
        raise ValueError(f"Unknown identity provider kind '{settings.identity_provider}'")
    return factory(settings)
