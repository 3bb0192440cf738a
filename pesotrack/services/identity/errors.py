"""Identity provider error codes and their user-facing messages.

The provider reports failures as short upper-case codes, sometimes followed
by a free-text hint (``"WEAK_PASSWORD : Password should be at least 6
characters"``). Only the code is kept; the text shown to users always comes
from the fixed table below.
"""

from __future__ import annotations

from typing import Dict, Literal, Optional

Operation = Literal["signup", "login", "refresh", "verify", "password_reset", "password_change"]

MESSAGES: Dict[str, str] = {
    "EMAIL_EXISTS": "An account with this email already exists",
    "EMAIL_NOT_FOUND": "No account found with this email address",
    "USER_NOT_FOUND": "No account found with this email address",
    "INVALID_PASSWORD": "Incorrect email or password",
    "INVALID_LOGIN_CREDENTIALS": "Incorrect email or password",
    "INVALID_EMAIL": "Invalid email address",
    "MISSING_PASSWORD": "Please fill in all fields",
    "WEAK_PASSWORD": "Password is too weak",
    "USER_DISABLED": "This account has been disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many requests. Please try again later",
    "OPERATION_NOT_ALLOWED": "This sign-in method is not enabled",
    "INVALID_ID_TOKEN": "Your session is no longer valid. Please log in again",
    "TOKEN_EXPIRED": "Your session has expired. Please log in again",
    "INVALID_REFRESH_TOKEN": "Your session has expired. Please log in again",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Please log out and log in again before changing your password",
}

# Per-operation wording where the generic message would mislead.
_OVERRIDES: Dict[Operation, Dict[str, str]] = {
    "password_change": {
        "INVALID_PASSWORD": "Current password is incorrect",
        "INVALID_LOGIN_CREDENTIALS": "Current password is incorrect",
    },
}

FALLBACKS: Dict[Operation, str] = {
    "signup": "Failed to authenticate",
    "login": "Failed to authenticate",
    "refresh": "Failed to refresh session",
    "verify": "Failed to verify session",
    "password_reset": "Failed to send reset email. Please try again",
    "password_change": "Failed to update password. Please try again",
}

SESSION_CODES = {"INVALID_ID_TOKEN", "TOKEN_EXPIRED", "INVALID_REFRESH_TOKEN", "USER_NOT_FOUND"}
THROTTLE_CODES = {"TOO_MANY_ATTEMPTS_TRY_LATER"}


def normalize_code(raw: Optional[str]) -> str:
    """Strip the provider's trailing hint and return the bare code."""
    if not raw:
        return "UNKNOWN"
    return raw.split(":", 1)[0].strip().upper() or "UNKNOWN"


def translate_error(code: str, operation: Operation) -> str:
    override = _OVERRIDES.get(operation, {}).get(code)
    if override:
        return override
    return MESSAGES.get(code, FALLBACKS[operation])


class IdentityError(Exception):
    """Base class for identity adapter failures."""


class AuthProviderError(IdentityError):
    """The provider rejected a request with an error code."""

    def __init__(self, code: str, operation: Operation):
        self.code = normalize_code(code)
        self.operation = operation
        self.message = translate_error(self.code, operation)
        super().__init__(f"{operation}: {self.code}")

    @property
    def status_code(self) -> int:
        if self.code in THROTTLE_CODES:
            return 429
        if self.operation in ("verify", "refresh") and self.code in SESSION_CODES:
            return 401
        return 400


class ProviderUnavailableError(IdentityError):
    """The provider could not be reached or answered with garbage."""

    message = "Authentication service is unavailable. Please try again later"
    status_code = 503


__all__ = [
    "MESSAGES",
    "FALLBACKS",
    "normalize_code",
    "translate_error",
    "IdentityError",
    "AuthProviderError",
    "ProviderUnavailableError",
]
