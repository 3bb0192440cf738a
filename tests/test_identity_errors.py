import pytest

from pesotrack.services.identity.errors import (
    AuthProviderError,
    ProviderUnavailableError,
    normalize_code,
    translate_error,
)


def test_normalize_code_strips_hint():
    assert normalize_code("WEAK_PASSWORD : Password should be at least 6 characters") == "WEAK_PASSWORD"
    assert normalize_code(None) == "UNKNOWN"


@pytest.mark.parametrize(
    "code,operation,message",
    [
        ("EMAIL_EXISTS", "signup", "An account with this email already exists"),
        ("INVALID_LOGIN_CREDENTIALS", "login", "Incorrect email or password"),
        ("WEAK_PASSWORD", "signup", "Password is too weak"),
        ("TOO_MANY_ATTEMPTS_TRY_LATER", "login", "Too many requests. Please try again later"),
        ("EMAIL_NOT_FOUND", "password_reset", "No account found with this email address"),
        ("INVALID_LOGIN_CREDENTIALS", "password_change", "Current password is incorrect"),
    ],
)
def test_translate_known_codes(code, operation, message):
    assert translate_error(code, operation) == message


def test_unknown_code_falls_back_per_operation():
    assert translate_error("SOMETHING_NEW", "login") == "Failed to authenticate"
    assert (
        translate_error("SOMETHING_NEW", "password_reset")
        == "Failed to send reset email. Please try again"
    )
    assert (
        translate_error("SOMETHING_NEW", "password_change")
        == "Failed to update password. Please try again"
    )


def test_status_codes():
    assert AuthProviderError("INVALID_ID_TOKEN", "verify").status_code == 401
    assert AuthProviderError("TOO_MANY_ATTEMPTS_TRY_LATER", "login").status_code == 429
    assert AuthProviderError("EMAIL_EXISTS", "signup").status_code == 400
    assert ProviderUnavailableError("down").status_code == 503


def test_error_keeps_bare_code():
    err = AuthProviderError("weak_password : too short", "signup")
    assert err.code == "WEAK_PASSWORD"
    assert err.message == "Password is too weak"
