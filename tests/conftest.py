import itertools
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from pesotrack.core.config import Settings
from pesotrack.main import create_app
from pesotrack.services.identity.base import (
    IdentityProvider,
    IdentitySession,
    VerifiedIdentity,
)
from pesotrack.services.identity.errors import AuthProviderError, ProviderUnavailableError


class FakeIdentityProvider(IdentityProvider):
    """In-memory stand-in for the hosted identity service."""

    def __init__(self):
        self._counter = itertools.count(1)
        self.accounts: Dict[str, dict] = {}  # email -> {uid, password, name}
        self.tokens: Dict[str, str] = {}  # id token -> uid
        self.refresh_tokens: Dict[str, str] = {}  # refresh token -> uid
        self.reset_emails: list[str] = []
        self.unavailable = False

    def _check(self):
        if self.unavailable:
            raise ProviderUnavailableError("connection refused")

    def _email_for(self, uid: str) -> str:
        return next(e for e, a in self.accounts.items() if a["uid"] == uid)

    def _issue(self, uid: str) -> IdentitySession:
        n = next(self._counter)
        id_token, refresh_token = f"id-{uid}-{n}", f"rt-{uid}-{n}"
        self.tokens[id_token] = uid
        self.refresh_tokens[refresh_token] = uid
        return IdentitySession(
            owner_id=uid,
            email=self._email_for(uid),
            id_token=id_token,
            refresh_token=refresh_token,
            expires_in=3600,
        )

    def sign_up(self, email, password, display_name):
        self._check()
        if email in self.accounts:
            raise AuthProviderError("EMAIL_EXISTS", "signup")
        if len(password) < 6:
            raise AuthProviderError(
                "WEAK_PASSWORD : Password should be at least 6 characters", "signup"
            )
        uid = f"user{len(self.accounts) + 1}"
        self.accounts[email] = {"uid": uid, "password": password, "name": display_name}
        return self._issue(uid)

    def sign_in(self, email, password):
        self._check()
        account = self.accounts.get(email)
        if not account or account["password"] != password:
            raise AuthProviderError("INVALID_LOGIN_CREDENTIALS", "login")
        return self._issue(account["uid"])

    def refresh(self, refresh_token):
        self._check()
        uid = self.refresh_tokens.get(refresh_token)
        if uid is None:
            raise AuthProviderError("INVALID_REFRESH_TOKEN", "refresh")
        return self._issue(uid)

    def verify(self, id_token):
        self._check()
        uid = self.tokens.get(id_token)
        if uid is None:
            raise AuthProviderError("INVALID_ID_TOKEN", "verify")
        return VerifiedIdentity(owner_id=uid, email=self._email_for(uid))

    def send_password_reset(self, email):
        self._check()
        if email not in self.accounts:
            raise AuthProviderError("EMAIL_NOT_FOUND", "password_reset")
        self.reset_emails.append(email)

    def change_password(self, email, current_password, new_password):
        self._check()
        account = self.accounts.get(email)
        if not account or account["password"] != current_password:
            raise AuthProviderError("INVALID_LOGIN_CREDENTIALS", "password_change")
        account["password"] = new_password
        return self._issue(account["uid"])


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, db_path=tmp_path / "test.db", debug=False)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def client(settings, identity):
    app = create_app(settings_override=settings, identity_override=identity)
    with TestClient(app) as c:
        yield c


def signup(client, email="ana@example.com", password="secret123", name="Ana Cruz"):
    resp = client.post(
        "/auth/signup",
        json={
            "email": email,
            "password": password,
            "name": name,
            "contact_number": "09171234567",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_headers(auth_response) -> Dict[str, str]:
    return {"Authorization": f"Bearer {auth_response['tokens']['id_token']}"}


@pytest.fixture
def user(client):
    return signup(client)


@pytest.fixture
def headers(user):
    return auth_headers(user)
