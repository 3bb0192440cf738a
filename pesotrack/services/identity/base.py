from __future__ import annotations

"""Identity provider abstraction.

The service never stores credentials. Sign-up, sign-in, token checks and
password flows are forwarded to an external provider through this
interface; routers only ever see owner ids and opaque tokens.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IdentitySession:
    owner_id: str
    email: str
    id_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class VerifiedIdentity:
    owner_id: str
    email: str


class IdentityProvider(ABC):
    @abstractmethod
    def sign_up(self, email: str, password: str, display_name: str) -> IdentitySession:
        """Create a credential account and return a signed-in session."""
        raise NotImplementedError

    @abstractmethod
    def sign_in(self, email: str, password: str) -> IdentitySession:
        raise NotImplementedError

    @abstractmethod
    def refresh(self, refresh_token: str) -> IdentitySession:
        raise NotImplementedError

    @abstractmethod
    def verify(self, id_token: str) -> VerifiedIdentity:
        """Resolve an id token to its account; raises AuthProviderError when invalid."""
        raise NotImplementedError

    @abstractmethod
    def send_password_reset(self, email: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def change_password(
        self, email: str, current_password: str, new_password: str
    ) -> IdentitySession:
        """Re-authenticate with ``current_password`` then set ``new_password``."""
        raise NotImplementedError
