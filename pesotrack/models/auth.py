from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, field_validator, model_validator
from .constants import MIN_PASSWORD_LENGTH
from .profile import UserProfile


class SignupIn(BaseModel):
    email: EmailStr
    password: str
    name: str
    contact_number: str

    @field_validator("password", "name", "contact_number")
    @classmethod
    def _filled(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Please fill in all fields")
        return v

    @field_validator("name", "contact_number")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class LoginIn(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _filled(cls, v: str) -> str:
        if not v:
            raise ValueError("Please fill in all fields")
        return v


class RefreshIn(BaseModel):
    refresh_token: str


class PasswordResetIn(BaseModel):
    email: EmailStr


class PasswordChangeIn(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @model_validator(mode="after")
    def _rules(self) -> "PasswordChangeIn":
        if not (self.current_password and self.new_password and self.confirm_password):
            raise ValueError("Please fill in all fields")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        if self.current_password == self.new_password:
            raise ValueError("New password must be different from current password")
        return self


class SessionTokens(BaseModel):
    owner_id: str
    id_token: str
    refresh_token: str
    expires_in: int


class AuthResponse(BaseModel):
    tokens: SessionTokens
    profile: Optional[UserProfile] = None


class SessionState(BaseModel):
    authenticated: bool
    view: Literal["login", "main"]
    profile: Optional[UserProfile] = None
