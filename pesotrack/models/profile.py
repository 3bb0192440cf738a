from __future__ import annotations
import base64
import binascii
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from .constants import AVATAR_DATA_URL_PREFIX


class UserProfile(BaseModel):
    id: str
    name: str
    email: str
    contact_number: str
    streak: int = Field(0, ge=0)
    avatar_url: Optional[str] = None
    created_at: datetime


class ProfileUpdateIn(BaseModel):
    """Partial profile edit. All fields optional; at least one must be provided."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    contact_number: Optional[str] = None

    @field_validator("name", "contact_number")
    @classmethod
    def _not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip() if v is not None else None

    @model_validator(mode="after")
    def _at_least_one(self) -> "ProfileUpdateIn":
        if all(
            getattr(self, f) is None for f in ("name", "email", "contact_number")
        ):
            raise ValueError("at least one field must be provided for update")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


def _split_data_url(data_url: str) -> tuple[str, str]:
    header, sep, payload = data_url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("avatar must be a base64 data URL")
    return header[len("data:") : -len(";base64")], payload


def decoded_size(data_url: str) -> int:
    _, payload = _split_data_url(data_url)
    return len(base64.b64decode(payload, validate=True))


class AvatarIn(BaseModel):
    data_url: str

    @field_validator("data_url")
    @classmethod
    def _valid_image_data_url(cls, v: str) -> str:
        if not v.startswith(AVATAR_DATA_URL_PREFIX):
            raise ValueError("Please select a valid image file")
        _, payload = _split_data_url(v)
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("Failed to read image file") from e
        return v
