# vedic_api/schemas/auth.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, TypeAdapter

from vedic_api.schemas.user import CamelModel

# Same validation and normalisation as the request bodies (domain lowercased,
# local part kept as given)
_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value: str) -> str:
    """Raises pydantic.ValidationError for a malformed address."""
    return _email_adapter.validate_python(value)


class SignupRequest(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshTokenRequest(CamelModel):
    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=100)


class AuthSession(CamelModel):
    """Bundle returned by signup, login and refresh."""

    id: int
    name: str
    email: str
    access_token: str
    refresh_token: str
    token_expiry: datetime
    created_at: datetime
    profile_image_url: Optional[str] = None


class ErrorBody(CamelModel):
    code: str
    message: str
