# vedic_api/schemas/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRecord(BaseModel):
    """Snapshot of a stored user, detached from any database session."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    email: str
    password_hash: str = Field(repr=False)
    created_at: datetime
    last_login_at: Optional[datetime] = None
    is_active: bool = True
    profile_image_url: Optional[str] = None
    refresh_token_hash: Optional[str] = Field(default=None, repr=False)
    refresh_token_expires_at: Optional[datetime] = None


class UserCreate(BaseModel):
    name: str
    email: str
    password_hash: str = Field(repr=False)
    profile_image_url: Optional[str] = None


class UserProfile(CamelModel):
    id: int
    name: str
    email: str          # str, not EmailStr: stored values are returned verbatim
    created_at: datetime
    last_login_at: Optional[datetime] = None
    profile_image_url: Optional[str] = None


class EmailAvailability(CamelModel):
    email: str
    available: bool
