# vedic_api/models/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from vedic_api.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # token digest and its expiry are set and cleared together
        CheckConstraint(
            "(refresh_token_hash IS NULL) = (refresh_token_expires_at IS NULL)",
            name="refresh_token_pair",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # SHA-256 hex digest of the current refresh token
    refresh_token_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)
    refresh_token_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
