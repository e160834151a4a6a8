# vedic_api/crud/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from vedic_api.models.user import User
from vedic_api.schemas.user import UserCreate


class CRUDUser:
    """Blocking unit-of-work helpers over the users table; callers own the session."""

    def get(self, db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def get_by_refresh_token_hash(self, db: Session, token_hash: str) -> Optional[User]:
        return db.execute(select(User).where(User.refresh_token_hash == token_hash)).scalar_one_or_none()

    def email_exists(self, db: Session, email: str) -> bool:
        count = db.scalar(select(func.count()).select_from(User).where(User.email == email))
        return bool(count)

    def create(self, db: Session, obj_in: UserCreate) -> User:
        user = User(**obj_in.model_dump(), is_active=True)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def set_last_login(self, db: Session, user_id: int, when: datetime) -> None:
        db.execute(update(User).where(User.id == user_id).values(last_login_at=when))
        db.commit()

    def set_refresh_token(self, db: Session, user_id: int, token_hash: Optional[str], expires_at: Optional[datetime]) -> None:
        # unconditional overwrite: last writer wins
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token_hash=token_hash, refresh_token_expires_at=expires_at)
        )
        db.commit()

    def set_password_hash(self, db: Session, user_id: int, password_hash: str, revoke_refresh_token: bool = False) -> None:
        values = {"password_hash": password_hash}
        if revoke_refresh_token:
            # one UPDATE: the new hash never lands without the revocation
            values.update(refresh_token_hash=None, refresh_token_expires_at=None)
        db.execute(update(User).where(User.id == user_id).values(**values))
        db.commit()


user_crud = CRUDUser()
