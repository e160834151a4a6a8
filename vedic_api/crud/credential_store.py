# vedic_api/crud/credential_store.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, TypeVar

import structlog
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vedic_api.core.errors import StorageError
from vedic_api.crud.user import user_crud
from vedic_api.schemas.user import UserCreate, UserRecord

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CredentialStore(Protocol):
    """Persistence collaborator for users. Absence is reported as None, failures raise StorageError."""

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]: ...
    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]: ...
    async def get_user_by_refresh_token(self, token_hash: str) -> Optional[UserRecord]: ...
    async def email_exists(self, email: str) -> bool: ...
    async def create_user(self, user: UserCreate) -> Optional[UserRecord]: ...
    async def update_last_login(self, user_id: int) -> None: ...
    async def update_refresh_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None: ...
    async def revoke_refresh_token(self, user_id: int) -> None: ...
    async def update_password_hash(
        self, user_id: int, password_hash: str, revoke_refresh_token: bool = False
    ) -> None: ...


def _as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _record(user) -> Optional[UserRecord]:
    if user is None:
        return None
    record = UserRecord.model_validate(user)
    return record.model_copy(
        update={
            "created_at": _as_utc(record.created_at),
            "last_login_at": _as_utc(record.last_login_at),
            "refresh_token_expires_at": _as_utc(record.refresh_token_expires_at),
        }
    )


class SqlCredentialStore:
    """CredentialStore over SQLAlchemy. Each call runs in the threadpool with its own session."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def _run(self, operation: str, fn: Callable[[Session], T], **context) -> T:
        def _work() -> T:
            with self._session_factory() as db:
                try:
                    return fn(db)
                except SQLAlchemyError:
                    db.rollback()
                    raise

        try:
            return await run_in_threadpool(_work)
        except SQLAlchemyError as exc:
            logger.error("credential store failure", operation=operation, error=type(exc).__name__, **context)
            raise StorageError(operation) from exc

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return await self._run("get_user_by_email", lambda db: _record(user_crud.get_by_email(db, email)), email=email)

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        return await self._run("get_user_by_id", lambda db: _record(user_crud.get(db, user_id)), user_id=user_id)

    async def get_user_by_refresh_token(self, token_hash: str) -> Optional[UserRecord]:
        return await self._run(
            "get_user_by_refresh_token", lambda db: _record(user_crud.get_by_refresh_token_hash(db, token_hash))
        )

    async def email_exists(self, email: str) -> bool:
        return await self._run("email_exists", lambda db: user_crud.email_exists(db, email), email=email)

    async def create_user(self, user: UserCreate) -> Optional[UserRecord]:
        def _create(db: Session) -> Optional[UserRecord]:
            try:
                return _record(user_crud.create(db, user))
            except IntegrityError:
                # lost a race on the unique email
                db.rollback()
                return None

        return await self._run("create_user", _create, email=user.email)

    async def update_last_login(self, user_id: int) -> None:
        now = datetime.now(timezone.utc)
        await self._run("update_last_login", lambda db: user_crud.set_last_login(db, user_id, now), user_id=user_id)

    async def update_refresh_token(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        await self._run(
            "update_refresh_token",
            lambda db: user_crud.set_refresh_token(db, user_id, token_hash, expires_at),
            user_id=user_id,
        )

    async def revoke_refresh_token(self, user_id: int) -> None:
        await self._run(
            "revoke_refresh_token", lambda db: user_crud.set_refresh_token(db, user_id, None, None), user_id=user_id
        )

    async def update_password_hash(self, user_id: int, password_hash: str, revoke_refresh_token: bool = False) -> None:
        await self._run(
            "update_password_hash",
            lambda db: user_crud.set_password_hash(db, user_id, password_hash, revoke_refresh_token),
            user_id=user_id,
        )
