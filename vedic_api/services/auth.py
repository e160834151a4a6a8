# vedic_api/services/auth.py
"""
Session lifecycle: signup, login, refresh with rotation, logout, profile and
email lookups.

Every public coroutine returns ``Ok(value)`` or ``Err(AuthError)``. Business
outcomes (duplicate email, bad credentials, stale refresh token, ...) are plain
``Err`` values; persistence failures arrive as ``StorageError`` from the store,
already logged there, and leave as ``Err(TRANSIENT_STORAGE)``.
"""
from __future__ import annotations

import structlog
from fastapi.concurrency import run_in_threadpool

from vedic_api.core.errors import AuthError, AuthErrorCode, StorageError
from vedic_api.core.refresh_tokens import RefreshTokenManager
from vedic_api.core.result import Err, Ok, Result
from vedic_api.core.security_password import PasswordHasher
from vedic_api.core.tokens import TokenIssuer
from vedic_api.crud.credential_store import CredentialStore
from vedic_api.schemas.auth import AuthSession
from vedic_api.schemas.token import IssuedToken
from vedic_api.schemas.user import UserCreate, UserProfile, UserRecord

logger = structlog.get_logger(__name__)


def _fail(code: AuthErrorCode) -> Err:
    return Err(AuthError.of(code))


def _bundle(user: UserRecord, access: IssuedToken, refresh: IssuedToken) -> AuthSession:
    return AuthSession(
        id=user.id,
        name=user.name,
        email=user.email,
        access_token=access.value,
        refresh_token=refresh.value,
        token_expiry=access.expires_at,
        created_at=user.created_at,
        profile_image_url=user.profile_image_url,
    )


class AuthSessionService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        refresh_tokens: RefreshTokenManager,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.refresh_tokens = refresh_tokens

    async def _open_session(self, user: UserRecord) -> AuthSession:
        access = self.tokens.issue_access_token(user)
        refresh = await self.refresh_tokens.rotate(user.id)
        await self.store.update_last_login(user.id)
        return _bundle(user, access, refresh)

    async def signup(self, name: str, email: str, password: str) -> Result[AuthSession]:
        try:
            if await self.store.get_user_by_email(email) is not None:
                return _fail(AuthErrorCode.DUPLICATE_EMAIL)

            password_hash = await run_in_threadpool(self.hasher.hash, password)
            user = await self.store.create_user(UserCreate(name=name, email=email, password_hash=password_hash))
            if user is None:
                return _fail(AuthErrorCode.DUPLICATE_EMAIL)

            session = await self._open_session(user)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)

        logger.info("user signed up", user_id=user.id, email=email)
        return Ok(session)

    async def login(self, email: str, password: str) -> Result[AuthSession]:
        try:
            user = await self.store.get_user_by_email(email)
            # unknown email and wrong password must be indistinguishable
            ok, new_hash = await run_in_threadpool(
                self.hasher.verify_and_update, password, user.password_hash if user else None
            )
            if user is None or not ok:
                logger.info("login rejected", email=email)
                return _fail(AuthErrorCode.INVALID_CREDENTIALS)
            if not user.is_active:
                logger.info("login rejected for inactive account", user_id=user.id)
                return _fail(AuthErrorCode.INACTIVE_ACCOUNT)

            if new_hash:
                await self.store.update_password_hash(user.id, new_hash)
            session = await self._open_session(user)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)

        logger.info("user logged in", user_id=user.id)
        return Ok(session)

    async def refresh_session(self, access_token: str, refresh_token: str) -> Result[AuthSession]:
        claims = self.tokens.verify_signature_ignoring_expiry(access_token)
        if claims is None:
            return _fail(AuthErrorCode.INVALID_TOKEN)

        try:
            user = await self.store.get_user_by_refresh_token(self.refresh_tokens.digest(refresh_token))
            if (
                user is None
                or user.id != claims.subject_id
                or not self.refresh_tokens.is_current(user, refresh_token)
            ):
                logger.info("refresh rejected", user_id=claims.subject_id)
                return _fail(AuthErrorCode.INVALID_REFRESH_TOKEN)

            # No compare-and-swap: a concurrent refresh with the same token can
            # also pass the check above, and the later write wins.
            access = self.tokens.issue_access_token(user)
            refresh = await self.refresh_tokens.rotate(user.id)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)

        return Ok(_bundle(user, access, refresh))

    async def logout(self, user_id: int) -> Result[None]:
        """Drop the refresh token. Access tokens already issued stay valid until they expire."""
        try:
            await self.refresh_tokens.revoke(user_id)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)
        logger.info("user logged out", user_id=user_id)
        return Ok(None)

    async def get_profile(self, user_id: int) -> Result[UserProfile]:
        try:
            user = await self.store.get_user_by_id(user_id)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)
        if user is None:
            return _fail(AuthErrorCode.NOT_FOUND)
        return Ok(
            UserProfile(
                id=user.id,
                name=user.name,
                email=user.email,
                created_at=user.created_at,
                last_login_at=user.last_login_at,
                profile_image_url=user.profile_image_url,
            )
        )

    async def is_email_available(self, email: str) -> Result[bool]:
        try:
            return Ok(not await self.store.email_exists(email))
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)

    async def change_password(self, user_id: int, current_password: str, new_password: str) -> Result[None]:
        """
        The one path that writes a new password hash. The refresh token is
        revoked with it, so other sessions must log in again.
        """
        try:
            user = await self.store.get_user_by_id(user_id)
            if user is None:
                return _fail(AuthErrorCode.NOT_FOUND)
            if not await run_in_threadpool(self.hasher.verify, current_password, user.password_hash):
                return _fail(AuthErrorCode.INVALID_CREDENTIALS)

            new_hash = await run_in_threadpool(self.hasher.hash, new_password)
            await self.store.update_password_hash(user.id, new_hash, revoke_refresh_token=True)
        except StorageError:
            return _fail(AuthErrorCode.TRANSIENT_STORAGE)

        logger.info("password changed", user_id=user_id)
        return Ok(None)
