# vedic_api/core/refresh_tokens.py
from __future__ import annotations

import hashlib
import hmac
import secrets

from vedic_api.core.config import TokenSettings
from vedic_api.core.tokens import Clock, utcnow
from vedic_api.crud.credential_store import CredentialStore
from vedic_api.schemas.token import IssuedToken
from vedic_api.schemas.user import UserRecord

REFRESH_TOKEN_BYTES = 64


def digest(token: str) -> str:
    # Lookup key; the raw token is never persisted
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class RefreshTokenManager:
    """Opaque refresh tokens: one live value per user, replaced on every issuance."""

    def __init__(self, store: CredentialStore, config: TokenSettings, clock: Clock = utcnow):
        self._store = store
        self._config = config
        self._clock = clock

    @staticmethod
    def generate() -> str:
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    @staticmethod
    def digest(token: str) -> str:
        return digest(token)

    async def rotate(self, user_id: int) -> IssuedToken:
        """Issue a new token for the user, overwriting whatever was stored."""
        value = self.generate()
        issued_at = self._clock()
        expires_at = issued_at + self._config.refresh_token_lifetime
        await self._store.update_refresh_token(user_id, digest(value), expires_at)
        return IssuedToken(value=value, issued_at=issued_at, expires_at=expires_at)

    async def revoke(self, user_id: int) -> None:
        await self._store.revoke_refresh_token(user_id)

    def is_current(self, user: UserRecord, presented: str) -> bool:
        if not user.refresh_token_hash or user.refresh_token_expires_at is None:
            return False
        if not hmac.compare_digest(user.refresh_token_hash, digest(presented)):
            return False
        return user.refresh_token_expires_at > self._clock()
