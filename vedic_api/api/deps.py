from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from vedic_api.core.config import settings
from vedic_api.core.refresh_tokens import RefreshTokenManager
from vedic_api.core.security_password import PasswordHasher
from vedic_api.core.tokens import TokenIssuer
from vedic_api.crud.credential_store import SqlCredentialStore
from vedic_api.db.session import SessionLocal
from vedic_api.schemas.token import AccessClaims
from vedic_api.services.auth import AuthSessionService


# ----------------------------------------------------------------------
# Service wiring: one instance per process, signing config injected once
# ----------------------------------------------------------------------
@lru_cache
def get_auth_service() -> AuthSessionService:
    token_settings = settings.token_settings()
    store = SqlCredentialStore(SessionLocal)
    return AuthSessionService(
        store=store,
        hasher=PasswordHasher(),
        tokens=TokenIssuer(token_settings),
        refresh_tokens=RefreshTokenManager(store, token_settings),
    )


# ----------------------------------------------------------------------
# Bearer token from the Authorization header (no OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail={"code": "UNAUTHORIZED", "message": "Missing Authorization header"})
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail={"code": "UNAUTHORIZED", "message": "Invalid Authorization header"})
    return parts[1]


# ----------------------------------------------------------------------
# Claims of a fully verified (unexpired) access token
# ----------------------------------------------------------------------
def get_current_claims(
    token: str = Depends(get_bearer_token),
    service: AuthSessionService = Depends(get_auth_service),
) -> AccessClaims:
    claims = service.tokens.verify(token)
    if claims is None:
        raise HTTPException(status_code=401, detail={"code": "INVALID_TOKEN", "message": "Invalid or expired token"})
    return claims
