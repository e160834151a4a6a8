# vedic_api/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from vedic_api.core.config import TokenSettings
from vedic_api.schemas.token import AccessClaims, IssuedToken
from vedic_api.schemas.user import UserRecord

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Signs and verifies access tokens (compact JWS, symmetric key)."""

    def __init__(self, config: TokenSettings, clock: Clock = utcnow):
        self._config = config
        self._clock = clock

    @property
    def algorithm(self) -> str:
        return self._config.algorithm

    def issue_access_token(self, user: UserRecord) -> IssuedToken:
        # JWT timestamps are whole seconds
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._config.access_token_lifetime
        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "name": user.name,
            "email": user.email,
            "jti": uuid.uuid4().hex,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        value = jwt.encode(payload, self._config.secret_key.get_secret_value(), algorithm=self.algorithm)
        return IssuedToken(value=value, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> Optional[AccessClaims]:
        """Full check: signature, algorithm, expiry (no leeway), issuer and audience."""
        return self._decode(
            token,
            audience=self._config.audience,
            issuer=self._config.issuer,
            options={"leeway": 0},
        )

    def verify_signature_ignoring_expiry(self, token: str) -> Optional[AccessClaims]:
        """
        Signature and algorithm only. Expired tokens are accepted so the refresh
        flow can recover the subject; never use this to authorize a request.
        """
        return self._decode(
            token,
            options={"verify_exp": False, "verify_aud": False, "verify_iss": False},
        )

    def _decode(self, token: str, **kwargs: Any) -> Optional[AccessClaims]:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            return None
        if str(header.get("alg", "")).upper() != self.algorithm.upper():
            return None
        try:
            payload = jwt.decode(
                token,
                self._config.secret_key.get_secret_value(),
                algorithms=[self.algorithm],
                **kwargs,
            )
        except JWTError:
            return None
        return _claims_from_payload(payload)


def _claims_from_payload(payload: Any) -> Optional[AccessClaims]:
    if not isinstance(payload, dict):
        return None
    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        return None
    try:
        return AccessClaims(
            subject_id=int(sub),
            name=payload["name"],
            email=payload["email"],
            token_id=payload["jti"],
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError, ValidationError):
        return None
