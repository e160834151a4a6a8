# vedic_api/schemas/token.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class AccessClaims(BaseModel):
    """Identity read from an access token whose signature has been verified."""

    model_config = ConfigDict(frozen=True)

    subject_id: int
    name: str
    email: str
    token_id: str
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    issued_at: datetime
    expires_at: datetime
