# vedic_api/core/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AuthErrorCode(str, Enum):
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    # Covers unknown email and wrong password alike
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INACTIVE_ACCOUNT = "INACTIVE_ACCOUNT"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    NOT_FOUND = "NOT_FOUND"
    TRANSIENT_STORAGE = "TRANSIENT_STORAGE"


_MESSAGES = {
    AuthErrorCode.DUPLICATE_EMAIL: "Email already exists",
    AuthErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    AuthErrorCode.INACTIVE_ACCOUNT: "Account is inactive",
    AuthErrorCode.INVALID_TOKEN: "Invalid access token",
    AuthErrorCode.INVALID_REFRESH_TOKEN: "Invalid refresh token",
    AuthErrorCode.NOT_FOUND: "User not found",
    AuthErrorCode.TRANSIENT_STORAGE: "An internal error occurred",
}


@dataclass(frozen=True, slots=True)
class AuthError:
    code: AuthErrorCode
    message: str

    @classmethod
    def of(cls, code: AuthErrorCode) -> "AuthError":
        return cls(code=code, message=_MESSAGES[code])


class StorageError(RuntimeError):
    """Raised by the credential store after a persistence failure has been logged."""

    def __init__(self, operation: str):
        super().__init__(f"credential store operation failed: {operation}")
        self.operation = operation
