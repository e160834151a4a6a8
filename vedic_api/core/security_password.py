# vedic_api/core/security_password.py
from __future__ import annotations
from typing import Tuple
from passlib.context import CryptContext

BCRYPT_ROUNDS = 12


class PasswordHasher:
    """
    bcrypt hashing through passlib; hashes carry their own salt and cost.

    New hashes use bcrypt_sha256, which pre-hashes the password so NUL bytes
    and anything past bcrypt's 72-byte limit still count. Plain bcrypt hashes
    verify and are re-hashed on the next successful login.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self._context = CryptContext(
            schemes=["bcrypt_sha256", "bcrypt"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
            # hashes below this cost are re-hashed on the next successful login
            bcrypt_sha256__min_rounds=rounds,
        )

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, stored_hash: str | None) -> bool:
        if not stored_hash:
            # burn comparable time so a missing user is not observable
            self._context.dummy_verify()
            return False
        try:
            return self._context.verify(plain, stored_hash)
        except (ValueError, TypeError):
            # malformed or unrecognized hash string
            return False

    def verify_and_update(self, plain: str, stored_hash: str | None) -> Tuple[bool, str | None]:
        """Return (ok, new_hash); new_hash is set when the stored hash is below the current policy."""
        if not self.verify(plain, stored_hash):
            return False, None
        if self._context.needs_update(stored_hash):
            return True, self._context.hash(plain)
        return True, None
