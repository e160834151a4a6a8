from __future__ import annotations

import os
import tempfile

# Settings are resolved at import time; pin them before vedic_api is imported.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="vedic_test_"))
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789-abcdefghijklmnop")
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy import update
from sqlalchemy.orm import sessionmaker

from vedic_api.api.deps import get_auth_service
from vedic_api.core.config import TokenSettings
from vedic_api.core.refresh_tokens import RefreshTokenManager
from vedic_api.core.security_password import PasswordHasher
from vedic_api.core.tokens import TokenIssuer
from vedic_api.crud.credential_store import SqlCredentialStore
from vedic_api.db.base import Base
from vedic_api.db.session import make_engine, make_session_factory
from vedic_api.main import app
from vedic_api.models.user import User
from vedic_api.services.auth import AuthSessionService

import vedic_api.models  # noqa: F401


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings(
        secret_key=SecretStr("unit-test-signing-key-0123456789-abcdefghijklmnop"),
        issuer="VedicAPI",
        audience="VedicAI",
    )


@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[sessionmaker]:
    engine = make_engine(f"sqlite:///{tmp_path / 'auth.db'}")
    Base.metadata.create_all(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def store(session_factory: sessionmaker) -> SqlCredentialStore:
    return SqlCredentialStore(session_factory)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher()


def build_service(store, token_settings: TokenSettings, hasher: PasswordHasher | None = None) -> AuthSessionService:
    return AuthSessionService(
        store=store,
        hasher=hasher or PasswordHasher(),
        tokens=TokenIssuer(token_settings),
        refresh_tokens=RefreshTokenManager(store, token_settings),
    )


@pytest.fixture
def service(store: SqlCredentialStore, token_settings: TokenSettings, hasher: PasswordHasher) -> AuthSessionService:
    return build_service(store, token_settings, hasher)


@pytest.fixture
def client(service: AuthSessionService) -> Iterator[TestClient]:
    app.dependency_overrides[get_auth_service] = lambda: service
    try:
        # no context manager: startup (migrations) is not needed here
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def deactivate(session_factory: sessionmaker):
    def _deactivate(user_id: int) -> None:
        with session_factory() as db:
            db.execute(update(User).where(User.id == user_id).values(is_active=False))
            db.commit()

    return _deactivate
