from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, inspect

from vedic_api.db.bootstrap import run_migrations


def test_upgrade_head_creates_users_table(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    run_migrations(url)

    engine = create_engine(url)
    try:
        insp = inspect(engine)
        assert "users" in insp.get_table_names()
        columns = {c["name"] for c in insp.get_columns("users")}
        assert {
            "id",
            "name",
            "email",
            "password_hash",
            "is_active",
            "profile_image_url",
            "created_at",
            "last_login_at",
            "refresh_token_hash",
            "refresh_token_expires_at",
        } <= columns
        unique_columns = {tuple(u["column_names"]) for u in insp.get_unique_constraints("users")}
        assert ("email",) in unique_columns
    finally:
        engine.dispose()


def test_upgrade_is_idempotent(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'twice.db'}"
    run_migrations(url)
    run_migrations(url)
