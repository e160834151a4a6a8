from __future__ import annotations

import pytest

from passlib.hash import bcrypt

from vedic_api.core.security_password import PasswordHasher

CURRENT_PREFIX = "$bcrypt-sha256$v=2,t=2b,r=12$"


def test_hash_roundtrip(hasher: PasswordHasher) -> None:
    h = hasher.hash("Secret123!")
    assert h != "Secret123!"
    assert hasher.verify("Secret123!", h)


def test_wrong_password_does_not_verify(hasher: PasswordHasher) -> None:
    h = hasher.hash("Secret123!")
    assert not hasher.verify("Secret123?", h)
    assert not hasher.verify("", h)


def test_hashes_are_salted_with_cost_12(hasher: PasswordHasher) -> None:
    a = hasher.hash("same-password")
    b = hasher.hash("same-password")
    assert a != b
    assert a.startswith(CURRENT_PREFIX)


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$2b$12$tooshort", None])
def test_malformed_hash_is_false_not_error(hasher: PasswordHasher, bad_hash) -> None:
    assert hasher.verify("whatever", bad_hash) is False


def test_unicode_password(hasher: PasswordHasher) -> None:
    h = hasher.hash("pässwörd-ॐ")
    assert hasher.verify("pässwörd-ॐ", h)
    assert not hasher.verify("passwörd-ॐ", h)


def test_nul_bytes_hash_and_verify(hasher: PasswordHasher) -> None:
    h = hasher.hash("Secret\x00123!")
    assert hasher.verify("Secret\x00123!", h)
    assert not hasher.verify("Secret", h)
    assert not hasher.verify("Secret\x00124!", h)


def test_bytes_past_72_still_count(hasher: PasswordHasher) -> None:
    prefix = "A" * 72
    h = hasher.hash(prefix + "secret-one")
    assert hasher.verify(prefix + "secret-one", h)
    assert not hasher.verify(prefix + "totally-different", h)
    assert not hasher.verify(prefix, h)


def test_multibyte_password_longer_than_72_bytes(hasher: PasswordHasher) -> None:
    pw = "ॐ" * 40  # 120 bytes in UTF-8
    h = hasher.hash(pw)
    assert hasher.verify(pw, h)
    assert not hasher.verify("ॐ" * 39 + "x", h)


def test_weaker_hash_is_upgraded_on_verify(hasher: PasswordHasher) -> None:
    weak = PasswordHasher(rounds=4).hash("Secret123!")
    assert weak.startswith("$bcrypt-sha256$v=2,t=2b,r=4$")

    ok, new_hash = hasher.verify_and_update("Secret123!", weak)
    assert ok
    assert new_hash is not None and new_hash.startswith(CURRENT_PREFIX)
    assert hasher.verify("Secret123!", new_hash)


def test_plain_bcrypt_hash_verifies_and_is_upgraded(hasher: PasswordHasher) -> None:
    legacy = bcrypt.using(rounds=12).hash("Secret123!")
    assert legacy.startswith("$2b$12$")
    assert hasher.verify("Secret123!", legacy)
    assert not hasher.verify("wrong", legacy)

    ok, new_hash = hasher.verify_and_update("Secret123!", legacy)
    assert ok
    assert new_hash is not None and new_hash.startswith(CURRENT_PREFIX)


def test_current_hash_needs_no_upgrade(hasher: PasswordHasher) -> None:
    ok, new_hash = hasher.verify_and_update("Secret123!", hasher.hash("Secret123!"))
    assert ok and new_hash is None

    ok, new_hash = hasher.verify_and_update("wrong", hasher.hash("Secret123!"))
    assert not ok and new_hash is None
