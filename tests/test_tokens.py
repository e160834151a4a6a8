from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone

from jose import jwt
from pydantic import SecretStr

from vedic_api.core.config import TokenSettings
from vedic_api.core.tokens import TokenIssuer
from vedic_api.schemas.user import UserRecord


def _user(user_id: int = 7) -> UserRecord:
    return UserRecord(
        id=user_id,
        name="Asha",
        email="asha@example.com",
        password_hash="x",
        created_at=datetime.now(timezone.utc),
    )


def _b64(obj: dict) -> str:
    raw = json.dumps(obj, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _payload(**overrides) -> dict:
    now = int(datetime.now(timezone.utc).timestamp())
    data = {
        "sub": "7",
        "name": "Asha",
        "email": "asha@example.com",
        "jti": "abc",
        "iss": "VedicAPI",
        "aud": "VedicAI",
        "iat": now,
        "exp": now + 3600,
    }
    data.update(overrides)
    return data


def test_issued_token_verifies_to_user_with_24h_lifetime(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    issued = issuer.issue_access_token(_user())

    assert issued.value.count(".") == 2
    claims = issuer.verify(issued.value)
    assert claims is not None
    assert claims.subject_id == 7
    assert claims.name == "Asha"
    assert claims.email == "asha@example.com"
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)
    assert claims.expires_at == issued.expires_at


def test_each_issuance_has_a_unique_token_id(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    a = issuer.verify(issuer.issue_access_token(_user()).value)
    b = issuer.verify(issuer.issue_access_token(_user()).value)
    assert a is not None and b is not None
    assert a.token_id != b.token_id


def test_expired_token_only_passes_relaxed_check(token_settings: TokenSettings) -> None:
    past = datetime.now(timezone.utc) - timedelta(hours=30)
    issuer = TokenIssuer(token_settings, clock=lambda: past)
    token = issuer.issue_access_token(_user()).value

    assert issuer.verify(token) is None
    claims = issuer.verify_signature_ignoring_expiry(token)
    assert claims is not None
    assert claims.subject_id == 7


def test_tampered_or_foreign_signature_is_rejected(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    token = issuer.issue_access_token(_user()).value
    head, payload, sig = token.split(".")
    forged_payload = _b64(_payload(sub="8"))

    assert issuer.verify_signature_ignoring_expiry(f"{head}.{forged_payload}.{sig}") is None

    other_key = SecretStr("another-key-0123456789-abcdefghijklmnopqr")
    other = TokenIssuer(token_settings.model_copy(update={"secret_key": other_key}))
    assert other.verify_signature_ignoring_expiry(token) is None
    assert other.verify(token) is None


def test_other_algorithms_are_rejected(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    secret = token_settings.secret_key.get_secret_value()

    hs512 = jwt.encode(_payload(), secret, algorithm="HS512")
    assert issuer.verify(hs512) is None
    assert issuer.verify_signature_ignoring_expiry(hs512) is None

    unsigned = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64(_payload())}."
    assert issuer.verify(unsigned) is None
    assert issuer.verify_signature_ignoring_expiry(unsigned) is None


def test_missing_or_non_numeric_subject_is_rejected(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    secret = token_settings.secret_key.get_secret_value()

    no_sub = _payload()
    no_sub.pop("sub")
    assert issuer.verify_signature_ignoring_expiry(jwt.encode(no_sub, secret, algorithm="HS256")) is None

    named_sub = jwt.encode(_payload(sub="asha"), secret, algorithm="HS256")
    assert issuer.verify_signature_ignoring_expiry(named_sub) is None


def test_audience_and_issuer_checked_only_by_full_verification(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    secret = token_settings.secret_key.get_secret_value()
    token = jwt.encode(_payload(aud="someone-else", iss="elsewhere"), secret, algorithm="HS256")

    assert issuer.verify(token) is None
    assert issuer.verify_signature_ignoring_expiry(token) is not None


def test_garbage_is_rejected(token_settings: TokenSettings) -> None:
    issuer = TokenIssuer(token_settings)
    for junk in ("", "abc", "a.b.c", "eyJhbGciOiJIUzI1NiJ9..."):
        assert issuer.verify(junk) is None
        assert issuer.verify_signature_ignoring_expiry(junk) is None
