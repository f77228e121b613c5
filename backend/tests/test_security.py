from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from backend.app import security
from backend.app.enums import UserRole
from backend.app.security import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_REFRESH,
    SecurityConfigurationError,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_password_hash,
    hash_reset_token,
    verify_password,
)


def _user(role: UserRole = UserRole.USER) -> SimpleNamespace:
    return SimpleNamespace(id="2f1c7a4e-2d36-4a8a-9b1e-5d3c0f7b9a11", role=role)


def test_password_hash_round_trip_uses_random_salt():
    first = generate_password_hash("Secr3tPass", iterations=1_000)
    second = generate_password_hash("Secr3tPass", iterations=1_000)

    assert first != second
    assert first.startswith("1000$")
    assert verify_password("Secr3tPass", first)
    assert not verify_password("secr3tpass", first)


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        generate_password_hash("")


def test_reset_tokens_are_stored_as_sha256_digests():
    digest = hash_reset_token("abc123")

    assert len(digest) == 64
    assert digest == hash_reset_token("abc123")
    assert digest != hash_reset_token("abc124")


def test_access_token_carries_subject_role_and_type():
    token = create_access_token(_user(UserRole.ADMIN))

    payload = decode_token(token)

    assert payload["sub"] == _user().id
    assert payload["role"] == "admin"
    assert payload["type"] == TOKEN_TYPE_ACCESS


def test_token_types_are_not_interchangeable():
    user = _user()

    with pytest.raises(TokenError):
        decode_token(create_refresh_token(user), TOKEN_TYPE_ACCESS)
    with pytest.raises(TokenError):
        decode_token(create_access_token(user), TOKEN_TYPE_REFRESH)
    assert decode_token(create_refresh_token(user), TOKEN_TYPE_REFRESH)["sub"] == user.id


def test_tampered_and_malformed_tokens_are_rejected():
    token = create_access_token(_user())
    header, payload, signature = token.split(".")
    forged = create_access_token(_user(UserRole.ADMIN)).split(".")[1]

    for candidate in (f"{header}.{forged}.{signature}", "garbage", "a.b"):
        with pytest.raises(TokenError):
            decode_token(candidate)


@pytest.mark.parametrize("candidate", ["a\xe9.b.AAAA", "héader.payload.c2ln", "☃.☃.☃"])
def test_non_ascii_tokens_are_malformed(candidate):
    with pytest.raises(TokenError):
        decode_token(candidate)


def test_expired_token_is_rejected():
    expired = security._encode_jwt(
        {
            "sub": _user().id,
            "role": "user",
            "type": TOKEN_TYPE_ACCESS,
            "exp": int((datetime.now(timezone.utc) - timedelta(seconds=5)).timestamp()),
        },
        security._signing_key(TOKEN_TYPE_ACCESS),
    )

    with pytest.raises(TokenError, match="expired"):
        decode_token(expired)


def test_token_lifetime_is_configurable(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "5")

    payload = decode_token(create_access_token(_user()))

    remaining = payload["exp"] - datetime.now(timezone.utc).timestamp()
    assert 0 < remaining <= 5 * 60


def test_invalid_token_lifetime_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0")

    with pytest.raises(SecurityConfigurationError):
        create_access_token(_user())


def test_missing_signing_secret_is_a_configuration_error(monkeypatch):
    security._load_signing_key.cache_clear()
    monkeypatch.delenv("JWT_SECRET")
    try:
        with pytest.raises(SecurityConfigurationError):
            create_access_token(_user())
    finally:
        monkeypatch.undo()
        security._load_signing_key.cache_clear()
