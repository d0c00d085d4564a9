"""Tests for password hashing, JWTs and token hashing."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.siteline.core.config import get_settings
from src.siteline.core.security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    dummy_password_hash,
    generate_url_token,
    hash_password,
    hash_token,
    verify_password,
)

pytestmark = pytest.mark.unit


def test_password_round_trip():
    hashed = hash_password("site-crane-Girder-47!")
    assert hashed.startswith("$argon2id$")
    assert verify_password("site-crane-Girder-47!", hashed)
    assert not verify_password("wrong-password", hashed)


@pytest.mark.parametrize("hashed", [None, "", "not-an-argon2-hash"])
def test_verify_password_never_raises(hashed):
    assert verify_password("anything", hashed) is False


def test_dummy_hash_is_stable_and_matches_nothing():
    assert dummy_password_hash() == dummy_password_hash()
    assert not verify_password("", dummy_password_hash())


def test_access_token_claims():
    user_id = uuid4()
    payload = decode_token(create_access_token(user_id))
    assert payload is not None
    assert payload["sub"] == str(user_id)
    assert payload["type"] == TokenType.ACCESS


def test_expired_access_token_is_rejected():
    token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))
    assert decode_token(token) is None


def test_refresh_tokens_are_unique_per_call():
    user_id = uuid4()
    first, expires_at = create_refresh_token(user_id)
    second, _ = create_refresh_token(user_id)
    assert first != second
    assert expires_at.tzinfo is None
    assert decode_token(first)["type"] == TokenType.REFRESH  # type: ignore[index]


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {"sub": str(uuid4()), "type": TokenType.ACCESS},
        "another-secret-key-that-is-long-enough-000",
        algorithm=get_settings().jwt_algorithm,
    )
    assert decode_token(forged) is None
    assert decode_token("garbage") is None


def test_hash_token_is_deterministic_sha256():
    assert hash_token("abc") == hash_token("abc")
    assert len(hash_token("abc")) == 64


def test_url_tokens_are_long_enough_for_invites():
    token = generate_url_token()
    assert 32 <= len(token) <= 128
