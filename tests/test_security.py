from __future__ import annotations

import jwt
import pytest
from argon2 import PasswordHasher

from services.exceptions import TokenExpired, TokenInvalid
from utils.security import (
    ACCESS,
    REFRESH,
    Argon2PasswordEncoder,
    TokenCodec,
    generate_temp_password,
)


@pytest.fixture
def codec():
    return TokenCodec("unit-secret")


@pytest.fixture
def encoder():
    return Argon2PasswordEncoder(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


def test_decode_returns_exactly_the_encoded_claims(codec):
    claims = {"id": "7", "loginId": "bob", "authorities": ["ROLE_MEMBER"]}
    token = codec.encode(ACCESS, 1, claims)
    assert codec.decode(token) == claims


def test_token_carries_expiration_and_kind(codec):
    token = codec.encode(REFRESH, 3, {"id": "1"})
    raw = jwt.decode(token, "unit-secret", algorithms=["HS256"], issuer="member-api")
    assert raw["type"] == "refresh"
    assert raw["exp"] - raw["iat"] == pytest.approx(3 * 24 * 3600, abs=1)


def test_two_tokens_with_same_claims_differ(codec):
    assert codec.encode(REFRESH, 3, {"id": "1"}) != codec.encode(REFRESH, 3, {"id": "1"})


def test_elapsed_ttl_raises_expired(codec):
    token = codec.encode(ACCESS, -1, {"id": "1"})
    with pytest.raises(TokenExpired):
        codec.decode(token)


def test_bad_signature_is_invalid_not_expired(codec):
    token = TokenCodec("other-secret").encode(ACCESS, 1, {"id": "1"})
    with pytest.raises(TokenInvalid):
        codec.decode(token)


def test_malformed_token_is_invalid(codec):
    with pytest.raises(TokenInvalid):
        codec.decode("not-a-jwt")


def test_decode_with_kind_rejects_other_kind(codec):
    token = codec.encode(REFRESH, 1, {"id": "1"})
    assert codec.decode_with_kind(token, REFRESH) == {"id": "1"}
    with pytest.raises(TokenInvalid):
        codec.decode_with_kind(token, ACCESS)


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        TokenCodec("")


def test_password_encoder_hashes_and_matches(encoder):
    hashed = encoder.encode("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert encoder.matches("s3cret-pass", hashed)
    assert not encoder.matches("wrong-pass", hashed)


def test_password_encoder_rejects_unparseable_hash(encoder):
    assert not encoder.matches("anything", "plain-text-not-a-hash")


def test_temp_password_mixes_character_classes():
    for _ in range(20):
        pw = generate_temp_password()
        assert len(pw) == 10
        assert any(c.isalpha() for c in pw)
        assert any(c.isdigit() for c in pw)
        assert any(not c.isalnum() for c in pw)
