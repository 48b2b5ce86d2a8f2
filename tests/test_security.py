import pytest

from sessionauth.core.security import (
    decode_session_token,
    encode_session_token,
    hash_password,
    verify_password,
)


def test_hash_is_salted_and_never_plaintext():
    first = hash_password("hunter2", rounds=4)
    second = hash_password("hunter2", rounds=4)
    assert first != "hunter2"
    assert first != second
    assert first.startswith("$2b$04$")


def test_verify_password_matches_only_original():
    hashed = hash_password("hunter2", rounds=4)
    assert verify_password("hunter2", hashed) is True
    assert verify_password("hunter3", hashed) is False
    assert verify_password("", hashed) is False


def test_verify_password_rejects_non_bcrypt_values():
    assert verify_password("hunter2", "") is False
    assert verify_password("hunter2", "hunter2") is False


def test_passwords_longer_than_bcrypt_limit_are_truncated_consistently():
    long_password = "x" * 100
    hashed = hash_password(long_password, rounds=4)
    assert verify_password(long_password, hashed)
    assert verify_password("x" * 72 + "different tail", hashed)


def test_session_token_round_trip():
    token = encode_session_token("abc", "secret", max_age=60)
    assert "abc" != token
    assert decode_session_token(token, "secret") == "abc"


def test_session_token_with_wrong_secret_is_rejected():
    token = encode_session_token("abc", "secret", max_age=60)
    with pytest.raises(ValueError):
        decode_session_token(token, "other-secret")


def test_expired_session_token_is_rejected():
    token = encode_session_token("abc", "secret", max_age=-10)
    with pytest.raises(ValueError):
        decode_session_token(token, "secret")


def test_garbage_session_token_is_rejected():
    with pytest.raises(ValueError):
        decode_session_token("not-a-token", "secret")
