# tests/test_identity.py

from datetime import timedelta

import pytest
from jose import jwt

from core import identity
from core.errors import ConflictError, InvalidCredentialsError, NotFoundError
from core.security import create_access_token, decode_access_token, verify_password


def test_signup_stores_only_password_hash(db):
    user = identity.signup(db, "alice", "alice@example.com", "s3cret")
    assert user.id is not None
    assert user.hashed_password != "s3cret"
    assert verify_password("s3cret", user.hashed_password)


def test_signup_with_taken_email_conflicts(db):
    identity.signup(db, "alice", "alice@example.com", "s3cret")
    with pytest.raises(ConflictError):
        identity.signup(db, "other", "alice@example.com", "different")


def test_signin_returns_token_for_user(db, settings):
    user = identity.signup(db, "alice", "alice@example.com", "s3cret")
    token = identity.signin(db, settings, "alice@example.com", "s3cret")

    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])
    assert payload["sub"] == str(user.id)
    assert "exp" in payload


def test_signin_with_wrong_password(db, settings):
    identity.signup(db, "alice", "alice@example.com", "s3cret")
    with pytest.raises(InvalidCredentialsError):
        identity.signin(db, settings, "alice@example.com", "wrong")


def test_signin_with_unknown_email(db, settings):
    with pytest.raises(NotFoundError):
        identity.signin(db, settings, "nobody@example.com", "s3cret")


def test_decode_rejects_expired_and_foreign_tokens(settings):
    secret = settings.jwt_secret_key
    expired = create_access_token({"sub": "1"}, secret, expires_delta=timedelta(minutes=-1))
    assert decode_access_token(expired, secret) is None

    foreign = create_access_token({"sub": "1"}, "another-secret")
    assert decode_access_token(foreign, secret) is None

    valid = create_access_token({"sub": "1"}, secret)
    assert decode_access_token(valid, secret) == "1"
