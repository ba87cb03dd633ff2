from datetime import datetime, timedelta, timezone

from jose import jwt

from bookreviews.core.config import settings
from bookreviews.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_is_not_plaintext_and_verifies():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_verify_password_with_malformed_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_carries_identity_claims_and_seven_day_expiry():
    before = datetime.now(timezone.utc)
    token = create_access_token({"sub": "7", "email": "x@example.com", "name": "X"})
    claims = decode_access_token(token)

    assert claims["sub"] == "7"
    assert claims["email"] == "x@example.com"
    assert claims["name"] == "X"
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    assert timedelta(days=7) - timedelta(minutes=1) <= expires - before <= timedelta(days=7, minutes=1)


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "some-other-key",
        algorithm=settings.jwt_algorithm,
    )
    assert decode_access_token(forged) is None


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-5))
    assert decode_access_token(token) is None
