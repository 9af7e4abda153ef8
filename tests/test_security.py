from datetime import datetime, timedelta

import pytest
from jose import jwt

from app.core.config import settings
from app.core.exceptions import TokenInvalid
from app.core.security import (
    create_access_token, decode_access_token, get_password_hash, verify_password
)

class TestPasswordHashing:

    def test_hash_verifies(self):
        digest = get_password_hash("CorrectHorse1")
        assert digest != "CorrectHorse1"
        assert verify_password("CorrectHorse1", digest)

    def test_wrong_password_does_not_verify(self):
        digest = get_password_hash("CorrectHorse1")
        assert not verify_password("WrongHorse1", digest)

    def test_same_password_hashes_differently(self):
        first = get_password_hash("CorrectHorse1")
        second = get_password_hash("CorrectHorse1")
        assert first != second
        assert verify_password("CorrectHorse1", first)
        assert verify_password("CorrectHorse1", second)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("CorrectHorse1", "not-a-hash")

class TestAccessTokens:

    def test_round_trip(self):
        for account_id in (1, 42, 987654):
            assert decode_access_token(create_access_token(account_id)) == account_id

    def test_expires_thirty_days_out(self):
        before = datetime.utcnow()
        token = create_access_token(7)
        claims = jwt.get_unverified_claims(token)
        expires = datetime.utcfromtimestamp(claims["exp"])
        assert timedelta(days=29, hours=23) < expires - before <= timedelta(days=30, seconds=5)

    def test_expired_token_rejected(self):
        token = create_access_token(7, expires_delta=timedelta(seconds=-1))
        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token(7)
        header, payload, signature = token.split(".")
        forged = ".".join([header, payload, signature[::-1]])
        with pytest.raises(TokenInvalid):
            decode_access_token(forged)

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode(
            {"sub": "7", "exp": datetime.utcnow() + timedelta(days=1)},
            "some-other-secret",
            algorithm=settings.ALGORITHM
        )
        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_non_numeric_subject_rejected(self):
        token = jwt.encode(
            {"sub": "alice", "exp": datetime.utcnow() + timedelta(days=1)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM
        )
        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_missing_expiry_rejected(self):
        token = jwt.encode({"sub": "7"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        with pytest.raises(TokenInvalid):
            decode_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(TokenInvalid):
            decode_access_token("invalid_token")
