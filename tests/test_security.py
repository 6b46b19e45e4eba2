"""Unit tests for rawa.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from rawa.core.config import settings
from rawa.core.exceptions import InvalidInput
from rawa.core.security import (
    BCRYPT_ROUNDS,
    TokenClaims,
    create_access_token,
    hash_password,
    verify_access_token,
    verify_password,
)


class TestHashPassword(unittest.TestCase):
    def test_round_trip_matches(self) -> None:
        digest = hash_password("correct horse")
        self.assertTrue(verify_password("correct horse", digest))

    def test_wrong_password_does_not_match(self) -> None:
        digest = hash_password("correct horse")
        self.assertFalse(verify_password("battery staple", digest))

    def test_same_password_gets_distinct_salts(self) -> None:
        self.assertNotEqual(hash_password("secret1"), hash_password("secret1"))

    def test_digest_embeds_cost(self) -> None:
        digest = hash_password("secret1")
        self.assertTrue(digest.startswith(f"$2b${BCRYPT_ROUNDS:02d}$"), digest)

    def test_empty_password_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            hash_password("")

    def test_non_string_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            hash_password(None)  # type: ignore[arg-type]


class TestVerifyPassword(unittest.TestCase):
    """verify_password never raises; anything unusable is a mismatch."""

    def test_malformed_digest(self) -> None:
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))

    def test_missing_digest(self) -> None:
        self.assertFalse(verify_password("secret1", None))
        self.assertFalse(verify_password("secret1", ""))

    def test_non_string_plain(self) -> None:
        digest = hash_password("secret1")
        self.assertFalse(verify_password(None, digest))  # type: ignore[arg-type]


class TestAccessToken(unittest.TestCase):
    def test_fresh_token_yields_claims(self) -> None:
        token = create_access_token(42, "alice")
        self.assertEqual(verify_access_token(token), TokenClaims(user_id=42, username="alice"))

    def test_payload_carries_standard_claims(self) -> None:
        token = create_access_token(7, "bob", expires_delta=timedelta(minutes=5))
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
        )
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["username"], "bob")
        self.assertLessEqual(payload["exp"] - payload["iat"], 5 * 60)

    def test_expired_token_rejected(self) -> None:
        token = create_access_token(1, "alice", expires_delta=timedelta(seconds=-5))
        self.assertIsNone(verify_access_token(token))

    def test_tampered_signature_rejected(self) -> None:
        token = create_access_token(1, "alice")
        head, body, sig = token.split(".")
        flipped = ("A" if sig[0] != "A" else "B") + sig[1:]
        self.assertIsNone(verify_access_token(f"{head}.{body}.{flipped}"))

    def test_foreign_secret_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "username": "alice", "iat": now, "exp": now + timedelta(minutes=5)},
            "some-other-secret-of-sufficient-length",
            algorithm="HS256",
        )
        self.assertIsNone(verify_access_token(token))

    def test_missing_exp_rejected(self) -> None:
        token = jwt.encode(
            {"sub": "1", "username": "alice", "iat": datetime.now(UTC)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        self.assertIsNone(verify_access_token(token))

    def test_non_numeric_subject_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "alice", "username": "alice", "iat": now, "exp": now + timedelta(minutes=5)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        self.assertIsNone(verify_access_token(token))

    def test_garbage_and_empty_rejected(self) -> None:
        self.assertIsNone(verify_access_token("not.a.jwt"))
        self.assertIsNone(verify_access_token(""))
        self.assertIsNone(verify_access_token(None))


if __name__ == "__main__":
    unittest.main()
