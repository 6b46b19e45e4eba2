"""End-to-end tests for the auth endpoints over an in-memory database and a recording mailer."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from rawa.core.security import create_access_token, verify_access_token
from rawa.models import User, VerificationCode
from tests.helpers import (
    API,
    DEFAULT_PASSWORD,
    RecordingMailer,
    auth_header,
    codes_for,
    make_client,
    make_session_factory,
    make_user,
    reset_overrides,
)


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.mailer = RecordingMailer()
        self.client = make_client(self.session_factory, self.mailer)
        self.db = self.session_factory()

    def tearDown(self) -> None:
        self.db.close()
        reset_overrides()

    def _user(self, username: str) -> User:
        self.db.expire_all()
        return self.db.query(User).filter(User.username == username).one()

    def _signup(self, **overrides: object):
        body = {"username": "alice", "password": DEFAULT_PASSWORD, "email": "alice@example.com"}
        body.update(overrides)
        return self.client.post(f"{API}/signup", json=body)


class TestSignup(AuthApiTestCase):
    def test_with_email_requires_verification(self) -> None:
        response = self._signup()
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertTrue(data["needs_verification"])
        self.assertIsNone(data["access_token"])
        self.assertEqual(data["user"]["role"], "USER")
        self.assertFalse(data["user"]["email_verified"])
        self.assertNotIn("password_hash", data["user"])

        user = self._user("alice")
        codes = codes_for(self.db, user.id)
        self.assertEqual(len(codes), 1)
        self.assertFalse(codes[0].consumed)
        self.assertEqual(len(self.mailer.sent), 1)
        self.assertEqual(self.mailer.sent[0].to, "alice@example.com")

    def test_without_email_returns_token(self) -> None:
        response = self._signup(email=None)
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertFalse(data["needs_verification"])
        self.assertEqual(data["token_type"], "bearer")
        claims = verify_access_token(data["access_token"])
        self.assertEqual(claims.username, "alice")
        self.assertEqual(self.mailer.sent, [])

    def test_duplicate_username(self) -> None:
        make_user(self.db, "alice")
        response = self._signup(email="other@example.com")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Username already exists")

    def test_duplicate_email(self) -> None:
        make_user(self.db, "bob", email="alice@example.com")
        response = self._signup()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Email already exists")

    def test_mail_failure_persists_nothing(self) -> None:
        self.mailer.fail = True
        response = self._signup()
        self.assertEqual(response.status_code, 503)
        self.assertEqual(self.db.query(User).count(), 0)
        self.assertEqual(self.db.query(VerificationCode).count(), 0)

    def test_store_refuses_duplicate_when_conflict_check_misses(self) -> None:
        make_user(self.db, "alice")
        with patch("rawa.services.auth_flow._signup_conflict", return_value=None):
            response = self._signup()
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Username or email already exists")
        self.assertEqual(self.db.query(User).count(), 1)
        self.assertEqual(self.db.query(VerificationCode).count(), 0)
        self.assertEqual(self.mailer.sent, [])
        self.assertEqual(self._signup(username="alice2").status_code, 201)

    def test_short_password_rejected(self) -> None:
        response = self._signup(password="123")
        self.assertEqual(response.status_code, 422)

    def test_role_cannot_be_self_assigned(self) -> None:
        response = self._signup(email=None, role="SUPER_ADMIN")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["user"]["role"], "USER")


class TestLogin(AuthApiTestCase):
    def test_login_by_username_and_by_email(self) -> None:
        make_user(self.db, "bob", email="bob@example.com")
        for identifier in ("bob", "bob@example.com"):
            with self.subTest(identifier=identifier):
                response = self.client.post(
                    f"{API}/login", json={"identifier": identifier, "password": DEFAULT_PASSWORD}
                )
                self.assertEqual(response.status_code, 200)
                self.assertEqual(verify_access_token(response.json()["access_token"]).username, "bob")

    def test_username_match_wins_over_email_match(self) -> None:
        make_user(self.db, "zed", email="x@example.com", password="zed-password")
        make_user(self.db, "x@example.com")
        response = self.client.post(
            f"{API}/login", json={"identifier": "x@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(verify_access_token(response.json()["access_token"]).username, "x@example.com")

    def test_wrong_password_and_unknown_user_look_alike(self) -> None:
        make_user(self.db, "bob")
        wrong = self.client.post(f"{API}/login", json={"identifier": "bob", "password": "wrong-pass"})
        unknown = self.client.post(
            f"{API}/login", json={"identifier": "nobody", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_unverified_email_gets_new_code_and_no_token(self) -> None:
        user = make_user(self.db, "bob", email="bob@example.com", email_verified=False)
        response = self.client.post(
            f"{API}/login", json={"identifier": "bob", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 403)
        detail = response.json()["detail"]
        self.assertTrue(detail["needs_verification"])
        self.assertNotIn("access_token", response.json())
        self.assertEqual(len(codes_for(self.db, user.id)), 1)
        self.assertEqual(len(self.mailer.sent), 1)

    def test_unverified_with_wrong_password_sends_nothing(self) -> None:
        make_user(self.db, "bob", email="bob@example.com", email_verified=False)
        response = self.client.post(f"{API}/login", json={"identifier": "bob", "password": "wrong-pass"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.mailer.sent, [])

    def test_disabled_account(self) -> None:
        user = make_user(self.db, "bob")
        user.status = "SUSPENDED"
        self.db.commit()
        response = self.client.post(
            f"{API}/login", json={"identifier": "bob", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 403)


class TestVerifyEmail(AuthApiTestCase):
    def test_code_is_single_use(self) -> None:
        self._signup()
        code = self.mailer.last_code()
        first = self.client.post(f"{API}/verify-email", json={"email": "alice@example.com", "code": code})
        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.json()["user"]["email_verified"])
        self.assertIsNotNone(verify_access_token(first.json()["access_token"]))
        self.assertTrue(self._user("alice").email_verified)

        second = self.client.post(f"{API}/verify-email", json={"email": "alice@example.com", "code": code})
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["detail"], "Invalid code")

    def test_expired_code_is_reported_and_left_unconsumed(self) -> None:
        self._signup()
        code = self.mailer.last_code()
        record = self.db.query(VerificationCode).one()
        record.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        self.db.commit()

        for _ in range(2):
            response = self.client.post(
                f"{API}/verify-email", json={"email": "alice@example.com", "code": code}
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"], "Code expired")
        self.db.expire_all()
        self.assertFalse(self.db.query(VerificationCode).one().consumed)
        self.assertFalse(self._user("alice").email_verified)

    def test_wrong_code(self) -> None:
        self._signup()
        code = self.mailer.last_code()
        wrong = "000000" if code != "000000" else "111111"
        response = self.client.post(f"{API}/verify-email", json={"email": "alice@example.com", "code": wrong})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid code")

    def test_unknown_email(self) -> None:
        response = self.client.post(
            f"{API}/verify-email", json={"email": "ghost@example.com", "code": "123456"}
        )
        self.assertEqual(response.status_code, 404)

    def test_malformed_code_rejected(self) -> None:
        response = self.client.post(f"{API}/verify-email", json={"email": "alice@example.com", "code": "12ab"})
        self.assertEqual(response.status_code, 422)


class TestResendCode(AuthApiTestCase):
    def test_older_code_still_valid_after_resend(self) -> None:
        self._signup()
        first_code = self.mailer.last_code()
        response = self.client.post(f"{API}/resend-code", json={"email": "alice@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(self.mailer.sent), 2)
        self.assertEqual(len(codes_for(self.db, self._user("alice").id)), 2)

        verify = self.client.post(
            f"{API}/verify-email", json={"email": "alice@example.com", "code": first_code}
        )
        self.assertEqual(verify.status_code, 200)

    def test_verify_with_second_code_leaves_first_outstanding(self) -> None:
        signup = self._signup(email="a@x.com")
        self.assertEqual(signup.status_code, 201)
        self.assertTrue(signup.json()["needs_verification"])
        first_code = self.mailer.last_code()

        self.assertEqual(self.client.post(f"{API}/resend-code", json={"email": "a@x.com"}).status_code, 200)
        second_code = self.mailer.last_code()

        verify = self.client.post(f"{API}/verify-email", json={"email": "a@x.com", "code": second_code})
        self.assertEqual(verify.status_code, 200)
        self.assertTrue(verify.json()["user"]["email_verified"])
        self.assertIsNotNone(verify.json()["access_token"])

        self.db.expire_all()
        outstanding = [c.code for c in codes_for(self.db, self._user("alice").id) if not c.consumed]
        self.assertEqual(outstanding, [first_code])

    def test_unknown_email(self) -> None:
        response = self.client.post(f"{API}/resend-code", json={"email": "ghost@example.com"})
        self.assertEqual(response.status_code, 404)

    def test_mail_failure_leaves_no_code(self) -> None:
        user = make_user(self.db, "bob", email="bob@example.com", email_verified=False)
        self.mailer.fail = True
        response = self.client.post(f"{API}/resend-code", json={"email": "bob@example.com"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(codes_for(self.db, user.id), [])


class TestPasswordReset(AuthApiTestCase):
    def test_forgot_then_reset(self) -> None:
        make_user(self.db, "bob", email="bob@example.com")
        response = self.client.post(f"{API}/user/forgot-password", json={"email": "bob@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.mailer.sent[-1].subject, "Your password reset code")
        code = self.mailer.last_code()

        reset = self.client.post(
            f"{API}/user/reset-password",
            json={"email": "bob@example.com", "code": code, "new_password": "brand-new"},
        )
        self.assertEqual(reset.status_code, 200)

        old = self.client.post(f"{API}/login", json={"identifier": "bob", "password": DEFAULT_PASSWORD})
        new = self.client.post(f"{API}/login", json={"identifier": "bob", "password": "brand-new"})
        self.assertEqual(old.status_code, 401)
        self.assertEqual(new.status_code, 200)

        again = self.client.post(
            f"{API}/user/reset-password",
            json={"email": "bob@example.com", "code": code, "new_password": "another1"},
        )
        self.assertEqual(again.status_code, 400)

    def test_forgot_unknown_email(self) -> None:
        response = self.client.post(f"{API}/user/forgot-password", json={"email": "ghost@example.com"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.mailer.sent, [])

    def test_reset_with_wrong_code_keeps_password(self) -> None:
        make_user(self.db, "bob", email="bob@example.com")
        response = self.client.post(
            f"{API}/user/reset-password",
            json={"email": "bob@example.com", "code": "123456", "new_password": "brand-new"},
        )
        self.assertEqual(response.status_code, 400)
        login = self.client.post(f"{API}/login", json={"identifier": "bob", "password": DEFAULT_PASSWORD})
        self.assertEqual(login.status_code, 200)


class TestChangePassword(AuthApiTestCase):
    def _change(self, actor: User, target_id: int, old: str, new: str = "brand-new"):
        return self.client.post(
            f"{API}/user/change-password/{target_id}",
            json={"old_password": old, "new_password": new},
            headers=auth_header(actor),
        )

    def test_self_change(self) -> None:
        bob = make_user(self.db, "bob")
        self.assertEqual(self._change(bob, bob.id, DEFAULT_PASSWORD).status_code, 200)
        login = self.client.post(f"{API}/login", json={"identifier": "bob", "password": "brand-new"})
        self.assertEqual(login.status_code, 200)

    def test_wrong_old_password(self) -> None:
        bob = make_user(self.db, "bob")
        response = self._change(bob, bob.id, "not-my-password")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Old password is incorrect")

    def test_plain_user_cannot_change_someone_else(self) -> None:
        bob = make_user(self.db, "bob")
        carol = make_user(self.db, "carol")
        self.assertEqual(self._change(bob, carol.id, DEFAULT_PASSWORD).status_code, 403)

    def test_admin_cannot_change_super_admin(self) -> None:
        admin = make_user(self.db, "admin", role="ADMIN")
        root = make_user(self.db, "root", role="SUPER_ADMIN")
        self.assertEqual(self._change(admin, root.id, DEFAULT_PASSWORD).status_code, 403)

    def test_super_admin_still_needs_old_password(self) -> None:
        root = make_user(self.db, "root", role="SUPER_ADMIN")
        bob = make_user(self.db, "bob")
        self.assertEqual(self._change(root, bob.id, "wrong-old").status_code, 400)
        self.assertEqual(self._change(root, bob.id, DEFAULT_PASSWORD).status_code, 200)

    def test_unknown_target(self) -> None:
        bob = make_user(self.db, "bob")
        self.assertEqual(self._change(bob, 9999, DEFAULT_PASSWORD).status_code, 404)

    def test_requires_token(self) -> None:
        response = self.client.post(
            f"{API}/user/change-password/1",
            json={"old_password": DEFAULT_PASSWORD, "new_password": "brand-new"},
        )
        self.assertEqual(response.status_code, 401)


class TestCurrentUser(AuthApiTestCase):
    def test_me(self) -> None:
        bob = make_user(self.db, "bob", email="bob@example.com")
        response = self.client.get(f"{API}/me", headers=auth_header(bob))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["email"], "bob@example.com")

    def test_missing_token(self) -> None:
        response = self.client.get(f"{API}/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Not authenticated")
        self.assertEqual(response.headers["www-authenticate"], "Bearer")

    def test_invalid_and_expired_tokens_share_one_message(self) -> None:
        bob = make_user(self.db, "bob")
        expired = create_access_token(bob.id, "bob", expires_delta=timedelta(seconds=-5))
        for token in ("garbage", expired):
            with self.subTest(token=token[:10]):
                response = self.client.get(f"{API}/me", headers={"Authorization": f"Bearer {token}"})
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["detail"], "Invalid or expired token")

    def test_token_for_deleted_user(self) -> None:
        token = create_access_token(4242, "ghost")
        response = self.client.get(f"{API}/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)


class TestSignupToLogin(AuthApiTestCase):
    """Full self-service journey: signup, refused login, verify, login."""

    def test_journey(self) -> None:
        signup = self._signup()
        self.assertEqual(signup.status_code, 201)
        self.assertTrue(signup.json()["needs_verification"])

        refused = self.client.post(
            f"{API}/login", json={"identifier": "alice", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(refused.status_code, 403)
        self.assertEqual(len(self.mailer.sent), 2)
        latest_code = self.mailer.last_code()

        verified = self.client.post(
            f"{API}/verify-email", json={"email": "alice@example.com", "code": latest_code}
        )
        self.assertEqual(verified.status_code, 200)

        login = self.client.post(
            f"{API}/login", json={"identifier": "alice@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(login.status_code, 200)
        token = login.json()["access_token"]
        me = self.client.get(f"{API}/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(me.json()["user"]["username"], "alice")


if __name__ == "__main__":
    unittest.main()
