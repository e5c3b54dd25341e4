"""Route tests: signup, login, members page, logout, errors and health, against in-memory SQLite."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from membersite.api.auth import LOGIN_FAILED_MESSAGE
from membersite.core.security import verify_password
from membersite.models import SessionRecord
from membersite.services.users import create_user
from support import (
    db_session,
    get_user,
    log_in,
    make_app,
    make_client,
    seed_user,
    sign_up,
)


class RouteTestCase(unittest.TestCase):
    def setUp(self) -> None:
        # Low bcrypt cost keeps the suite fast; the cost factor itself is covered in test_security.
        rounds = patch("membersite.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.app = make_app()
        self.client = make_client(self.app)

    def assertRedirects(self, response, location: str) -> None:
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], location)


class TestLandingPage(RouteTestCase):
    """GET / shows signup/login links to visitors and a greeting to members."""

    def test_anonymous(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("/signup", response.text)
        self.assertIn("/login", response.text)

    def test_forms_render(self) -> None:
        self.assertIn('action="/submitUser"', self.client.get("/signup").text)
        self.assertIn('action="/loggingin"', self.client.get("/login").text)

    def test_authenticated(self) -> None:
        sign_up(self.client, "Alice", "a@x.com", "pw12345")
        response = self.client.get("/")
        self.assertIn("Hello, Alice!", response.text)


class TestSignup(RouteTestCase):
    """POST /submitUser stores a hashed user and starts a session."""

    def test_signup_scenario(self) -> None:
        response = sign_up(self.client, "Alice", "a@x.com", "pw12345")
        self.assertRedirects(response, "/members")

        user = get_user(self.app, "a@x.com")
        self.assertEqual(user.name, "Alice")
        self.assertEqual(user.user_type, "user")
        self.assertNotEqual(user.password_hash, "pw12345")
        self.assertTrue(verify_password("pw12345", user.password_hash))

        members = self.client.get("/members")
        self.assertEqual(members.status_code, 200)
        self.assertIn("Alice", members.text)
        self.assertRegex(members.text, r"/static/(cat|dog|bunny)\.jpeg")

    def test_session_cookie_is_http_only(self) -> None:
        response = sign_up(self.client, "Alice", "a@x.com", "pw12345")
        cookie_header = response.headers["set-cookie"]
        self.assertIn("membersite_session=", cookie_header)
        self.assertIn("httponly", cookie_header.lower())

    def test_invalid_input_stops_before_insert(self) -> None:
        response = sign_up(self.client, "A" * 21, "a@x.com", "pw12345")
        self.assertEqual(response.status_code, 200)
        self.assertIn("name:", response.text)
        self.assertIn("/signup", response.text)
        self.assertIsNone(get_user(self.app, "a@x.com"))
        self.assertNotIn("set-cookie", response.headers)
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")

    def test_invalid_email(self) -> None:
        response = sign_up(self.client, "Alice", "not-an-email", "pw12345")
        self.assertEqual(response.status_code, 200)
        self.assertIn("email:", response.text)

    def test_missing_fields(self) -> None:
        response = self.client.post("/submitUser", data={"name": ""}, follow_redirects=False)
        self.assertEqual(response.status_code, 200)
        self.assertIn("name:", response.text)

    def test_duplicate_email(self) -> None:
        sign_up(self.client, "Alice", "a@x.com", "pw12345")
        other = make_client(self.app)
        response = sign_up(other, "Alicia", "a@x.com", "other")
        self.assertEqual(response.status_code, 200)
        self.assertIn("already exists", response.text)
        self.assertEqual(get_user(self.app, "a@x.com").name, "Alice")


class TestLogin(RouteTestCase):
    """POST /loggingin authenticates only with the right email and password."""

    def setUp(self) -> None:
        super().setUp()
        seed_user(self.app, "Alice", "a@x.com", "pw12345")

    def test_correct_credentials(self) -> None:
        response = log_in(self.client, "a@x.com", "pw12345")
        self.assertRedirects(response, "/members")
        self.assertIn("Alice", self.client.get("/members").text)

    def test_wrong_password_stays_anonymous(self) -> None:
        response = log_in(self.client, "a@x.com", "wrong")
        self.assertEqual(response.status_code, 200)
        self.assertIn(LOGIN_FAILED_MESSAGE, response.text)
        self.assertNotIn("set-cookie", response.headers)
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")

    def test_unknown_email_uses_same_message(self) -> None:
        response = log_in(self.client, "b@x.com", "pw12345")
        self.assertEqual(response.status_code, 200)
        self.assertIn(LOGIN_FAILED_MESSAGE, response.text)

    def test_malformed_email(self) -> None:
        response = log_in(self.client, "nope", "pw12345")
        self.assertEqual(response.status_code, 200)
        self.assertIn("email:", response.text)

    def test_broken_stored_hash_is_server_error(self) -> None:
        db = db_session(self.app)
        try:
            create_user(db, "Bad", "bad@x.com", "not-a-bcrypt-hash")
        finally:
            db.close()
        client = make_client(self.app, raise_server_exceptions=False)
        response = log_in(client, "bad@x.com", "anything")
        self.assertEqual(response.status_code, 500)
        self.assertNotIn("set-cookie", response.headers)


class TestMembersAndLogout(RouteTestCase):
    """/members requires a live session; logout ends it."""

    def test_anonymous_members_redirects_home(self) -> None:
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")

    def test_logout_then_members(self) -> None:
        sign_up(self.client, "Alice", "a@x.com", "pw12345")
        self.assertRedirects(self.client.get("/logout", follow_redirects=False), "/")
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")

    def test_logout_deletes_stored_session(self) -> None:
        sign_up(self.client, "Alice", "a@x.com", "pw12345")
        self.client.get("/logout", follow_redirects=False)
        db = db_session(self.app)
        try:
            self.assertEqual(db.query(SessionRecord).count(), 0)
        finally:
            db.close()

    def test_expired_session_is_anonymous(self) -> None:
        sign_up(self.client, "Alice", "a@x.com", "pw12345")
        db = db_session(self.app)
        try:
            db.query(SessionRecord).update(
                {SessionRecord.expires_at: datetime.now(UTC) - timedelta(minutes=1)}
            )
            db.commit()
        finally:
            db.close()
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")
        self.assertNotIn("Alice", self.client.get("/").text)

    def test_forged_cookie_is_anonymous(self) -> None:
        self.client.cookies.set("membersite_session", "forged")
        self.assertRedirects(self.client.get("/members", follow_redirects=False), "/")


class TestErrorsAndHealth(RouteTestCase):
    """Unknown paths get the 404 view; /health probes the database."""

    def test_unknown_path(self) -> None:
        response = self.client.get("/nonexistent-path")
        self.assertEqual(response.status_code, 404)
        self.assertIn("Page cannot be found - 404", response.text)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"status": "ok", "environment": "dev", "database": "connected"},
        )


if __name__ == "__main__":
    unittest.main()
