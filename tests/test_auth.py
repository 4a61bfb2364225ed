"""
Tests for authentication endpoints and the authorization dependencies.

Tests:
- User registration and login
- Bearer token extraction and rejection
- Role enforcement
- Password recovery flow over HTTP
- Password change, logout and deactivation
"""

from datetime import datetime, timedelta, timezone

from app.core.security import TokenService
from app.crud import user as user_crud
from app.models.password_reset import PasswordReset
from app.models.user import Role, User
from main import app

API = "/api/v1"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email="a@x.com", password="secret1", role=Role.JOB_SEEKER):
    return client.post(
        f"{API}/auth/register",
        json={"email": email, "password": password, "role": role.value}
    )


class TestUserRegistration:
    """Test user registration endpoint"""

    def test_register_success(self, client):
        response = register(client)

        assert response.status_code == 201
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "a@x.com"
        assert data["user"]["role"] == "job_seeker"
        assert "hashed_password" not in data["user"]

    def test_register_stores_hash_not_password(self, client, db_session, hasher):
        register(client)

        user = db_session.query(User).filter(User.email == "a@x.com").first()
        assert user.hashed_password != "secret1"
        assert hasher.verify("secret1", user.hashed_password)

    def test_register_duplicate_email(self, client):
        register(client)
        response = register(client, password="different1")

        assert response.status_code == 400
        assert response.json()["error"] == "email_already_registered"

    def test_register_short_password(self, client):
        response = register(client, password="weak")

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert [f["field"] for f in body["fields"]] == ["password"]

    def test_register_invalid_email_and_role(self, client):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "not-an-email", "password": "secret1", "role": "admin"}
        )

        assert response.status_code == 422
        fields = {f["field"] for f in response.json()["fields"]}
        assert fields == {"email", "role"}

    def test_register_password_with_nul_rejected(self, client, db_session):
        response = register(client, password="abc\x00defg")

        assert response.status_code == 422
        assert [f["field"] for f in response.json()["fields"]] == ["password"]
        assert db_session.query(User).count() == 0

    def test_register_concurrent_duplicate(self, client, db_session, monkeypatch):
        """A registration that slips past the email check hits the unique constraint"""
        register(client)
        monkeypatch.setattr(user_crud, "get_by_email", lambda db, email: None)

        response = register(client, password="different1")

        assert response.status_code == 400
        assert response.json()["error"] == "email_already_registered"
        assert db_session.query(User).count() == 1


class TestUserLogin:
    """Test user login endpoint"""

    def test_login_success(self, client):
        register(client)

        response = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["user"]["role"] == "job_seeker"

    def test_login_wrong_password(self, client):
        register(client)

        response = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "wrong12"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_login_nonexistent_user(self, client):
        response = client.post(f"{API}/auth/login", json={"email": "nobody@x.com", "password": "secret1"})

        assert response.status_code == 401

    def test_login_unknown_email_still_checks_a_digest(self, client, monkeypatch):
        calls = []
        hasher = app.state.password_hasher
        monkeypatch.setattr(hasher, "dummy_verify", lambda password: calls.append(password) or False)

        response = client.post(f"{API}/auth/login", json={"email": "nobody@x.com", "password": "secret1"})

        assert response.status_code == 401
        assert calls == ["secret1"]

    def test_login_password_with_nul_is_a_mismatch(self, client):
        register(client)

        response = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "bad\x00pw"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_login_deactivated_user(self, client, db_session):
        register(client)
        user = db_session.query(User).filter(User.email == "a@x.com").first()
        user.is_active = False
        db_session.commit()

        response = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"


class TestAuthenticate:
    """Test bearer token extraction and verification"""

    def test_me_with_valid_token(self, client):
        token = register(client).json()["access_token"]

        response = client.get(f"{API}/auth/me", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["email"] == "a@x.com"

    def test_missing_header_rejected(self, client):
        response = client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_scheme_rejected(self, client):
        token = register(client).json()["access_token"]

        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_expired_and_invalid_tokens_look_identical(self, client):
        register(client)
        settings = app.state.settings
        past_clock = lambda: datetime.now(timezone.utc) - timedelta(days=8)
        expired = TokenService(settings.SECRET_KEY, settings.ALGORITHM, clock=past_clock).issue(
            1, "a@x.com", Role.JOB_SEEKER
        )
        forged = TokenService("some-other-key").issue(1, "a@x.com", Role.JOB_SEEKER)

        expired_response = client.get(f"{API}/auth/me", headers=auth_headers(expired))
        forged_response = client.get(f"{API}/auth/me", headers=auth_headers(forged))

        assert expired_response.status_code == forged_response.status_code == 401
        assert expired_response.json() == forged_response.json()

    def test_rejects_before_validating_body(self, client):
        """Authentication runs before request body validation"""
        response = client.post(f"{API}/applications", json={"post_id": "not-a-number"})

        assert response.status_code == 401


class TestRequireRole:
    """Test role-based access control"""

    def test_seeker_cannot_create_job(self, client, make_user, sample_job_data):
        seeker = make_user("s@x.com", Role.JOB_SEEKER)

        response = client.post(f"{API}/jobs", headers=seeker["headers"], json=sample_job_data)

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_shop_owner_cannot_apply(self, client, shop_owner, open_job):
        response = client.post(
            f"{API}/applications", headers=shop_owner["headers"], json={"post_id": open_job["id"]}
        )

        assert response.status_code == 403

    def test_shop_owner_cannot_read_matches(self, client, shop_owner):
        response = client.get(f"{API}/matches/my", headers=shop_owner["headers"])

        assert response.status_code == 403


class TestPasswordRecovery:
    """Test forgot/reset password endpoints"""

    def _latest_code(self, db_session):
        return db_session.query(PasswordReset).order_by(PasswordReset.id.desc()).first()

    def test_forgot_password_same_response_for_unknown_email(self, client, db_session):
        register(client)

        known = client.post(f"{API}/auth/forgot-password", json={"email": "a@x.com"})
        unknown = client.post(f"{API}/auth/forgot-password", json={"email": "ghost@x.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert db_session.query(PasswordReset).count() == 1

    def test_forgot_password_does_not_leak_code(self, client, db_session):
        register(client)

        response = client.post(f"{API}/auth/forgot-password", json={"email": "a@x.com"})

        assert self._latest_code(db_session).otp_code not in response.text

    def test_reset_password_flow(self, client, db_session):
        register(client)
        client.post(f"{API}/auth/forgot-password", json={"email": "a@x.com"})
        code = self._latest_code(db_session).otp_code

        response = client.post(
            f"{API}/auth/reset-password",
            json={"email": "a@x.com", "otp_code": code, "new_password": "newpass1"}
        )
        assert response.status_code == 200

        old_login = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "secret1"})
        new_login = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "newpass1"})
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    def test_reset_code_reuse_rejected(self, client, db_session):
        register(client)
        client.post(f"{API}/auth/forgot-password", json={"email": "a@x.com"})
        code = self._latest_code(db_session).otp_code
        payload = {"email": "a@x.com", "otp_code": code, "new_password": "newpass1"}

        assert client.post(f"{API}/auth/reset-password", json=payload).status_code == 200
        response = client.post(f"{API}/auth/reset-password", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_or_expired_otp"

    def test_reset_with_expired_code(self, client, db_session):
        register(client)
        client.post(f"{API}/auth/forgot-password", json={"email": "a@x.com"})
        record = self._latest_code(db_session)
        record.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        db_session.commit()

        response = client.post(
            f"{API}/auth/reset-password",
            json={"email": "a@x.com", "otp_code": record.otp_code, "new_password": "newpass1"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_or_expired_otp"

    def test_reset_unknown_email_looks_like_wrong_code(self, client):
        register(client)
        unknown = client.post(
            f"{API}/auth/reset-password",
            json={"email": "ghost@x.com", "otp_code": "123456", "new_password": "newpass1"}
        )
        wrong = client.post(
            f"{API}/auth/reset-password",
            json={"email": "a@x.com", "otp_code": "123456", "new_password": "newpass1"}
        )

        assert unknown.status_code == wrong.status_code == 400
        assert unknown.json() == wrong.json()

    def test_reset_new_password_with_nul_rejected(self, client):
        response = client.post(
            f"{API}/auth/reset-password",
            json={"email": "a@x.com", "otp_code": "123456", "new_password": "new\x00pass"}
        )

        assert response.status_code == 422
        assert response.json()["fields"][0]["field"] == "new_password"

    def test_reset_code_must_be_digits(self, client):
        response = client.post(
            f"{API}/auth/reset-password",
            json={"email": "a@x.com", "otp_code": "12ab56", "new_password": "newpass1"}
        )

        assert response.status_code == 422
        assert response.json()["fields"][0]["field"] == "otp_code"


class TestAccountManagement:
    """Test password change, logout and deactivation"""

    def test_change_password(self, client):
        token = register(client).json()["access_token"]

        response = client.post(
            f"{API}/auth/change-password",
            headers=auth_headers(token),
            json={"current_password": "secret1", "new_password": "newpass1"}
        )

        assert response.status_code == 200
        login = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "newpass1"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client):
        token = register(client).json()["access_token"]

        response = client.post(
            f"{API}/auth/change-password",
            headers=auth_headers(token),
            json={"current_password": "nope123", "new_password": "newpass1"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert [f["field"] for f in body["fields"]] == ["current_password"]
        # The token itself is still fine
        assert client.get(f"{API}/auth/me", headers=auth_headers(token)).status_code == 200

    def test_change_password_with_nul_rejected(self, client):
        token = register(client).json()["access_token"]

        response = client.post(
            f"{API}/auth/change-password",
            headers=auth_headers(token),
            json={"current_password": "secret1", "new_password": "new\x00pass"}
        )

        assert response.status_code == 422
        assert response.json()["fields"][0]["field"] == "new_password"

    def test_logout_without_revocation_keeps_token_valid(self, client):
        token = register(client).json()["access_token"]

        response = client.post(f"{API}/auth/logout", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["revoked"] is False
        assert client.get(f"{API}/auth/me", headers=auth_headers(token)).status_code == 200

    def test_logout_with_revocation_invalidates_token(self, revocation_client):
        token = register(revocation_client).json()["access_token"]

        response = revocation_client.post(f"{API}/auth/logout", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["revoked"] is True
        me = revocation_client.get(f"{API}/auth/me", headers=auth_headers(token))
        assert me.status_code == 401

    def test_deactivate_blocks_login(self, client):
        token = register(client).json()["access_token"]

        response = client.delete(f"{API}/auth/me", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        login = client.post(f"{API}/auth/login", json={"email": "a@x.com", "password": "secret1"})
        assert login.status_code == 403
