"""
TaskNest API - Authentication Tests

Tests for register, login, bearer-token checks and startup configuration.
"""

import json
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from tasknest.main import app
from tasknest.config import settings
from tasknest.security import SecurityConfigError, validate_security_config
from tasknest.auth.tokens import TokenCodec


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client):
        """Successful registration should return 201."""
        response = client.post(
            "/auth/register",
            json={"username": "newuser", "password": "securepassword123"},
        )
        assert response.status_code == 201
        assert response.json()["message"] == "User registered successfully"

    def test_register_duplicate_username(self, client, registered_user):
        """Registering with existing username should return 409."""
        response = client.post("/auth/register", json=registered_user)
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_register_usernames_are_case_sensitive(self, client, registered_user):
        """A username differing only in case is a different user."""
        response = client.post(
            "/auth/register",
            json={"username": registered_user["username"].upper(), "password": "otherpassword"},
        )
        assert response.status_code == 201

    def test_register_duplicate_not_persisted(self, client, registered_user, users_document):
        """A rejected duplicate leaves exactly one stored record."""
        client.post("/auth/register", json={**registered_user, "password": "different"})

        users = json.loads(users_document.path.read_text(encoding="utf-8"))
        assert [u["username"] for u in users] == [registered_user["username"]]

    @pytest.mark.parametrize(
        "body",
        [
            {"username": "", "password": "securepassword123"},
            {"username": "validuser", "password": ""},
            {"username": "validuser"},
            {"password": "securepassword123"},
            {},
        ],
    )
    def test_register_missing_fields(self, client, body):
        """Missing or empty fields are invalid input."""
        response = client.post("/auth/register", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request"

    def test_register_password_too_long_for_bcrypt(self, client):
        """Passwords beyond bcrypt's 72-byte input are rejected."""
        response = client.post(
            "/auth/register",
            json={"username": "longpass", "password": "x" * 73},
        )
        assert response.status_code == 400

    def test_password_not_stored_plaintext(self, client, users_document):
        """Verify password is hashed, not stored as plaintext."""
        credentials = {"username": "hashuser", "password": "plaintextpassword123"}
        client.post("/auth/register", json=credentials)

        users = json.loads(users_document.path.read_text(encoding="utf-8"))
        assert len(users) == 1
        assert users[0]["username"] == "hashuser"
        assert users[0]["password_hash"] != credentials["password"]
        # bcrypt hashes start with $2a$ or $2b$
        assert users[0]["password_hash"].startswith("$2")


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client, registered_user, token_codec):
        """Successful login should return a verifiable token."""
        response = client.post("/auth/login", json=registered_user)
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert token_codec.decode(data["token"]) == registered_user["username"]

    def test_login_token_expires_in_one_hour(self, client, registered_user):
        """The token carries the username and a one-hour expiry."""
        response = client.post("/auth/login", json=registered_user)
        claims = jwt.decode(
            response.json()["token"],
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        assert claims["username"] == registered_user["username"]
        assert claims["exp"] - claims["iat"] == 3600

    def test_login_wrong_password(self, client, registered_user):
        """Login with wrong password should return 401."""
        response = client.post(
            "/auth/login",
            json={"username": registered_user["username"], "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert "Invalid username or password" in response.json()["detail"]

    def test_login_nonexistent_user(self, client):
        """Login with non-existent user should return 401."""
        response = client.post(
            "/auth/login",
            json={"username": "nonexistent", "password": "anypassword"},
        )
        assert response.status_code == 401

    def test_login_unusable_stored_hash(self, client, users_document):
        """A stored record with a non-bcrypt hash never authenticates."""
        users_document.path.write_text(
            json.dumps([{"username": "legacy", "password_hash": "plaintext"}]),
            encoding="utf-8",
        )
        response = client.post(
            "/auth/login",
            json={"username": "legacy", "password": "plaintext"},
        )
        assert response.status_code == 401


class TestGetMe:
    """Tests for GET /auth/me (protected endpoint)."""

    def test_get_me_success(self, client, registered_user, auth_headers):
        """Authenticated request should return user info."""
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == registered_user["username"]
        assert data["created_at"] is not None

    def test_get_me_without_token(self, client):
        """Request without token should return 401."""
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_get_me_invalid_token(self, client):
        """Request with invalid token should return 403."""
        response = client.get(
            "/auth/me",
            headers={"Authorization": "Bearer invalid_token_here"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Invalid or expired token"

    def test_get_me_malformed_header(self, client):
        """Request with malformed auth header should return 403."""
        response = client.get(
            "/auth/me",
            headers={"Authorization": "NotBearer token"},
        )
        assert response.status_code == 403

    def test_get_me_expired_token(self, client, registered_user, token_codec):
        """Request with expired token should return 403."""
        expired_token = token_codec.encode(
            registered_user["username"],
            expires_delta=timedelta(seconds=-1),
        )
        response = client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {expired_token}"},
        )
        assert response.status_code == 403

    def test_get_me_wrong_signature(self, client, registered_user):
        """A token signed with another secret is rejected."""
        forged = TokenCodec(secret="some-other-secret").encode(registered_user["username"])
        response = client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {forged}"},
        )
        assert response.status_code == 403

    def test_get_me_unknown_account(self, client, token_codec):
        """A valid token for an account that is not stored returns 404."""
        token = token_codec.encode("ghost")
        response = client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 404


class TestTokenCodec:
    """Tests for signing and verifying tokens directly."""

    def test_round_trip_identity(self, token_codec):
        assert token_codec.decode(token_codec.encode("alice")) == "alice"

    def test_token_without_identity_claim(self, token_codec):
        """A correctly signed token lacking the username claim is rejected."""
        token = jwt.encode(
            {"sub": "alice"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert token_codec.decode(token) is None

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            TokenCodec(secret="")


class TestSecurityConfig:
    """Startup checks for the signing secret."""

    def test_missing_secret_is_fatal(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", None)
        with pytest.raises(SecurityConfigError):
            validate_security_config()

    def test_missing_secret_aborts_startup(self, monkeypatch):
        """The application lifespan refuses to start without a secret."""
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", None)
        with pytest.raises(SecurityConfigError):
            with TestClient(app):
                pass

    def test_short_secret_warns(self, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET_KEY", "short")
        with pytest.warns(UserWarning, match="shorter than 32"):
            validate_security_config()

    def test_wildcard_cors_warns(self, monkeypatch):
        monkeypatch.setattr(settings, "CORS_ORIGINS", ["*"])
        with pytest.warns(UserWarning, match="CORS wildcard"):
            validate_security_config()


class TestFullAuthFlow:
    """Integration tests for complete authentication flow."""

    def test_register_login_me_flow(self, client):
        """Complete flow: register -> login -> /auth/me should succeed."""
        credentials = {"username": "flowuser", "password": "flowpassword123"}

        register_response = client.post("/auth/register", json=credentials)
        assert register_response.status_code == 201

        login_response = client.post("/auth/login", json=credentials)
        assert login_response.status_code == 200
        token = login_response.json()["token"]

        me_response = client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert me_response.status_code == 200
        assert me_response.json()["username"] == credentials["username"]
