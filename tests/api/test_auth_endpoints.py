"""
Integration tests for Auth API endpoints.

Tests registration, login, logout and the current user endpoint against
real services backed by temporary files.
"""

from datetime import datetime, timedelta, timezone

import pytest


class TestAuthRegistration:
    """Tests for user registration endpoint."""

    @pytest.mark.api
    def test_register_success(self, api_client, registration):
        response = api_client.post("/api/v1/auth/register", json=registration)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Created successfully"
        assert data["user"]["email"] == registration["email"]
        assert data["user"]["phone_number"] == "905321234567"
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    @pytest.mark.api
    def test_register_validation_error(self, api_client):
        response = api_client.post(
            "/api/v1/auth/register",
            json={
                "firstname": "Ali",
                "email": "ali@",
                "phone_number": "0532 123 45 67",
                "password": "abc12345",
            }
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation Error"
        assert data["error"]["lastname"] == ["The Soyisim field is required."]
        assert data["error"]["email"] == ["The Email field must be a valid email address."]
        assert "phone_number" in data["error"]
        assert "firstname" not in data["error"]
        assert len(data["error"]["password"]) == 2

    @pytest.mark.api
    def test_register_duplicate_email(self, api_client, registration, registered_user):
        registration["phone_number"] = "905551112233"

        response = api_client.post("/api/v1/auth/register", json=registration)

        assert response.status_code == 400
        assert response.json()["error"] == {"email": ["The Email has already been taken."]}

    @pytest.mark.api
    def test_register_duplicate_phone_in_other_format(self, api_client, registration, registered_user):
        registration["email"] = "veli@example.com"
        registration["phone_number"] = "+90 532 123 45 67"

        response = api_client.post("/api/v1/auth/register", json=registration)

        assert response.status_code == 400
        assert response.json()["error"] == {
            "phone_number": ["The Telefon Numarası has already been taken."]
        }

    @pytest.mark.api
    def test_register_wrong_type(self, api_client, registration):
        registration["firstname"] = 42

        response = api_client.post("/api/v1/auth/register", json=registration)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation Error"
        assert data["error"] == {"firstname": ["The İsim field must be a string."]}


class TestAuthLogin:
    """Tests for login endpoint."""

    @pytest.mark.api
    def test_login_with_email(self, api_client, registered_user, test_config):
        response = api_client.post(
            "/api/v1/auth/login",
            json={
                "email_or_phone": test_config["test_email"],
                "password": test_config["test_password"],
            }
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "Bearer"
        assert data["access_token"]
        assert data["user"]["id"] == registered_user["id"]
        datetime.strptime(data["expires_in"], "%Y-%m-%d %H:%M:%S")

    @pytest.mark.api
    def test_login_with_phone_legacy_field(self, api_client, registered_user, test_config):
        response = api_client.post(
            "/api/v1/auth/login",
            json={
                "email_phone": "+90 532 123 45 67",
                "password": test_config["test_password"],
            }
        )

        assert response.status_code == 200
        assert response.json()["user"]["phone_number"] == "905321234567"

    @pytest.mark.api
    def test_login_remember_me(self, api_client, registered_user, test_config):
        response = api_client.post(
            "/api/v1/auth/login",
            json={
                "email_or_phone": test_config["test_email"],
                "password": test_config["test_password"],
                "remember_me": True,
            }
        )

        assert response.status_code == 200
        expires = datetime.strptime(response.json()["expires_in"], "%Y-%m-%d %H:%M:%S")
        expected = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(weeks=4)
        assert abs(expires - expected) < timedelta(minutes=1)

    @pytest.mark.api
    def test_login_validation_error(self, api_client):
        response = api_client.post("/api/v1/auth/login", json={"email_or_phone": "ali@example.com"})

        assert response.status_code == 400
        assert response.json() == {
            "error": {"password": ["The Şifre field is required."]},
            "message": "Validation Error",
        }

    @pytest.mark.api
    def test_wrong_password_and_unknown_user_same_response(self, api_client, registered_user, test_config):
        wrong_password = api_client.post(
            "/api/v1/auth/login",
            json={"email_or_phone": test_config["test_email"], "password": "Yanlis123!"}
        )
        unknown_user = api_client.post(
            "/api/v1/auth/login",
            json={"email_or_phone": "nobody@example.com", "password": "Yanlis123!"}
        )

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"message": "Unauthorized."}

    @pytest.mark.api
    def test_login_malformed_json(self, api_client):
        response = api_client.post(
            "/api/v1/auth/login",
            content=b"{\"email_or_phone\": ",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": {"body": ["The request body must be valid JSON."]},
            "message": "Validation Error",
        }


class TestCurrentUser:
    """Tests for current user endpoint."""

    @pytest.mark.api
    def test_get_user_authenticated(self, api_client, access_token, registered_user):
        response = api_client.get(
            "/api/v1/auth/user",
            headers={"Authorization": f"Bearer {access_token}"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Retrieved successfully"
        assert data["user"] == registered_user

    @pytest.mark.api
    def test_get_user_no_token(self, api_client):
        response = api_client.get("/api/v1/auth/user")

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthenticated."}
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.api
    def test_get_user_invalid_token(self, api_client):
        response = api_client.get(
            "/api/v1/auth/user",
            headers={"Authorization": "Bearer invalid_token"}
        )

        assert response.status_code == 401


class TestLogout:
    """Tests for logout endpoint."""

    @pytest.mark.api
    def test_logout_then_token_is_rejected(self, api_client, access_token):
        headers = {"Authorization": f"Bearer {access_token}"}

        response = api_client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Successfully logged out."}

        response = api_client.get("/api/v1/auth/user", headers=headers)
        assert response.status_code == 401

        response = api_client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 401

    @pytest.mark.api
    def test_logout_without_token(self, api_client):
        response = api_client.post("/api/v1/auth/logout")

        assert response.status_code == 401
