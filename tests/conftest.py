"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Configuration pointing at temporary storage
- JWT, password, user and token handlers
- Services and API clients
"""

import os
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["JWT_SECRET_KEY"] = "test_jwt_secret_key_for_testing_only_32bytes!"
os.environ["ENVIRONMENT"] = "test"

from accounts.config import AuthConfig, Config, StorageConfig
from accounts.auth import JWTHandler, PasswordHandler
from accounts.services import ServiceContext, TokenService, UserAuthService, create_services


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "jwt_secret": "test_jwt_secret_key_for_testing_only_32bytes!",
        "test_phone": "905321234567",
        "test_email": "ali.yilmaz@example.com",
        "test_password": "Gizli123!",
        "test_firstname": "Ali",
        "test_lastname": "Yılmaz",
    }


@pytest.fixture
def config(tmp_path, test_config) -> Config:
    """Config with temporary storage and cheap bcrypt rounds."""
    return Config(
        auth=AuthConfig(
            jwt_secret_key=test_config["jwt_secret"],
            jwt_algorithm="HS256",
            token_expire_days=365,
            remember_me_weeks=4,
            bcrypt_rounds=4,
        ),
        storage=StorageConfig(
            users_file=tmp_path / "users.json",
            tokens_file=tmp_path / "tokens.json",
        ),
        cors_origins=["*"],
    )


# =============================================================================
# Handler Fixtures
# =============================================================================

@pytest.fixture
def jwt_handler(test_config) -> JWTHandler:
    """Create a JWTHandler with test secret."""
    return JWTHandler(secret_key=test_config["jwt_secret"])


@pytest.fixture
def password_handler() -> PasswordHandler:
    """Create a PasswordHandler with minimum bcrypt rounds."""
    return PasswordHandler(rounds=4)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def context(config) -> ServiceContext:
    return ServiceContext.create(config)


@pytest.fixture
def user_store(context):
    return context.users


@pytest.fixture
def token_store(context):
    return context.tokens


@pytest.fixture
def token_service(context) -> TokenService:
    return TokenService(context)


@pytest.fixture
def user_auth(context, token_service) -> UserAuthService:
    return UserAuthService(context.users, token_service)


@pytest.fixture
def registration(test_config) -> dict:
    """Valid registration fields."""
    return {
        "firstname": test_config["test_firstname"],
        "lastname": test_config["test_lastname"],
        "email": test_config["test_email"],
        "phone_number": test_config["test_phone"],
        "password": test_config["test_password"],
    }


@pytest.fixture
def sample_user(user_auth, registration):
    """Create a sample user in the store."""
    return user_auth.register(registration)


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def services(config):
    """Real services container over temporary storage."""
    from api.deps import Services

    context, tokens, user_auth = create_services(ServiceContext.create(config))
    return Services(config=config, context=context, tokens=tokens, user_auth=user_auth)


@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app, services) -> Generator[TestClient, None, None]:
    """Synchronous test client wired to the temporary services."""
    with patch("api.deps.get_services", return_value=services):
        yield TestClient(api_app)


@pytest.fixture
def registered_user(api_client, registration) -> dict:
    """Register a user through the API and return the response body."""
    response = api_client.post("/api/v1/auth/register", json=registration)
    assert response.status_code == 201
    return response.json()["user"]


@pytest.fixture
def access_token(api_client, registered_user, test_config) -> str:
    """Log the registered user in and return the bearer token."""
    response = api_client.post(
        "/api/v1/auth/login",
        json={
            "email_or_phone": test_config["test_email"],
            "password": test_config["test_password"],
        }
    )
    assert response.status_code == 200
    return response.json()["access_token"]


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
