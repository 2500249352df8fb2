"""
API dependencies.

Provides dependency injection for services and bearer authentication.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from accounts.config import load_config, Config
from accounts.services import ServiceContext, TokenService, UserAuthService, create_services
from accounts.auth import AccessToken, User
from accounts.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

UNAUTHENTICATED = "Unauthenticated."


@dataclass
class Services:
    """Container for all services."""
    config: Config
    context: ServiceContext
    tokens: TokenService
    user_auth: UserAuthService


# Global services instance (singleton)
_services: Optional[Services] = None


def build_services(config: Optional[Config] = None) -> Services:
    """Create a services container from a config."""
    context, tokens, user_auth = create_services(ServiceContext.create(config or load_config()))
    return Services(
        config=context.config,
        context=context,
        tokens=tokens,
        user_auth=user_auth
    )


def get_services() -> Services:
    """
    Get or create the services singleton.

    This initializes all services on first call.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")
        _services = build_services()
        logger.info("Services initialized successfully")

    return _services


def close_services():
    """Drop the services singleton."""
    global _services
    if _services:
        _services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]


@dataclass
class AuthContext:
    """The authenticated user and the token they presented."""
    user: User
    token: AccessToken


async def get_auth_context(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    services: ServicesDep
) -> AuthContext:
    """
    Resolve the bearer token to its user (required).

    Raises UnauthorizedError (401) if no usable token is provided.
    """
    if credentials is None:
        raise UnauthorizedError(UNAUTHENTICATED, headers={"WWW-Authenticate": "Bearer"})

    resolved = services.user_auth.authenticate(credentials.credentials)
    if resolved is None:
        raise UnauthorizedError(UNAUTHENTICATED, headers={"WWW-Authenticate": "Bearer"})

    user, token = resolved
    return AuthContext(user=user, token=token)


async def get_current_user(auth: Annotated[AuthContext, Depends(get_auth_context)]) -> User:
    """Get the authenticated user."""
    return auth.user


# Type aliases for dependencies
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
CurrentUser = Annotated[User, Depends(get_current_user)]
