"""
Services layer for the Accounts API.

This module provides the account logic as reusable services that can be
consumed by the API, scripts or tests.
"""

from .base import BaseService, ServiceContext, IssuedToken, CredentialStore, TokenIssuer
from .token_service import TokenService
from .user_auth_service import UserAuthService, LoginResult

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "CredentialStore",
    "TokenIssuer",
    # Services
    "TokenService",
    "UserAuthService",
    # Data classes
    "IssuedToken",
    "LoginResult",
]


def create_services(context: ServiceContext = None):
    """
    Factory function to create all services with proper dependencies.

    Args:
        context: Optional ServiceContext (creates one if not provided)

    Returns:
        Tuple of (context, tokens, user_auth)
    """
    if context is None:
        context = ServiceContext.create()

    token_service = TokenService(context)
    user_auth_service = UserAuthService(context.users, token_service)

    return context, token_service, user_auth_service
