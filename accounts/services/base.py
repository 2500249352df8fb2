"""
Base service classes and shared context.

The ServiceContext holds the stores and handlers the services need, built
from one Config. The collaborator protocols describe what UserAuthService
actually relies on, so tests can hand it fakes instead.
"""

import logging
from datetime import datetime
from typing import Optional, Protocol
from dataclasses import dataclass

from ..config import Config, load_config
from ..auth import JWTHandler, PasswordHandler, TokenStore, UserStore, User, AccessToken

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    """A freshly issued token: the bearer string and its stored record."""
    access_token: str
    token: AccessToken


class CredentialStore(Protocol):
    """Creates and finds users; rejects duplicate email or phone number."""

    def create_user(
        self,
        firstname: str,
        lastname: str,
        email: str,
        phone_number: str,
        password: str
    ) -> User: ...

    def email_exists(self, email: str) -> bool: ...

    def phone_exists(self, phone: str) -> bool: ...

    def get_by_id(self, user_id: str) -> Optional[User]: ...

    def verify_credentials(self, field_name: str, identifier: str, password: str) -> Optional[User]: ...


class TokenIssuer(Protocol):
    """Issues, resolves and revokes bearer tokens."""

    def issue(self, user: User, name: str, expires_at: Optional[datetime] = None) -> IssuedToken: ...

    def resolve(self, bearer: str) -> Optional[AccessToken]: ...

    def revoke(self, token_id: str) -> bool: ...

    def remember_me_expiry(self, now: Optional[datetime] = None) -> datetime: ...


@dataclass
class ServiceContext:
    """Shared dependencies for all services."""
    config: Config
    password: PasswordHandler
    users: UserStore
    tokens: TokenStore
    jwt: JWTHandler

    @classmethod
    def create(cls, config: Optional[Config] = None) -> "ServiceContext":
        """
        Factory method to create a ServiceContext with all dependencies.

        Args:
            config: Optional config (loads from environment if not provided)
        """
        config = config or load_config()

        password = PasswordHandler(rounds=config.auth.bcrypt_rounds)
        users = UserStore(
            file_path=config.storage.users_file,
            password_handler=password
        )
        tokens = TokenStore(file_path=config.storage.tokens_file)
        jwt = JWTHandler(
            secret_key=config.auth.jwt_secret_key,
            algorithm=config.auth.jwt_algorithm
        )

        logger.debug(f"Service context created (users: {users.file_path}, tokens: {tokens.file_path})")
        return cls(config=config, password=password, users=users, tokens=tokens, jwt=jwt)


class BaseService:
    """Base class for services that work from a ServiceContext."""

    def __init__(self, context: ServiceContext):
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config
