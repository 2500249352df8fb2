"""
User authentication service.

Registration, login, logout and profile lookup. Input arrives as plain
mappings (the parsed request body); failures are raised as
ValidationError / UnauthorizedError for the API layer to render.
"""

import logging
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass

from ..auth import AccessToken, User
from ..auth.phone import normalize_phone
from ..auth.validation import (
    Email,
    Password,
    Required,
    TurkishPhone,
    Unique,
    Validator,
    is_email,
    phone_digits,
)
from ..exceptions import UnauthorizedError, ValidationError
from .base import CredentialStore, IssuedToken, TokenIssuer
from .token_service import DEFAULT_TOKEN_NAME

logger = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"
EXPIRES_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class LoginResult:
    """Successful login: the user and the token issued for them."""
    user: User
    issued: IssuedToken
    token_type: str = TOKEN_TYPE

    @property
    def access_token(self) -> str:
        return self.issued.access_token

    @property
    def expires_in(self) -> str:
        """Token expiry as ``YYYY-MM-DD HH:MM:SS`` (UTC)."""
        return self.issued.token.expires_at_datetime.strftime(EXPIRES_FORMAT)

    def to_dict(self) -> dict:
        return {
            "user": self.user.to_public_dict(),
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
        }


# Passwords are taken exactly as typed.
UNTRIMMED_FIELDS = ("password",)


def _trimmed(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Strip surrounding whitespace from every text field but the password."""
    return {
        key: value.strip() if isinstance(value, str) and key not in UNTRIMMED_FIELDS else value
        for key, value in fields.items()
    }


class UserAuthService:
    """
    Service for user authentication.

    Handles:
    - User registration
    - Login with email or phone number and password
    - Logout (revoking the presented token)
    - Current user lookup
    """

    def __init__(self, users: CredentialStore, tokens: TokenIssuer):
        """
        Initialize auth service.

        Args:
            users: Credential store
            tokens: Token service
        """
        self.users = users
        self.tokens = tokens

    def register(self, fields: Mapping[str, Any]) -> User:
        """
        Register a new user.

        Args:
            fields: firstname, lastname, email, phone_number, password

        Returns:
            The created User

        Raises:
            ValidationError: If any field fails validation
            ConflictError: If the email or phone was taken meanwhile
        """
        fields = _trimmed(fields)

        validator = Validator(fields, {
            "firstname": [Required()],
            "lastname": [Required()],
            "email": [Required(), Email(), Unique(self.users.email_exists)],
            "phone_number": [
                Required(),
                phone_digits(),
                Unique(self.users.phone_exists, prepare=normalize_phone),
                TurkishPhone(),
            ],
            "password": [Required(), Password(min_length=8)],
        })

        if validator.fails():
            logger.info(f"Registration rejected, invalid fields: {', '.join(validator.errors())}")
            raise ValidationError(validator.errors())

        user = self.users.create_user(
            firstname=fields["firstname"],
            lastname=fields["lastname"],
            email=fields["email"],
            phone_number=fields["phone_number"],
            password=fields["password"]
        )

        logger.info(f"User registered: {user.user_id}")
        return user

    def login(self, fields: Mapping[str, Any]) -> LoginResult:
        """
        Log a user in with an email address or phone number.

        ``email_or_phone`` is treated as an email if it is a valid email
        address, otherwise as a phone number. Errors are keyed by
        ``email`` or ``phone_number`` accordingly.

        Args:
            fields: email_or_phone, password, optional remember_me

        Returns:
            LoginResult with the user and a new token

        Raises:
            ValidationError: If the identifier or password is invalid
            UnauthorizedError: If no user matches the credentials
        """
        fields = _trimmed(fields)
        identifier = fields.get("email_or_phone")

        if is_email(identifier):
            login_field = "email"
            login_rules = [Required(), Email()]
        else:
            login_field = "phone_number"
            login_rules = [Required(), TurkishPhone()]

        credentials: Dict[str, Any] = {
            login_field: identifier,
            "password": fields.get("password"),
        }

        validator = Validator(credentials, {
            login_field: login_rules,
            "password": [Required()],
        })

        if validator.fails():
            raise ValidationError(validator.errors())

        if login_field == "phone_number":
            credentials["phone_number"] = normalize_phone(identifier)

        user = self.users.verify_credentials(
            login_field,
            credentials[login_field],
            credentials["password"]
        )
        if user is None:
            logger.warning(f"Failed login attempt by {login_field}")
            raise UnauthorizedError()

        expires_at = None
        if fields.get("remember_me"):
            expires_at = self.tokens.remember_me_expiry()

        issued = self.tokens.issue(user, name=DEFAULT_TOKEN_NAME, expires_at=expires_at)

        logger.info(f"User logged in: {user.user_id}")
        return LoginResult(user=user, issued=issued)

    def logout(self, current_user: User, current_token: AccessToken) -> bool:
        """
        Revoke the token the caller authenticated with.

        Revoking a token that is already revoked does nothing.

        Returns:
            True if the token was revoked by this call
        """
        revoked = self.tokens.revoke(current_token.token_id)
        if revoked:
            logger.info(f"User logged out: {current_user.user_id}")
        else:
            logger.info(f"Token {current_token.token_id} was already revoked")
        return revoked

    def current_user(self, current_user: User) -> User:
        """Return the authenticated user."""
        return current_user

    def authenticate(self, bearer: str) -> Optional[tuple[User, AccessToken]]:
        """
        Resolve a bearer string to its user and token record.

        Returns:
            (User, AccessToken) if the token is usable and its user exists,
            None otherwise
        """
        token = self.tokens.resolve(bearer)
        if token is None:
            return None

        user = self.users.get_by_id(token.user_id)
        if user is None:
            return None

        return user, token
