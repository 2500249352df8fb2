"""
JWT token handler.

Encodes and decodes the bearer strings handed to clients. A token only
proves that we issued it; whether it is still usable is decided by its
record in the TokenStore (see accounts.services.token_service).
"""

import os
import logging
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass, asdict

from jose import jwt, JWTError

from ..config import DEFAULT_SECRET_KEY

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass
class TokenPayload:
    """JWT token payload."""
    sub: str  # User ID
    jti: str  # Token record ID
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def token_id(self) -> str:
        return self.jti

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TokenPayload":
        return cls(
            sub=data["sub"],
            jti=data["jti"],
            exp=data["exp"],
            iat=data["iat"],
        )


class JWTHandler:
    """Signs and verifies access tokens."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: str = ALGORITHM):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens.
                       Falls back to JWT_SECRET_KEY env var or default.
            algorithm: Signing algorithm (default: HS256)
        """
        self.secret_key = (
            secret_key
            or os.getenv("JWT_SECRET_KEY")
            or DEFAULT_SECRET_KEY
        )
        self.algorithm = algorithm

        if self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning(
                "Using default JWT secret key. "
                "Set JWT_SECRET_KEY environment variable in production!"
            )

    def create_access_token(
        self,
        user_id: str,
        token_id: str,
        expires_at: datetime,
        issued_at: Optional[datetime] = None
    ) -> str:
        """
        Create an access token.

        Args:
            user_id: ID of the user the token authenticates
            token_id: ID of the token record
            expires_at: When the token stops being valid
            issued_at: Issue time (default: now)

        Returns:
            Encoded JWT token string
        """
        issued_at = issued_at or datetime.now(timezone.utc)

        payload = TokenPayload(
            sub=user_id,
            jti=token_id,
            exp=int(expires_at.timestamp()),
            iat=int(issued_at.timestamp()),
        )

        token = jwt.encode(payload.to_dict(), self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Created access token {token_id} for user {user_id}")
        return token

    def verify_token(self, token: str) -> Optional[TokenPayload]:
        """
        Verify and decode a token.

        Args:
            token: JWT token string

        Returns:
            TokenPayload if valid, None if invalid or expired
        """
        try:
            data = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return TokenPayload.from_dict(data)
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None
        except KeyError as e:
            logger.debug(f"Token is missing claim {e}")
            return None
