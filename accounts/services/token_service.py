"""
Token Service.

Issues bearer tokens as signed JWTs backed by a TokenStore record. A bearer
is accepted only while its signature checks out and its record exists,
is not revoked and has not expired.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..auth import AccessToken, User
from .base import BaseService, IssuedToken

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_NAME = "apiAuthToken"


class TokenService(BaseService):
    """Service for issuing and revoking user access tokens."""

    def default_expiry(self, now: Optional[datetime] = None) -> datetime:
        """Expiry for a token issued without "remember me"."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(days=self.config.auth.token_expire_days)

    def remember_me_expiry(self, now: Optional[datetime] = None) -> datetime:
        """Expiry for a token issued with "remember me"."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(weeks=self.config.auth.remember_me_weeks)

    def issue(
        self,
        user: User,
        name: str = DEFAULT_TOKEN_NAME,
        expires_at: Optional[datetime] = None
    ) -> IssuedToken:
        """
        Issue a new token for a user.

        Args:
            user: User the token authenticates
            name: Label stored with the token
            expires_at: Expiry (default: now + TOKEN_EXPIRE_DAYS)

        Returns:
            IssuedToken with the bearer string and its record
        """
        now = datetime.now(timezone.utc)
        expires_at = expires_at or self.default_expiry(now)

        record = AccessToken(
            token_id=uuid.uuid4().hex,
            user_id=user.user_id,
            name=name,
            created_at=now.isoformat(),
            expires_at=expires_at.isoformat(),
        )
        self.context.tokens.add(record)

        access_token = self.context.jwt.create_access_token(
            user_id=user.user_id,
            token_id=record.token_id,
            expires_at=expires_at,
            issued_at=now
        )

        logger.info(f"Issued token {record.token_id} for user {user.user_id}, expires {record.expires_at}")
        return IssuedToken(access_token=access_token, token=record)

    def resolve(self, bearer: str) -> Optional[AccessToken]:
        """
        Find the live token record for a bearer string.

        Returns:
            AccessToken if the bearer is usable, None otherwise
        """
        payload = self.context.jwt.verify_token(bearer)
        if payload is None:
            return None

        record = self.context.tokens.get(payload.token_id)
        if record is None or record.user_id != payload.user_id:
            logger.debug(f"No record for token {payload.token_id}")
            return None

        if not record.is_valid():
            logger.debug(f"Token {record.token_id} is revoked or expired")
            return None

        return record

    def revoke(self, token_id: str) -> bool:
        """
        Revoke a token.

        Returns:
            True if revoked now, False if it was unknown or already revoked
        """
        revoked = self.context.tokens.revoke(token_id)
        if revoked:
            logger.info(f"Revoked token {token_id}")
        return revoked
