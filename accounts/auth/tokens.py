"""
Access token records.

Every issued bearer token has a record here. Logging out marks the record
revoked, which is what makes a still-unexpired JWT stop working.
"""

import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass, asdict

from .storage import JsonFileStore

logger = logging.getLogger(__name__)

DEFAULT_TOKENS_FILE = Path(__file__).parent.parent.parent / "data" / "tokens.json"


@dataclass
class AccessToken:
    """Stored state of one issued bearer token."""
    token_id: str
    user_id: str
    name: str
    created_at: str
    expires_at: str
    revoked: bool = False

    @property
    def expires_at_datetime(self) -> datetime:
        return datetime.fromisoformat(self.expires_at)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at_datetime <= now

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return not self.revoked and not self.is_expired(now)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AccessToken":
        return cls(**data)


class TokenStore(JsonFileStore):
    """
    JSON-based token record storage, keyed by token ID.

    A user may own any number of records (one per login).
    """

    def __init__(self, file_path: Optional[Path] = None):
        super().__init__(file_path or DEFAULT_TOKENS_FILE)

    def add(self, token: AccessToken) -> AccessToken:
        with self.locked():
            tokens = self._load_all()
            tokens[token.token_id] = token.to_dict()
            self._save_all(tokens)
        return token

    def get(self, token_id: str) -> Optional[AccessToken]:
        data = self._load_all().get(token_id)
        return AccessToken.from_dict(data) if data else None

    def revoke(self, token_id: str) -> bool:
        """
        Mark a token revoked.

        Returns:
            True if the token was revoked now, False if it does not exist
            or was already revoked
        """
        with self.locked():
            tokens = self._load_all()
            data = tokens.get(token_id)
            if not data or data["revoked"]:
                return False

            data["revoked"] = True
            self._save_all(tokens)

        logger.debug(f"Revoked token {token_id}")
        return True

    def prune_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete records that can no longer authenticate anything.

        Returns:
            Number of records removed
        """
        with self.locked():
            tokens = self._load_all()
            stale = [
                token_id for token_id, data in tokens.items()
                if not AccessToken.from_dict(data).is_valid(now)
            ]
            for token_id in stale:
                del tokens[token_id]
            if stale:
                self._save_all(tokens)

        if stale:
            logger.info(f"Pruned {len(stale)} expired or revoked tokens")
        return len(stale)
