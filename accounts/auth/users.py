"""
User storage and management.

Stores users in a JSON file keyed by user ID. Email and phone number are
unique; the store checks them while holding the file lock, so two
registrations racing for the same value cannot both succeed, even from
separate processes.
"""

import logging
import uuid
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, List
from dataclasses import dataclass, asdict, field

from ..exceptions import ConflictError
from .password import PasswordHandler
from .phone import normalize_phone
from .storage import JsonFileStore
from .validation import MESSAGES, ATTRIBUTES

logger = logging.getLogger(__name__)

DEFAULT_USERS_FILE = Path(__file__).parent.parent.parent / "data" / "users.json"

LOGIN_FIELDS = ("email", "phone_number")


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class User:
    """User data model."""
    user_id: str
    firstname: str
    lastname: str
    email: str
    phone_number: str  # Normalized, see accounts.auth.phone
    password_hash: str
    created_at: str = field(default_factory=utcnow_iso)
    updated_at: str = field(default_factory=utcnow_iso)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_public_dict(self) -> dict:
        """Representation returned to API clients (no password hash)."""
        return {
            "id": self.user_id,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "email": self.email,
            "phone_number": self.phone_number,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=data["user_id"],
            firstname=data["firstname"],
            lastname=data["lastname"],
            email=data["email"],
            phone_number=data["phone_number"],
            password_hash=data["password_hash"],
            created_at=data.get("created_at", utcnow_iso()),
            updated_at=data.get("updated_at", utcnow_iso()),
        )


def _email_key(email: str) -> str:
    return email.strip().casefold()


def _taken_message(field_name: str) -> str:
    return MESSAGES["unique"].format(attribute=ATTRIBUTES[field_name])


class UserStore(JsonFileStore):
    """
    JSON-based user storage.

    Safe to share a file between threads, store instances and processes.
    """

    def __init__(
        self,
        file_path: Optional[Path] = None,
        password_handler: Optional[PasswordHandler] = None
    ):
        """
        Initialize user store.

        Args:
            file_path: Path to users JSON file (default: data/users.json)
            password_handler: Hasher for passwords (default: bcrypt, 12 rounds)
        """
        super().__init__(file_path or DEFAULT_USERS_FILE)
        self.password_handler = password_handler or PasswordHandler()

    def _find(self, users: dict[str, dict], field_name: str, value: str) -> Optional[dict]:
        if field_name == "email":
            key = _email_key(value)
            for data in users.values():
                if _email_key(data["email"]) == key:
                    return data
            return None

        for data in users.values():
            if data.get(field_name) == value:
                return data
        return None

    def create_user(
        self,
        firstname: str,
        lastname: str,
        email: str,
        phone_number: str,
        password: str
    ) -> User:
        """
        Create a new user.

        Args:
            firstname: First name
            lastname: Last name
            email: Email address (unique, compared case-insensitively)
            phone_number: Turkish mobile number (normalized before storing)
            password: Plain text password (stored as a bcrypt hash)

        Returns:
            Created User object

        Raises:
            ValueError: If the phone number is not a Turkish mobile number
            ConflictError: If the email or phone number is already registered
        """
        normalized_phone = normalize_phone(phone_number)
        if not normalized_phone:
            raise ValueError(f"Invalid phone number: {phone_number}")

        password_hash = self.password_handler.hash(password)

        with self.locked():
            users = self._load_all()

            conflicts = {}
            if self._find(users, "email", email):
                conflicts["email"] = [_taken_message("email")]
            if self._find(users, "phone_number", normalized_phone):
                conflicts["phone_number"] = [_taken_message("phone_number")]
            if conflicts:
                logger.warning(f"Rejected duplicate registration for fields: {', '.join(conflicts)}")
                raise ConflictError(conflicts)

            user = User(
                user_id=str(uuid.uuid4()),
                firstname=firstname,
                lastname=lastname,
                email=email,
                phone_number=normalized_phone,
                password_hash=password_hash,
            )

            users[user.user_id] = user.to_dict()
            self._save_all(users)

        logger.info(f"Created user: {user.user_id}")
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by user ID."""
        data = self._load_all().get(user_id)
        return User.from_dict(data) if data else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        data = self._find(self._load_all(), "email", email)
        return User.from_dict(data) if data else None

    def get_by_phone(self, phone: str) -> Optional[User]:
        """
        Get user by phone number.

        Args:
            phone: Phone number (will be normalized)

        Returns:
            User if found, None otherwise
        """
        normalized = normalize_phone(phone)
        if not normalized:
            return None

        data = self._find(self._load_all(), "phone_number", normalized)
        return User.from_dict(data) if data else None

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def phone_exists(self, phone: str) -> bool:
        return self.get_by_phone(phone) is not None

    def verify_credentials(self, field_name: str, identifier: str, password: str) -> Optional[User]:
        """
        Look a user up by email or phone number and check the password.

        Unknown identifiers and wrong passwords both return None.

        Args:
            field_name: "email" or "phone_number"
            identifier: The email address or phone number
            password: Plain text password to verify

        Returns:
            User if the credentials match, None otherwise
        """
        if field_name not in LOGIN_FIELDS:
            raise ValueError(f"Cannot log in by {field_name}")

        if field_name == "email":
            user = self.get_by_email(identifier)
        else:
            user = self.get_by_phone(identifier)

        if not user:
            return None

        if not self.password_handler.verify(password, user.password_hash):
            return None

        if self.password_handler.needs_rehash(user.password_hash):
            user = self._rehash_password(user, password)
        return user

    def _rehash_password(self, user: User, password: str) -> User:
        """Replace a hash made with a different cost factor after a successful login."""
        password_hash = self.password_handler.hash(password)

        with self.locked():
            users = self._load_all()
            data = users.get(user.user_id)
            if not data:
                return user

            data["password_hash"] = password_hash
            data["updated_at"] = utcnow_iso()
            self._save_all(users)

        logger.info(f"Rehashed password for user: {user.user_id}")
        return User.from_dict(data)

    def list_users(self) -> List[User]:
        """List all users."""
        return [User.from_dict(data) for data in self._load_all().values()]
