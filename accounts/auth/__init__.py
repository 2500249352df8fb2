"""
Authentication building blocks for the Accounts API.

Provides bcrypt password hashing, Turkish mobile number handling, field
validation, the JSON user and token stores and JWT encoding.
"""

from .jwt_handler import JWTHandler, TokenPayload
from .password import PasswordHandler
from .phone import normalize_phone, is_turkish_mobile
from .tokens import AccessToken, TokenStore
from .users import UserStore, User

__all__ = [
    "JWTHandler",
    "TokenPayload",
    "PasswordHandler",
    "normalize_phone",
    "is_turkish_mobile",
    "AccessToken",
    "TokenStore",
    "UserStore",
    "User",
]
