"""Configuration module for the Accounts API."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List
from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_SECRET_KEY = "accounts-api-secret-key-change-in-production"


@dataclass
class AuthConfig:
    """Token and password hashing settings."""
    jwt_secret_key: str = field(default_factory=lambda: os.getenv("JWT_SECRET_KEY", DEFAULT_SECRET_KEY))
    jwt_algorithm: str = field(default_factory=lambda: os.getenv("JWT_ALGORITHM", "HS256"))

    # Lifetime of a token issued without "remember me"
    token_expire_days: int = field(default_factory=lambda: int(os.getenv("TOKEN_EXPIRE_DAYS", "365")))

    # Lifetime of a token issued with "remember me"
    remember_me_weeks: int = field(default_factory=lambda: int(os.getenv("REMEMBER_ME_WEEKS", "4")))

    bcrypt_rounds: int = field(default_factory=lambda: int(os.getenv("BCRYPT_ROUNDS", "12")))


@dataclass
class StorageConfig:
    """Where user and token records are kept."""
    users_file: Path = field(default_factory=lambda: Path(os.getenv("USERS_FILE", str(DATA_DIR / "users.json"))))
    tokens_file: Path = field(default_factory=lambda: Path(os.getenv("TOKENS_FILE", str(DATA_DIR / "tokens.json"))))


@dataclass
class Config:
    """Main configuration container."""
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    cors_origins: List[str] = field(default_factory=lambda: [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ])


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
