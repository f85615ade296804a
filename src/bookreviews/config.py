"""Configuration management for bookreviews.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_JWT_SECRET = "change-me"


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: str

    # Auth
    jwt_secret: str
    token_ttl: int  # seconds

    # Logging
    log_level: str

    # Server
    host: str
    port: int

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path = os.environ.get(
            "BOOKREVIEWS_DB_PATH",
            str(Path.home() / ".bookreviews" / "bookreviews.db"),
        )
        if db_path != ":memory:":
            db_path = str(Path(db_path).expanduser())

        return cls(
            db_path=db_path,
            jwt_secret=os.environ.get("JWT_SECRET", DEFAULT_JWT_SECRET),
            token_ttl=int(os.environ.get("BOOKREVIEWS_TOKEN_TTL", "3600")),
            log_level=os.environ.get("BOOKREVIEWS_LOG_LEVEL", "INFO").upper(),
            host=os.environ.get("BOOKREVIEWS_HOST", "127.0.0.1"),
            port=int(os.environ.get("BOOKREVIEWS_PORT", "5000")),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.db_path != ":memory:":
            parent = Path(self.db_path).parent
            if not parent.exists():
                try:
                    parent.mkdir(parents=True, exist_ok=True)
                except PermissionError:
                    errors.append(f"Cannot create database directory: {parent}")

        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET is not set; tokens are signed with the default secret")

        if self.token_ttl <= 0:
            errors.append("BOOKREVIEWS_TOKEN_TTL must be a positive number of seconds")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
