"""Application configuration."""
from collections import Counter
from functools import lru_cache
import math
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "School Site"
    debug: bool = False
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    # Database
    database_url: str = "sqlite:///./data/schoolsite.db"

    # Auth
    secret_key: str
    admin_username: str = "admin"
    placeholder_hash_prefix: str = "$2a$10$rQEY7GxLqpLFqKpVL1QqKuZ"
    session_lifetime_hours: int = 24
    min_password_length: int = 6
    bcrypt_rounds: int = 12
    revoke_sessions_on_password_change: bool = True

    # Storage
    storage_bucket: str = "gallery-images"
    storage_base_url: str = "http://localhost:8000/storage/v1"
    upload_url_expire_seconds: int = 7200
    upload_algorithm: str = "HS256"

    # Paths
    base_dir: Path = Path(__file__).parent
    content_configs_dir: Path = base_dir / "configs" / "site_content"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, value: str) -> str:
        """Fail closed if SECRET_KEY is weak or placeholder quality."""
        if not value:
            raise ValueError("SECRET_KEY must be set.")

        if len(value) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")

        weak_values = {"changeme", "changeme-in-production", "secret", "password", "test"}
        lowered = value.lower()
        if lowered in weak_values or "changeme" in lowered:
            raise ValueError("SECRET_KEY must not be a placeholder value.")

        counts = Counter(value)
        entropy_per_char = -sum((count / len(value)) * math.log2(count / len(value)) for count in counts.values())
        estimated_entropy_bits = entropy_per_char * len(value)
        if estimated_entropy_bits < 100:
            raise ValueError("SECRET_KEY entropy is too low; use a cryptographically random value.")

        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return value

    @field_validator("placeholder_hash_prefix")
    @classmethod
    def validate_placeholder_prefix(cls, value: str) -> str:
        # An empty prefix would mark every hash as uninitialized.
        if not value:
            raise ValueError("PLACEHOLDER_HASH_PREFIX must not be empty.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
