"""Application configuration loaded from the environment."""
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _parse_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseModel):
    """Runtime settings.

    Attributes:
        database_url: SQLAlchemy URL of the record store database
        secret_key: Key used to sign session tokens
        jwt_algorithm: Signing algorithm for session tokens
        access_token_expire_minutes: Lifetime of a session token
        gcs_bucket_name: Bucket holding avatar images
        avatar_prefix: Object prefix for avatar images
        cors_origins: Allowed CORS origins
        log_level: Default log level
        session_cookie_name: Cookie carrying the session token for page routes
    """
    database_url: str = "sqlite:///portfolio.db"
    secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60, gt=0)
    gcs_bucket_name: Optional[str] = None
    avatar_prefix: str = "avatars"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    session_cookie_name: str = "access_token"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (after loading .env)."""
        load_dotenv()
        values = {
            "database_url": os.getenv("DATABASE_URL"),
            "secret_key": os.getenv("SECRET_KEY"),
            "jwt_algorithm": os.getenv("JWT_ALGORITHM"),
            "access_token_expire_minutes": os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES"),
            "gcs_bucket_name": os.getenv("GCS_BUCKET_NAME"),
            "avatar_prefix": os.getenv("AVATAR_PREFIX"),
            "log_level": os.getenv("LOG_LEVEL"),
            "session_cookie_name": os.getenv("SESSION_COOKIE_NAME"),
        }
        settings = {key: value for key, value in values.items() if value is not None}
        settings["cors_origins"] = _parse_origins(os.getenv("CORS_ORIGINS"))
        return cls(**settings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
