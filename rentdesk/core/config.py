"""
RentDesk settings

Every value can be overridden from the environment or a local .env file.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        validate_default=True,
    )

    # ==================== Service ====================
    PROJECT_NAME: str = "RentDesk API"
    PROJECT_DESCRIPTION: str = "Property management API: properties, tenants, maintenance, payments and documents"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"

    # ==================== Storage ====================
    DATABASE_URL: str = "sqlite:///rentdesk_local.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_RECYCLE: int = 3600
    DATABASE_CONNECT_TIMEOUT: int = 10
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    # ==================== Auth ====================
    SECRET_KEY: str = "change-this-secret-key-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12
    ALLOW_ADMIN_SIGNUP: bool = False

    CORS_ORIGINS: List[str] = ["*"]

    # ==================== Listing and search ====================
    DEFAULT_PAGE_SIZE: int = 100
    MAX_PAGE_SIZE: int = 500
    NEARBY_RADIUS_METERS: float = 5000
    NEARBY_LIMIT: int = 10

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def is_production() -> bool:
    """Real database, debug off, not under test"""
    return not (settings.DEBUG or settings.TESTING or settings.is_sqlite)


def is_development() -> bool:
    return settings.DEBUG or settings.is_sqlite


def is_testing() -> bool:
    return settings.TESTING
