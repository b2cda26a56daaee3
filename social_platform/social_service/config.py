"""
Configuration management for the social service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Social service configuration loaded from environment variables"""

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./social.db"
    DB_ECHO: bool = False

    # Token Configuration
    SECRET_KEY: str = "change-this-secret-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # Listings
    FOLLOW_PAGE_SIZE: int = 5
    USERS_PAGE_SIZE: int = 5
    PUBLICATIONS_PAGE_SIZE: int = 5

    # Uploads
    UPLOAD_DIR: str = "./uploads"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Links sent by the mailer
    PUBLIC_BASE_URL: str = "http://localhost:3900"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )
