"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite:///./welfare.db"

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # File uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024

    # Temporary login codes (empty REDIS_URL keeps codes in process memory)
    REDIS_URL: str = ""
    LOGIN_CODE_TTL_MINUTES: int = 15
    LOGIN_CODE_MAX_ATTEMPTS: int = 100

    # Registration
    ALLOW_SYSTEM_ADMIN_REGISTRATION: bool = True

    # Institution defaults
    DEFAULT_TIMEZONE: str = "Asia/Seoul"
    DEFAULT_LOCALE: str = "ko_KR"

    # Day boundaries for "today", daily reports and trends
    REPORT_TIMEZONE: str = "Asia/Seoul"

    # Environment
    ENVIRONMENT: str = "development"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
