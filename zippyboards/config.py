"""ZippyBoards Configuration Settings."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Data service
    DATABASE_URL: Optional[str] = None
    ANON_KEY: str = Field(default="dev-anon-key")
    SERVICE_ROLE_KEY: Optional[str] = None  # server-only, grants elevated access

    # Session tokens
    JWT_SECRET_KEY: str = Field(default="dev-secret-key-change-me")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    AUTH_CODE_EXPIRE_MINUTES: int = 60
    SESSION_COOKIE_NAME: str = "zb-auth-token"

    # Application
    APP_NAME: str = "ZippyBoards"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000"

    # Redirect targets
    SITE_URL: str = "http://localhost:3000"
    APP_URL: str = "http://localhost:3000/dashboard"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @property
    def cors_origins_list(self) -> List[str]:
        """Return the configured CORS origins as a sanitized list."""

        if not self.CORS_ORIGINS:
            return []

        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def auth_callback_url(self) -> str:
        return f"{self.SITE_URL.rstrip('/')}/auth/callback"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
