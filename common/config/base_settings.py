"""
Environment settings shared by the API and the jobs.

Values come from environment variables or a ``.env`` file; apps subclass
BaseAppSettings to add their own keys (see ``sycamore/config.py``).
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    """MongoDB, JWT and HTTP server settings."""

    # ==========================================================================
    # MongoDB
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "sycamore"

    # ==========================================================================
    # Bearer tokens
    # ==========================================================================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ==========================================================================
    # Server
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"  # comma-separated, or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=True,
    )

    def get_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def is_development(self) -> bool:
        """API docs and auto-reload are only enabled in development."""
        return self.ENVIRONMENT.lower() == "development"

    def validate_required(self) -> None:
        """
        Fail fast at startup when the API can't verify tokens or reach MongoDB.

        Raises:
            ValueError: Listing every missing setting
        """
        missing = []
        if not self.JWT_SECRET:
            missing.append("JWT_SECRET is required to verify mobile tokens")
        if not self.MONGODB_URI:
            missing.append("MONGODB_URI is required")

        if missing:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(missing))
