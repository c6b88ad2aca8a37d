"""
Sycamore application settings.

Extends the base settings with devotional-specific configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Sycamore-specific settings."""

    # ==========================================================================
    # Devotional Settings
    # ==========================================================================
    # Upper bound for a single page of reading history
    READING_HISTORY_MAX_LIMIT: int = 90

    # Persist achievement unlocks when a reading is recorded
    ACHIEVEMENT_UNLOCKS_ENABLED: bool = True


# Global settings instance
settings = Settings()
