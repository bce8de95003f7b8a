"""
RATS application settings.

Extends the base settings with RATS-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """RATS-specific settings."""

    # ==========================================================================
    # Instagram OAuth
    # ==========================================================================
    INSTAGRAM_CLIENT_ID: Optional[str] = None
    INSTAGRAM_CLIENT_SECRET: Optional[str] = None
    INSTAGRAM_REDIRECT_URI: str = "http://localhost:5001/api/social-auth/instagram/callback"

    # ==========================================================================
    # Gamification
    # ==========================================================================
    XP_FOOD_LOG: int = 5
    XP_MEDITATION: int = 20
    XP_POST: int = 15
    XP_TASK_OWNER: int = 10
    XP_TASK_COLLABORATOR: int = 5

    # ==========================================================================
    # Email Settings (event reminders)
    # ==========================================================================
    EMAIL_MODE: str = "smtp"  # "smtp" or "console"
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@rats.app"
    SMTP_FROM_NAME: str = "RATS Event Reminder"

    # ==========================================================================
    # Frontend URL (redirects and email links)
    # ==========================================================================
    CLIENT_URL: str = "http://localhost:3000"


# Global settings instance
settings = Settings()
