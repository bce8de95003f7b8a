"""
Configuration module - Fixed constants for external integrations.
"""

from config.email_config import EMAIL_DEFAULTS
from config.ai_config import GEMINI_MODEL_CHAIN, GEMINI_GENERATION_CONFIG
from config.social_config import INSTAGRAM_MAX_CAPTION_LENGTH, INSTAGRAM_HASHTAGS

__all__ = [
    "EMAIL_DEFAULTS",
    "GEMINI_MODEL_CHAIN",
    "GEMINI_GENERATION_CONFIG",
    "INSTAGRAM_MAX_CAPTION_LENGTH",
    "INSTAGRAM_HASHTAGS",
]
