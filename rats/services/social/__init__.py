"""Social media services."""

from rats.services.social.social_post_service import SocialPostService
from rats.services.social.instagram_service import InstagramService, format_instagram_message

__all__ = [
    "SocialPostService",
    "InstagramService",
    "format_instagram_message",
]
