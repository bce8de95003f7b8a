"""User services."""

from rats.services.user.user_service import UserService
from rats.services.user.badge_service import BadgeService

__all__ = [
    "UserService",
    "BadgeService",
]
