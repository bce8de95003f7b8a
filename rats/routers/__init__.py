"""
RATS API Routers.

All routers are imported here for easy access.
"""

from rats.routers.auth import router as auth_router
from rats.routers.user import router as user_router
from rats.routers.food import router as food_router
from rats.routers.events import router as events_router
from rats.routers.meditation import router as meditation_router
from rats.routers.nutrition import router as nutrition_router
from rats.routers.ai import router as ai_router
from rats.routers.social_auth import router as social_auth_router
from rats.routers.social_posts import router as social_posts_router
from rats.routers.posts import router as posts_router
from rats.routers.tasks import router as tasks_router
from rats.routers.wellness import router as wellness_router

__all__ = [
    "auth_router",
    "user_router",
    "food_router",
    "events_router",
    "meditation_router",
    "nutrition_router",
    "ai_router",
    "social_auth_router",
    "social_posts_router",
    "posts_router",
    "tasks_router",
    "wellness_router",
]
