"""
FastAPI dependencies for the RATS application.

Provides dependency injection for all services.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.ai import AIProvider, GeminiProvider, ClaudeProvider, OpenAIProvider
from common.auth import JWTAuth
from rats.config import Settings, settings
from rats.middleware.auth import AuthMiddleware

# User services
from rats.services.user.user_service import UserService
from rats.services.user.badge_service import BadgeService

# Food
from rats.services.food.food_log_service import FoodLogService

# Events
from rats.services.events.event_service import EventService
from rats.services.events.event_content_generator import EventContentGenerator
from rats.services.events.reminder_service import ReminderService
from rats.services.email.email_service import EmailService

# Meditation
from rats.services.meditation.catalog_service import MeditationCatalogService
from rats.services.meditation.progress_service import MeditationProgressService
from rats.services.meditation.custom_meditation_service import CustomMeditationService

# AI / nutrition
from rats.services.ai.assistant_service import AIAssistantService
from rats.services.nutrition.profile_service import NutritionProfileService
from rats.services.nutrition.behavior_service import NutritionBehaviorService
from rats.services.nutrition.meal_plan_service import MealPlanService
from rats.services.nutrition.recommendation_service import FoodRecommendationService
from rats.services.nutrition.nutrition_coach import NutritionCoach

# Social / community
from rats.services.social.social_post_service import SocialPostService
from rats.services.social.instagram_service import InstagramService
from rats.services.community.post_service import PostService
from rats.services.tasks.task_service import TaskService
from rats.services.wellness.wellness_service import WellnessService

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Auth
_jwt_auth: Optional[JWTAuth] = None
_auth_middleware: Optional[AuthMiddleware] = None

# User
_user_service: Optional[UserService] = None
_badge_service: Optional[BadgeService] = None

# Food
_food_log_service: Optional[FoodLogService] = None

# Events
_event_service: Optional[EventService] = None
_event_content_generator: Optional[EventContentGenerator] = None
_email_service: Optional[EmailService] = None
_reminder_service: Optional[ReminderService] = None

# Meditation
_catalog_service: Optional[MeditationCatalogService] = None
_progress_service: Optional[MeditationProgressService] = None
_custom_meditation_service: Optional[CustomMeditationService] = None

# AI
_ai_provider: Optional[AIProvider] = None
_assistant_service: Optional[AIAssistantService] = None

# Nutrition
_nutrition_profile_service: Optional[NutritionProfileService] = None
_nutrition_behavior_service: Optional[NutritionBehaviorService] = None
_meal_plan_service: Optional[MealPlanService] = None
_recommendation_service: Optional[FoodRecommendationService] = None
_nutrition_coach: Optional[NutritionCoach] = None

# Social
_social_post_service: Optional[SocialPostService] = None
_instagram_service: Optional[InstagramService] = None

# Community
_post_service: Optional[PostService] = None
_task_service: Optional[TaskService] = None
_wellness_service: Optional[WellnessService] = None

# Database
_main_db: Optional[AsyncIOMotorDatabase] = None


# ─────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────

def build_ai_provider(app_settings: Settings) -> Optional[AIProvider]:
    """
    Create the provider selected by AI_PROVIDER.

    Returns None when the provider has no API key configured.
    """
    provider_name = app_settings.AI_PROVIDER.lower()
    api_key = app_settings.get_ai_api_key()

    if not api_key:
        logger.warning(f"No API key for AI provider '{provider_name}', AI features disabled")
        return None

    if provider_name == "claude":
        return ClaudeProvider(api_key=api_key, model=app_settings.CLAUDE_MODEL)
    if provider_name == "openai":
        return OpenAIProvider(api_key=api_key, model=app_settings.OPENAI_MODEL)
    return GeminiProvider(api_key=api_key)


def build_email_service(app_settings: Settings) -> EmailService:
    return EmailService(
        mode=app_settings.EMAIL_MODE,
        from_email=app_settings.SMTP_FROM_EMAIL,
        from_name=app_settings.SMTP_FROM_NAME,
        client_url=app_settings.CLIENT_URL,
        smtp_host=app_settings.SMTP_HOST,
        smtp_port=app_settings.SMTP_PORT,
        smtp_user=app_settings.SMTP_USER,
        smtp_password=app_settings.SMTP_PASSWORD,
    )


def build_instagram_service(
    app_settings: Settings,
    user_service: UserService,
    social_post_service: SocialPostService
) -> InstagramService:
    return InstagramService(
        user_service=user_service,
        social_post_service=social_post_service,
        client_id=app_settings.INSTAGRAM_CLIENT_ID,
        client_secret=app_settings.INSTAGRAM_CLIENT_SECRET,
        redirect_uri=app_settings.INSTAGRAM_REDIRECT_URI,
    )


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_user_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize user services."""
    global _user_service, _badge_service

    _user_service = UserService(db=db)
    _badge_service = BadgeService(db=db)


def init_auth_services(app_settings: Settings) -> None:
    """Initialize auth services. Requires user services."""
    global _jwt_auth, _auth_middleware

    _jwt_auth = JWTAuth(
        secret=app_settings.JWT_SECRET,
        algorithm=app_settings.JWT_ALGORITHM,
        access_token_expire_minutes=app_settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    _auth_middleware = AuthMiddleware(jwt_auth=_jwt_auth, user_service=_user_service)


def init_food_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize food logging services."""
    global _food_log_service

    _food_log_service = FoodLogService(db=db)


def init_ai_services(app_settings: Settings) -> None:
    """Initialize the AI provider and the services built on it."""
    global _ai_provider, _assistant_service, _nutrition_coach, _event_content_generator

    _ai_provider = build_ai_provider(app_settings)
    _assistant_service = AIAssistantService(ai_provider=_ai_provider)
    _nutrition_coach = NutritionCoach(assistant=_assistant_service)
    _event_content_generator = EventContentGenerator(ai_provider=_ai_provider)


def init_event_services(db: AsyncIOMotorDatabase, app_settings: Settings) -> None:
    """Initialize event and reminder services. Requires user services."""
    global _event_service, _email_service, _reminder_service

    _event_service = EventService(db=db)
    _email_service = build_email_service(app_settings)
    _reminder_service = ReminderService(
        event_service=_event_service,
        user_service=_user_service,
        email_service=_email_service,
    )


def init_meditation_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize meditation services."""
    global _catalog_service, _progress_service, _custom_meditation_service

    _catalog_service = MeditationCatalogService(db=db)
    _progress_service = MeditationProgressService(db=db)
    _custom_meditation_service = CustomMeditationService(db=db)


def init_nutrition_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize nutrition services."""
    global _nutrition_profile_service, _nutrition_behavior_service
    global _meal_plan_service, _recommendation_service

    _nutrition_profile_service = NutritionProfileService(db=db)
    _nutrition_behavior_service = NutritionBehaviorService(db=db)
    _meal_plan_service = MealPlanService(db=db)
    _recommendation_service = FoodRecommendationService(db=db)


def init_social_services(db: AsyncIOMotorDatabase, app_settings: Settings) -> None:
    """Initialize social media services. Requires user services."""
    global _social_post_service, _instagram_service

    _social_post_service = SocialPostService(db=db)
    _instagram_service = build_instagram_service(app_settings, _user_service, _social_post_service)


def init_community_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize posts, tasks and wellness services."""
    global _post_service, _task_service, _wellness_service

    _post_service = PostService(db=db)
    _task_service = TaskService(db=db)
    _wellness_service = WellnessService(db=db)


def init_all_services(db: AsyncIOMotorDatabase, app_settings: Optional[Settings] = None) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        app_settings: Settings override (default: the global settings)
    """
    global _main_db
    _main_db = db

    app_settings = app_settings or settings

    init_user_services(db)
    init_auth_services(app_settings)
    init_food_services(db)
    init_ai_services(app_settings)
    init_event_services(db, app_settings)
    init_meditation_services(db)
    init_nutrition_services(db)
    init_social_services(db, app_settings)
    init_community_services(db)


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_jwt_auth() -> JWTAuth:
    """Get JWT auth instance."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized.")
    return _jwt_auth


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_middleware


async def require_auth(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> dict:
    """Dependency that requires authentication."""
    return await auth_middleware.require_auth(request)


# ─────────────────────────────────────────────────────────────────
# User getters
# ─────────────────────────────────────────────────────────────────

def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("User services not initialized.")
    return _user_service


def get_badge_service() -> BadgeService:
    """Get badge service instance."""
    if _badge_service is None:
        raise RuntimeError("User services not initialized.")
    return _badge_service


# ─────────────────────────────────────────────────────────────────
# Food getters
# ─────────────────────────────────────────────────────────────────

def get_food_log_service() -> FoodLogService:
    """Get food log service instance."""
    if _food_log_service is None:
        raise RuntimeError("Food services not initialized.")
    return _food_log_service


# ─────────────────────────────────────────────────────────────────
# Event getters
# ─────────────────────────────────────────────────────────────────

def get_event_service() -> EventService:
    """Get event service instance."""
    if _event_service is None:
        raise RuntimeError("Event services not initialized.")
    return _event_service


def get_event_content_generator() -> EventContentGenerator:
    """Get event content generator instance."""
    if _event_content_generator is None:
        raise RuntimeError("AI services not initialized.")
    return _event_content_generator


def get_email_service() -> EmailService:
    """Get email service instance."""
    if _email_service is None:
        raise RuntimeError("Event services not initialized.")
    return _email_service


def get_reminder_service() -> ReminderService:
    """Get reminder service instance."""
    if _reminder_service is None:
        raise RuntimeError("Event services not initialized.")
    return _reminder_service


# ─────────────────────────────────────────────────────────────────
# Meditation getters
# ─────────────────────────────────────────────────────────────────

def get_catalog_service() -> MeditationCatalogService:
    """Get meditation catalog service instance."""
    if _catalog_service is None:
        raise RuntimeError("Meditation services not initialized.")
    return _catalog_service


def get_progress_service() -> MeditationProgressService:
    """Get meditation progress service instance."""
    if _progress_service is None:
        raise RuntimeError("Meditation services not initialized.")
    return _progress_service


def get_custom_meditation_service() -> CustomMeditationService:
    """Get custom meditation service instance."""
    if _custom_meditation_service is None:
        raise RuntimeError("Meditation services not initialized.")
    return _custom_meditation_service


# ─────────────────────────────────────────────────────────────────
# AI getters
# ─────────────────────────────────────────────────────────────────

def get_assistant_service() -> AIAssistantService:
    """Get AI assistant service instance."""
    if _assistant_service is None:
        raise RuntimeError("AI services not initialized.")
    return _assistant_service


def get_nutrition_coach() -> NutritionCoach:
    """Get nutrition coach instance."""
    if _nutrition_coach is None:
        raise RuntimeError("AI services not initialized.")
    return _nutrition_coach


# ─────────────────────────────────────────────────────────────────
# Nutrition getters
# ─────────────────────────────────────────────────────────────────

def get_nutrition_profile_service() -> NutritionProfileService:
    """Get nutrition profile service instance."""
    if _nutrition_profile_service is None:
        raise RuntimeError("Nutrition services not initialized.")
    return _nutrition_profile_service


def get_nutrition_behavior_service() -> NutritionBehaviorService:
    """Get nutrition behavior service instance."""
    if _nutrition_behavior_service is None:
        raise RuntimeError("Nutrition services not initialized.")
    return _nutrition_behavior_service


def get_meal_plan_service() -> MealPlanService:
    """Get meal plan service instance."""
    if _meal_plan_service is None:
        raise RuntimeError("Nutrition services not initialized.")
    return _meal_plan_service


def get_recommendation_service() -> FoodRecommendationService:
    """Get food recommendation service instance."""
    if _recommendation_service is None:
        raise RuntimeError("Nutrition services not initialized.")
    return _recommendation_service


# ─────────────────────────────────────────────────────────────────
# Social getters
# ─────────────────────────────────────────────────────────────────

def get_social_post_service() -> SocialPostService:
    """Get social media post service instance."""
    if _social_post_service is None:
        raise RuntimeError("Social services not initialized.")
    return _social_post_service


def get_instagram_service() -> InstagramService:
    """Get Instagram service instance."""
    if _instagram_service is None:
        raise RuntimeError("Social services not initialized.")
    return _instagram_service


# ─────────────────────────────────────────────────────────────────
# Community getters
# ─────────────────────────────────────────────────────────────────

def get_post_service() -> PostService:
    """Get community post service instance."""
    if _post_service is None:
        raise RuntimeError("Community services not initialized.")
    return _post_service


def get_task_service() -> TaskService:
    """Get task service instance."""
    if _task_service is None:
        raise RuntimeError("Community services not initialized.")
    return _task_service


def get_wellness_service() -> WellnessService:
    """Get wellness service instance."""
    if _wellness_service is None:
        raise RuntimeError("Community services not initialized.")
    return _wellness_service


# ─────────────────────────────────────────────────────────────────
# Database getters
# ─────────────────────────────────────────────────────────────────

def get_main_db() -> AsyncIOMotorDatabase:
    """Get main database connection."""
    if _main_db is None:
        raise RuntimeError("Database not initialized.")
    return _main_db
