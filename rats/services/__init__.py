"""
RATS Services.

All service classes organized by feature.
"""

# User services
from rats.services.user.user_service import UserService
from rats.services.user.badge_service import BadgeService

# Food
from rats.services.food.food_log_service import FoodLogService

# Events
from rats.services.email.email_service import EmailService
from rats.services.events.event_service import EventService
from rats.services.events.event_content_generator import EventContentGenerator
from rats.services.events.reminder_service import ReminderService

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
