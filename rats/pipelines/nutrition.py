"""
Nutrition coaching pipeline functions.

Profile, meal plans, recommendations, behavior tracking, the weekly
score and food analysis.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from common.utils.exceptions import NotFoundException
from common.utils.serialization import serialize_document
from rats.services.food.food_log_service import FoodLogService
from rats.services.nutrition.behavior_service import NutritionBehaviorService
from rats.services.nutrition.meal_plan_service import MealPlanService
from rats.services.nutrition.nutrition_coach import (
    NutritionCoach,
    build_coaching_context,
    simulated_image_analysis,
)
from rats.services.nutrition.profile_service import NutritionProfileService
from rats.services.nutrition.recommendation_service import FoodRecommendationService
from rats.services.nutrition.score import nutrition_score, SCORE_WINDOW_DAYS

logger = logging.getLogger(__name__)


RECENT_LOG_LIMIT = 20
RECENT_BEHAVIOR_LIMIT = 7
MIN_RECOMMENDATIONS = 5
BEHAVIOR_WINDOW_DAYS = 30


def _serialize_all(docs: List[dict]) -> List[Dict[str, Any]]:
    return [serialize_document(d) for d in docs]


async def _coaching_context(
    food_log_service: FoodLogService,
    behavior_service: NutritionBehaviorService,
    profile: Dict[str, Any],
    user_id: str
) -> Dict[str, Any]:
    recent_logs = await food_log_service.get_recent_logs(user_id, RECENT_LOG_LIMIT)
    behaviors = await behavior_service.get_recent(user_id, RECENT_BEHAVIOR_LIMIT)
    return build_coaching_context(profile, recent_logs, behaviors)


# =============================================================================
# Profile
# =============================================================================

async def upsert_profile_pipeline(
    profile_service: NutritionProfileService,
    user_id: str,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await profile_service.upsert_profile(user_id, data))


async def get_profile_pipeline(profile_service: NutritionProfileService, user_id: str) -> Dict[str, Any]:
    return serialize_document(await profile_service.require_profile(user_id))


# =============================================================================
# Meal plans
# =============================================================================

async def generate_meal_plan_pipeline(
    profile_service: NutritionProfileService,
    food_log_service: FoodLogService,
    behavior_service: NutritionBehaviorService,
    meal_plan_service: MealPlanService,
    coach: NutritionCoach,
    user_id: str,
    date: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Generate and store a meal plan for one day.

    Args:
        profile_service: Profile is required
        food_log_service: Recent foods for context
        behavior_service: Recent behaviors for context
        meal_plan_service: For persistence
        coach: AI meal planner
        user_id: Current user's ID
        date: Day to plan (default: today)

    Raises:
        NotFoundException: No nutrition profile
        InternalServerException: The model's plan could not be parsed
    """
    date = date or datetime.now(timezone.utc)
    profile = await profile_service.require_profile(user_id)

    context = await _coaching_context(food_log_service, behavior_service, profile, user_id)
    plan_data = await coach.generate_meal_plan(profile, context, date)

    plan = await meal_plan_service.create_plan(user_id, date, plan_data)
    return serialize_document(plan)


async def get_meal_plan_pipeline(
    meal_plan_service: MealPlanService,
    user_id: str,
    date: Optional[datetime] = None
) -> Dict[str, Any]:
    plan = await meal_plan_service.get_plan_for_day(user_id, date or datetime.now(timezone.utc))
    if not plan:
        raise NotFoundException(message="No active meal plan found for this date", code="MEAL_PLAN_NOT_FOUND")
    return serialize_document(plan)


async def update_meal_plan_pipeline(
    meal_plan_service: MealPlanService,
    plan_id: str,
    user_id: str,
    fields: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await meal_plan_service.update_plan(plan_id, user_id, fields))


# =============================================================================
# Recommendations
# =============================================================================

async def get_recommendations_pipeline(
    recommendation_service: FoodRecommendationService,
    profile_service: NutritionProfileService,
    food_log_service: FoodLogService,
    behavior_service: NutritionBehaviorService,
    coach: NutritionCoach,
    user_id: str
) -> List[Dict[str, Any]]:
    """
    Current recommendations, topped up by the model when fewer than five remain.

    Raises:
        NotFoundException: No nutrition profile (only when generating)
        InternalServerException: The model's answer could not be parsed
    """
    existing = await recommendation_service.list_active(user_id)
    if len(existing) >= MIN_RECOMMENDATIONS:
        return _serialize_all(existing)

    profile = await profile_service.require_profile(user_id)
    context = await _coaching_context(food_log_service, behavior_service, profile, user_id)

    items = await coach.generate_recommendations(profile, context)
    created = await recommendation_service.create_many(user_id, items)

    return _serialize_all(existing + created)


async def recommendation_feedback_pipeline(
    recommendation_service: FoodRecommendationService,
    recommendation_id: str,
    user_id: str,
    accepted: Optional[bool] = None,
    rejected: Optional[bool] = None
) -> Dict[str, Any]:
    recommendation = await recommendation_service.set_feedback(
        recommendation_id, user_id, accepted=accepted, rejected=rejected
    )
    return serialize_document(recommendation)


# =============================================================================
# Behavior
# =============================================================================

async def log_behavior_pipeline(
    behavior_service: NutritionBehaviorService,
    user_id: str,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await behavior_service.upsert_for_today(user_id, data))


async def get_behavior_pipeline(
    behavior_service: NutritionBehaviorService,
    user_id: str,
    date: Optional[datetime] = None
) -> Dict[str, Any]:
    behavior = await behavior_service.get_for_day(user_id, date or datetime.now(timezone.utc))
    if not behavior:
        raise NotFoundException(message="No behavior data found for this date", code="BEHAVIOR_NOT_FOUND")
    return serialize_document(behavior)


async def analyze_behavior_pipeline(
    profile_service: NutritionProfileService,
    behavior_service: NutritionBehaviorService,
    food_log_service: FoodLogService,
    coach: NutritionCoach,
    user_id: str,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    AI analysis of the last 30 days of behaviors and food logs.

    Returns:
        {insights, patterns, recommendations, cbtStrategies}
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=BEHAVIOR_WINDOW_DAYS)

    profile = await profile_service.require_profile(user_id)
    behaviors = await behavior_service.get_since(user_id, since)
    food_logs = await food_log_service.get_logs_since(user_id, since)

    return await coach.analyze_behavior(profile, behaviors, list(reversed(food_logs)))


# =============================================================================
# Score
# =============================================================================

async def get_score_pipeline(
    profile_service: NutritionProfileService,
    behavior_service: NutritionBehaviorService,
    food_log_service: FoodLogService,
    user_id: str,
    now: Optional[datetime] = None
) -> Dict[str, int]:
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=SCORE_WINDOW_DAYS)

    profile = await profile_service.require_profile(user_id)
    food_logs = await food_log_service.get_logs_since(user_id, since)
    behaviors = await behavior_service.get_since(user_id, since)

    return {"score": nutrition_score(profile, food_logs, behaviors)}


# =============================================================================
# Food analysis
# =============================================================================

async def analyze_food_image_pipeline(image: str) -> Dict[str, Any]:
    logger.info(f"Simulated image analysis for {len(image or '')} bytes of image data")
    return simulated_image_analysis()


async def analyze_food_text_pipeline(coach: NutritionCoach, text: str) -> Dict[str, Any]:
    return await coach.analyze_food_text(text)
