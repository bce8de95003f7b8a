"""
FastAPI router for nutrition coaching endpoints.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from common.utils import success_response
from common.utils.dates import parse_date
from common.utils.exceptions import BadRequestException
from rats.config import settings
from rats.dependencies import (
    require_auth,
    get_nutrition_profile_service,
    get_nutrition_behavior_service,
    get_meal_plan_service,
    get_recommendation_service,
    get_nutrition_coach,
    get_food_log_service,
    get_user_service,
    get_badge_service,
)
from rats.pipelines import food as food_pipelines
from rats.pipelines import nutrition as pipelines
from rats.schemas.food import FoodLogRequest
from rats.schemas.nutrition import (
    NutritionProfileRequest,
    GenerateMealPlanRequest,
    UpdateMealPlanRequest,
    RecommendationFeedbackRequest,
    NutritionBehaviorRequest,
    AnalyzeImageRequest,
    AnalyzeTextRequest,
)
from rats.services.food.food_log_service import FoodLogService
from rats.services.nutrition.behavior_service import NutritionBehaviorService
from rats.services.nutrition.meal_plan_service import MealPlanService
from rats.services.nutrition.nutrition_coach import NutritionCoach
from rats.services.nutrition.profile_service import NutritionProfileService
from rats.services.nutrition.recommendation_service import FoodRecommendationService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


# =============================================================================
# Profile
# =============================================================================

@router.post("/profile")
async def upsert_profile(
    body: NutritionProfileRequest,
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
):
    """Create or update the nutrition profile."""
    result = await pipelines.upsert_profile_pipeline(
        profile_service=profile_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.get("/profile")
async def get_profile(
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
):
    result = await pipelines.get_profile_pipeline(profile_service=profile_service, user_id=str(user["_id"]))
    return success_response(result)


# =============================================================================
# Meal plans
# =============================================================================

@router.post("/meal-plan", status_code=status.HTTP_201_CREATED)
async def generate_meal_plan(
    body: GenerateMealPlanRequest,
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
    meal_plan_service: Annotated[MealPlanService, Depends(get_meal_plan_service)],
    coach: Annotated[NutritionCoach, Depends(get_nutrition_coach)],
):
    """Generate a meal plan for one day from the profile and recent history."""
    result = await pipelines.generate_meal_plan_pipeline(
        profile_service=profile_service,
        food_log_service=food_log_service,
        behavior_service=behavior_service,
        meal_plan_service=meal_plan_service,
        coach=coach,
        user_id=str(user["_id"]),
        date=body.date,
    )
    return success_response(result)


@router.get("/meal-plan")
async def get_meal_plan(
    user: Annotated[dict, Depends(require_auth)],
    meal_plan_service: Annotated[MealPlanService, Depends(get_meal_plan_service)],
    date: Optional[str] = Query(None, description="YYYY-MM-DD format"),
):
    result = await pipelines.get_meal_plan_pipeline(
        meal_plan_service=meal_plan_service,
        user_id=str(user["_id"]),
        date=parse_date(date) if date else None,
    )
    return success_response(result)


@router.put("/meal-plan/{plan_id}")
async def update_meal_plan(
    plan_id: str,
    body: UpdateMealPlanRequest,
    user: Annotated[dict, Depends(require_auth)],
    meal_plan_service: Annotated[MealPlanService, Depends(get_meal_plan_service)],
):
    result = await pipelines.update_meal_plan_pipeline(
        meal_plan_service=meal_plan_service,
        plan_id=plan_id,
        user_id=str(user["_id"]),
        fields=body.model_dump(exclude_none=True),
    )
    return success_response(result)


# =============================================================================
# Recommendations
# =============================================================================

@router.get("/recommendations")
async def get_recommendations(
    user: Annotated[dict, Depends(require_auth)],
    recommendation_service: Annotated[FoodRecommendationService, Depends(get_recommendation_service)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
    coach: Annotated[NutritionCoach, Depends(get_nutrition_coach)],
):
    """Current food recommendations, generating more when fewer than five remain."""
    result = await pipelines.get_recommendations_pipeline(
        recommendation_service=recommendation_service,
        profile_service=profile_service,
        food_log_service=food_log_service,
        behavior_service=behavior_service,
        coach=coach,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.put("/recommendations/{recommendation_id}")
async def recommendation_feedback(
    recommendation_id: str,
    body: RecommendationFeedbackRequest,
    user: Annotated[dict, Depends(require_auth)],
    recommendation_service: Annotated[FoodRecommendationService, Depends(get_recommendation_service)],
):
    result = await pipelines.recommendation_feedback_pipeline(
        recommendation_service=recommendation_service,
        recommendation_id=recommendation_id,
        user_id=str(user["_id"]),
        accepted=body.accepted,
        rejected=body.rejected,
    )
    return success_response(result)


# =============================================================================
# Behavior
# =============================================================================

@router.post("/behavior")
async def log_behavior(
    body: NutritionBehaviorRequest,
    user: Annotated[dict, Depends(require_auth)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
):
    result = await pipelines.log_behavior_pipeline(
        behavior_service=behavior_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.get("/behavior")
async def get_behavior(
    user: Annotated[dict, Depends(require_auth)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
    date: Optional[str] = Query(None, description="YYYY-MM-DD format"),
):
    result = await pipelines.get_behavior_pipeline(
        behavior_service=behavior_service,
        user_id=str(user["_id"]),
        date=parse_date(date) if date else None,
    )
    return success_response(result)


@router.post("/analyze-behavior")
async def analyze_behavior(
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    coach: Annotated[NutritionCoach, Depends(get_nutrition_coach)],
):
    """AI insights over the last 30 days of behaviors and food logs."""
    result = await pipelines.analyze_behavior_pipeline(
        profile_service=profile_service,
        behavior_service=behavior_service,
        food_log_service=food_log_service,
        coach=coach,
        user_id=str(user["_id"]),
    )
    return success_response(result)


# =============================================================================
# Score and food logging
# =============================================================================

@router.get("/score")
async def get_score(
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[NutritionProfileService, Depends(get_nutrition_profile_service)],
    behavior_service: Annotated[NutritionBehaviorService, Depends(get_nutrition_behavior_service)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
):
    result = await pipelines.get_score_pipeline(
        profile_service=profile_service,
        behavior_service=behavior_service,
        food_log_service=food_log_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/log-food", status_code=status.HTTP_201_CREATED)
async def log_enhanced_food(
    body: FoodLogRequest,
    user: Annotated[dict, Depends(require_auth)],
    food_log_service: Annotated[FoodLogService, Depends(get_food_log_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    badge_service: Annotated[BadgeService, Depends(get_badge_service)],
):
    """Detailed food log (meal type, hunger, context) with the usual XP and streak rules."""
    result = await food_pipelines.log_food_pipeline(
        food_log_service=food_log_service,
        user_service=user_service,
        badge_service=badge_service,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
        xp_reward=settings.XP_FOOD_LOG,
    )
    return success_response(result)


@router.post("/analyze-image")
async def analyze_image(
    body: AnalyzeImageRequest,
    user: Annotated[dict, Depends(require_auth)],
):
    if not body.image:
        raise BadRequestException(message="Image data is required", code="VALIDATION_ERROR")
    result = await pipelines.analyze_food_image_pipeline(image=body.image)
    return success_response(result)


@router.post("/analyze-text")
async def analyze_text(
    body: AnalyzeTextRequest,
    user: Annotated[dict, Depends(require_auth)],
    coach: Annotated[NutritionCoach, Depends(get_nutrition_coach)],
):
    if not body.text or not body.text.strip():
        raise BadRequestException(message="Food description is required", code="VALIDATION_ERROR")
    result = await pipelines.analyze_food_text_pipeline(coach=coach, text=body.text)
    return success_response(result)
