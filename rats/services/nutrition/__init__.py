"""Nutrition coaching services."""

from rats.services.nutrition.profile_service import NutritionProfileService
from rats.services.nutrition.behavior_service import NutritionBehaviorService
from rats.services.nutrition.meal_plan_service import MealPlanService
from rats.services.nutrition.recommendation_service import FoodRecommendationService
from rats.services.nutrition.nutrition_coach import NutritionCoach
from rats.services.nutrition.score import nutrition_score

__all__ = [
    "NutritionProfileService",
    "NutritionBehaviorService",
    "MealPlanService",
    "FoodRecommendationService",
    "NutritionCoach",
    "nutrition_score",
]
