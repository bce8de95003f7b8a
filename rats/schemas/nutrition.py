"""
Pydantic models for nutrition coaching endpoints.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class NutritionProfileRequest(BaseModel):
    """POST /api/nutrition/profile; omitted fields keep stored values or defaults."""
    calorieGoal: Optional[float] = Field(None, ge=0)
    proteinGoal: Optional[float] = Field(None, ge=0)
    carbsGoal: Optional[float] = Field(None, ge=0)
    fatGoal: Optional[float] = Field(None, ge=0)
    dietType: Optional[str] = Field(
        None,
        pattern="^(standard|vegetarian|vegan|keto|paleo|mediterranean|custom)$"
    )
    cuisinePreferences: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    intolerances: Optional[List[str]] = None
    dislikedFoods: Optional[List[str]] = None
    favoriteFoods: Optional[List[str]] = None
    weight: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    activityLevel: Optional[str] = Field(
        None,
        pattern="^(sedentary|lightly_active|moderately_active|very_active|extremely_active)$"
    )
    healthGoals: Optional[List[str]] = None
    mealSizePreference: Optional[str] = None
    budgetLevel: Optional[str] = None
    cookingSkill: Optional[str] = None
    cookingTime: Optional[str] = None
    region: Optional[str] = None
    localFoodPreferences: Optional[List[str]] = None


class GenerateMealPlanRequest(BaseModel):
    """POST /api/nutrition/meal-plan"""
    date: Optional[datetime] = None


class UpdateMealPlanRequest(BaseModel):
    """PUT /api/nutrition/meal-plan/{id}"""
    totalCalories: Optional[float] = None
    totalProtein: Optional[float] = None
    totalCarbs: Optional[float] = None
    totalFat: Optional[float] = None
    meals: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    isActive: Optional[bool] = None


class RecommendationFeedbackRequest(BaseModel):
    """PUT /api/nutrition/recommendations/{id}"""
    accepted: Optional[bool] = None
    rejected: Optional[bool] = None


class HungerLevelsInput(BaseModel):
    morning: int = Field(5, ge=1, le=10)
    afternoon: int = Field(5, ge=1, le=10)
    evening: int = Field(5, ge=1, le=10)


class NutritionBehaviorRequest(BaseModel):
    """POST /api/nutrition/behavior"""
    mealTiming: Optional[str] = None
    snackingFrequency: Optional[str] = None
    waterIntake: Optional[float] = Field(None, ge=0)
    hungerLevels: Optional[HungerLevelsInput] = None
    mood: Optional[str] = None
    stress: Optional[int] = Field(None, ge=1, le=10)
    sleep: Optional[int] = Field(None, ge=1, le=10)
    cravings: Optional[List[str]] = None
    eatingEnvironment: Optional[str] = None
    socialContext: Optional[str] = None
    mindfulEating: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None


class AnalyzeImageRequest(BaseModel):
    """POST /api/nutrition/analyze-image and POST /api/ai/analyze-image"""
    image: Optional[str] = Field(None, description="Base64 image, optionally a data: URL")


class AnalyzeTextRequest(BaseModel):
    """POST /api/nutrition/analyze-text and POST /api/ai/analyze-text"""
    text: Optional[str] = None
