"""
Pydantic models for food logging.

The enhanced nutrition log (POST /api/nutrition/log-food) uses the same
model; every field beyond foodName and calories is optional and falls
back to the stored defaults.
"""

from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class FoodLogRequest(BaseModel):
    """POST /api/food and POST /api/nutrition/log-food"""
    foodName: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    portion: Optional[str] = None
    mealType: Optional[str] = Field(None, pattern="^(breakfast|lunch|dinner|snack)$")
    category: Optional[str] = None
    mood: Optional[str] = None
    hunger: Optional[int] = Field(None, ge=1, le=10)
    fullness: Optional[int] = Field(None, ge=1, le=10)
    location: Optional[str] = None
    socialContext: Optional[str] = Field(None, pattern="^(alone|family|friends|colleagues|other)$")
    imageUrl: Optional[str] = None
    notes: Optional[str] = None
