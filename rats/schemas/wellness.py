"""
Pydantic models for the daily wellness log.
"""

from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class WellnessLogRequest(BaseModel):
    """POST /api/wellness"""
    mood: Optional[str] = Field(None, pattern="^(sad|neutral|happy|excited)$")
    sleepHours: Optional[float] = Field(None, ge=0, le=24)
    waterIntake: Optional[float] = Field(None, ge=0)
    activity: Optional[str] = None
