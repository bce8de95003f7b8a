"""
Pydantic models for user profile endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SocialLinksInput(BaseModel):
    """Partial socialLinks; omitted keys keep their stored value."""
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None


# =============================================================================
# Request Schemas
# =============================================================================

class UpdateGoalRequest(BaseModel):
    """PUT /api/users/goal"""
    dailyCalorieGoal: int = Field(..., description="Negative values are rejected with 400")


class UpdateProfileRequest(BaseModel):
    """PUT /api/users/profile"""
    profilePictureUrl: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    socialLinks: Optional[SocialLinksInput] = None
