"""
Pydantic models for meditation endpoints.
"""

from typing import Optional, List
from pydantic import BaseModel, Field


CONTENT_TYPE_PATTERN = "^(Meditation|SleepContent)$"
MOOD_PATTERN = "^(stressed|anxious|neutral|calm|happy)$"


# =============================================================================
# Request Schemas
# =============================================================================

class RecordProgressRequest(BaseModel):
    """POST /api/meditation/progress"""
    meditationId: str
    contentType: str = Field(..., pattern=CONTENT_TYPE_PATTERN)
    duration: int = Field(..., ge=1, description="Minutes")
    mood: str = Field(..., pattern=MOOD_PATTERN)
    moodAfter: Optional[str] = Field(None, pattern=MOOD_PATTERN)
    notes: Optional[str] = None


class CreateCustomMeditationRequest(BaseModel):
    """POST /api/meditation/custom"""
    name: str = Field(..., min_length=1)
    introVoice: str = Field(..., pattern="^(male|female|none)$")
    breathworkType: str = Field(..., pattern="^(box|4-7-8|deep|alternate-nostril|none)$")
    backgroundSound: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1)


class UpdateCustomMeditationRequest(BaseModel):
    """PUT /api/meditation/custom/{id}"""
    name: Optional[str] = Field(None, min_length=1)
    introVoice: Optional[str] = Field(None, pattern="^(male|female|none)$")
    breathworkType: Optional[str] = Field(None, pattern="^(box|4-7-8|deep|alternate-nostril|none)$")
    backgroundSound: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    isFavorite: Optional[bool] = None


class ContentTypeRequest(BaseModel):
    """POST /api/meditation/{id}/save and /download"""
    contentType: Optional[str] = Field(None, pattern=CONTENT_TYPE_PATTERN)


class MeditationPreferencesRequest(BaseModel):
    """PUT /api/meditation/preferences"""
    goals: Optional[List[str]] = None
    preferredDuration: Optional[int] = Field(None, ge=1)
    experienceLevel: Optional[str] = Field(None, pattern="^(beginner|intermediate|advanced)$")
    preferredTime: Optional[str] = None
    reminders: Optional[bool] = None
    reminderTime: Optional[str] = None
