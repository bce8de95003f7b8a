"""
Pydantic models for the AI assistant endpoints.
"""

from typing import Optional, List, Any
from pydantic import BaseModel, Field


class MeditationHistoryInput(BaseModel):
    totalSessions: Optional[int] = None
    totalMinutes: Optional[int] = None
    recentCategories: Optional[List[str]] = None
    preferredDuration: Optional[int] = None


class GuidanceContextInput(BaseModel):
    userMood: Optional[str] = None
    meditationHistory: Optional[MeditationHistoryInput] = None
    timeOfDay: Optional[str] = None
    userGoals: Optional[List[str]] = None


# =============================================================================
# Request Schemas
# =============================================================================

class ChatRequest(BaseModel):
    """POST /api/ai/chat"""
    query: Optional[str] = None


class MeditationGuidanceRequest(BaseModel):
    """POST /api/ai/meditation-guidance"""
    prompt: Optional[str] = None
    context: Optional[GuidanceContextInput] = None


class GenerateMeditationRequest(BaseModel):
    """POST /api/ai/generate-meditation"""
    theme: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1, le=120)
    focus: str = Field(..., min_length=1)


class AnalyzeProgressRequest(BaseModel):
    """POST /api/ai/analyze-progress"""
    progressData: Any = None


class SleepStoryIdeasRequest(BaseModel):
    """POST /api/ai/sleep-story-ideas"""
    mood: Optional[str] = None
