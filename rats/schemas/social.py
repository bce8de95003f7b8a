"""
Pydantic models for social media posting.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class SchedulePostRequest(BaseModel):
    """POST /api/social-posts/schedule"""
    content: str = Field(..., min_length=1)
    scheduledFor: datetime
    platform: str = Field(default="instagram", pattern="^(instagram|facebook|twitter|whatsapp)$")
    imageUrl: Optional[str] = None
    eventId: Optional[str] = None
