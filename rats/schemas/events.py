"""
Pydantic models for events and reminders.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


EVENT_TYPE_PATTERN = "^(birthday|anniversary|holiday|other)$"


class RecipientContactInput(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None


class SocialMediaHandlesInput(BaseModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    whatsapp: Optional[str] = None


# =============================================================================
# Request Schemas
# =============================================================================

class CreateEventRequest(BaseModel):
    """POST /api/events"""
    title: str = Field(..., min_length=1)
    eventType: str = Field(..., pattern=EVENT_TYPE_PATTERN)
    date: datetime
    recipientName: str = Field(..., min_length=1)
    recipientRelation: str = Field(..., min_length=1)
    recipientContact: Optional[RecipientContactInput] = None
    socialMediaHandles: Optional[SocialMediaHandlesInput] = None
    notes: Optional[str] = None
    reminderDays: Optional[List[int]] = None
    isRecurring: Optional[bool] = None


class UpdateEventRequest(BaseModel):
    """PUT /api/events/{id}; omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1)
    eventType: Optional[str] = Field(None, pattern=EVENT_TYPE_PATTERN)
    date: Optional[datetime] = None
    recipientName: Optional[str] = Field(None, min_length=1)
    recipientRelation: Optional[str] = Field(None, min_length=1)
    recipientContact: Optional[RecipientContactInput] = None
    socialMediaHandles: Optional[SocialMediaHandlesInput] = None
    notes: Optional[str] = None
    reminderDays: Optional[List[int]] = None
    isRecurring: Optional[bool] = None
    isActive: Optional[bool] = None


class TestMessageRequest(BaseModel):
    """POST /api/events/{id}/test-message"""
    platform: str = Field(..., pattern="^(email|whatsapp|instagram|facebook|twitter)$")
