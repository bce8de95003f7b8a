"""
Pydantic models for community posts.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class CreatePostRequest(BaseModel):
    """POST /api/posts; event fields are kept only for type "event"."""
    content: str = Field(..., min_length=1)
    type: Optional[str] = Field(None, pattern="^(general|event)$")
    eventDate: Optional[datetime] = None
    location: Optional[str] = None
    imageUrl: Optional[str] = None
    linkUrl: Optional[str] = None


class CommentRequest(BaseModel):
    """POST /api/posts/{id}/comment"""
    text: str = Field(..., min_length=1)
