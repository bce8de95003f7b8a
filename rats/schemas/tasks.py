"""
Pydantic models for collaborative tasks.
"""

from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class CreateTaskRequest(BaseModel):
    """POST /api/tasks"""
    content: Optional[str] = None
    visibility: Optional[str] = Field(None, pattern="^(private|public)$")


class UpdateTaskRequest(BaseModel):
    """PUT /api/tasks/{id}"""
    content: Optional[str] = None
    isCompleted: Optional[bool] = None


class InviteRequest(BaseModel):
    """POST /api/tasks/{id}/invite"""
    usernameToInvite: str = Field(..., min_length=1)


class AcceptCollabRequest(BaseModel):
    """POST /api/tasks/{id}/accept-collab"""
    userIdToAccept: str = Field(..., min_length=1)
