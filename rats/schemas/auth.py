"""
Pydantic models for registration and login.
"""

from pydantic import BaseModel, Field, EmailStr


# =============================================================================
# Request Schemas
# =============================================================================

class RegisterRequest(BaseModel):
    """POST /api/auth/register"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=50)


class LoginRequest(BaseModel):
    """POST /api/auth/login"""
    email: EmailStr
    password: str = Field(..., min_length=1)
