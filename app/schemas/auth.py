from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Email + password login"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    success: bool
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user: UserResponse
    message: Optional[str] = None
