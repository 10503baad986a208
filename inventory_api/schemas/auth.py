from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="user", min_length=1, max_length=50)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: int
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: UserProfile


class TokenClaims(BaseModel):
    """Claims carried by an access token."""
    id: int
    email: str
    role: str
