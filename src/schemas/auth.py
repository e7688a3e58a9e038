"""Authentication schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

# Whitespace-only names are rejected rather than stored empty
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserSignup(BaseModel):
    """User signup request."""

    email: EmailStr = Field(..., max_length=255)
    name: Name
    password: str = Field(..., min_length=6, max_length=72)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    # No upper bound: an over-long wrong password is still just wrong
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Profile update request; omitted fields stay unchanged."""

    email: EmailStr | None = Field(None, max_length=255)
    name: Name | None = None


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    created_at: datetime


class ProfileResponse(UserResponse):
    """Current user's profile."""

    updated_at: datetime
    post_count: int = 0


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    message: str
    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class ProfileEnvelope(BaseModel):
    message: str | None = None
    user: ProfileResponse


class MessageResponse(BaseModel):
    message: str
